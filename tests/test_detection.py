import pytest

from aqi_alert.detection import (IGNORED_STATION_NAMES, NO_DATA_SENTINEL, find_problem_stations,
                                 format_missing_factors, has_missing_data, is_ignored, is_missing,
                                 missing_factors)
from tests.conftest import make_reading


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n", "—", " — "])
def test_missing_values(value):
    assert is_missing(value)


@pytest.mark.parametrize("value", ["0", "56", "0.8", "-", "N/A", "——", "<5"])
def test_present_values(value):
    assert not is_missing(value)


def test_sentinel_is_em_dash():
    assert NO_DATA_SENTINEL == "—"


def test_complete_reading_has_no_missing_data():
    reading = make_reading()
    assert not has_missing_data(reading)
    assert missing_factors(reading) == []


def test_missing_factors_keep_fixed_order():
    reading = make_reading(CO="", SO2="—", AQI=None, PM2_5=" ", O3="12")
    assert missing_factors(reading) == ["AQI", "PM2.5", "SO2", "CO"]


def test_absent_keys_are_missing():
    reading = make_reading()
    stripped = reading.model_dump(by_alias=True)
    del stripped["PM10"]
    del stripped["NO2"]
    assert missing_factors(type(reading).model_validate(stripped)) == ["PM10", "NO2"]


def test_all_factors_missing():
    reading = make_reading(AQI="", PM2_5="", PM10="", O3="", NO2="", SO2="", CO="")
    assert missing_factors(reading) == ["AQI", "PM2.5", "PM10", "O3", "NO2", "SO2", "CO"]


def test_format_missing_factors():
    assert format_missing_factors(["AQI", "PM2.5", "CO"]) == "AQI、PM2.5、CO"
    assert format_missing_factors(["O3"]) == "O3"
    assert format_missing_factors([]) == "无"


def test_ignore_match_is_exact_after_trim():
    assert is_ignored(make_reading(PositionName="帽峰山森林公园"))
    assert is_ignored(make_reading(PositionName="  帽峰山 "))
    assert not is_ignored(make_reading(PositionName="帽峰山森林"))
    assert not is_ignored(make_reading(PositionName=None))


def test_ignore_list_holds_decoded_names():
    assert "帽峰山" in IGNORED_STATION_NAMES
    assert "帽峰山森林公园" in IGNORED_STATION_NAMES


def test_ignored_station_never_reported():
    readings = [
        make_reading(PositionName="A", AQI=""),
        make_reading(PositionName="帽峰山森林公园", AQI="", PM2_5="", PM10="", O3="", NO2="", SO2="", CO=""),
    ]
    problems = find_problem_stations(readings, ignored={"帽峰山森林公园"})
    assert [p.position_name for p in problems] == ["A"]
    assert missing_factors(problems[0]) == ["AQI"]


def test_problem_stations_keep_fetch_order():
    readings = [
        make_reading(PositionName="C", CO="—"),
        make_reading(PositionName="ok"),
        make_reading(PositionName="A", AQI=""),
        make_reading(PositionName="B", NO2=None),
    ]
    problems = find_problem_stations(readings)
    assert [p.position_name for p in problems] == ["C", "A", "B"]
    assert find_problem_stations(readings) == problems


def test_no_problem_stations():
    assert find_problem_stations([make_reading(), make_reading(PositionName="x")]) == []
    assert find_problem_stations([]) == []


def test_unnamed_station_is_reported():
    problems = find_problem_stations([make_reading(PositionName=None, AQI="")])
    assert len(problems) == 1


def test_filtering_does_not_mutate_readings():
    reading = make_reading(PositionName="A", AQI="")
    before = reading.model_dump()
    find_problem_stations([reading])
    missing_factors(reading)
    assert reading.model_dump() == before
