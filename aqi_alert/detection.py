# file: aqi_alert/detection.py

from typing import Iterable, List, Optional

from aqi_alert.models import StationReading

# Stations excluded from alerting regardless of data completeness (exact match on trimmed name)
IGNORED_STATION_NAMES = frozenset({
    "帽峰山",
    "帽峰山森林公园",
})

# CNEMC publishes an em dash for pollutants with no current data
NO_DATA_SENTINEL = "—"

# Display label -> StationReading attribute, in the order shown in alerts
REQUIRED_FACTORS = (
    ("AQI", "aqi"),
    ("PM2.5", "pm25"),
    ("PM10", "pm10"),
    ("O3", "o3"),
    ("NO2", "no2"),
    ("SO2", "so2"),
    ("CO", "co"),
)

FACTOR_SEPARATOR = "、"
NO_FACTORS_PLACEHOLDER = "无"


def is_missing(value: Optional[str]) -> bool:
    """A value is missing if absent, blank, or the upstream "no data" dash."""
    if value is None:
        return True
    value = value.strip()
    return value == "" or value == NO_DATA_SENTINEL


def is_ignored(reading: StationReading, ignored: Iterable[str] = IGNORED_STATION_NAMES) -> bool:
    if reading.position_name is None:
        return False
    return reading.position_name.strip() in ignored


def missing_factors(reading: StationReading) -> List[str]:
    return [label for label, attr in REQUIRED_FACTORS if is_missing(getattr(reading, attr))]


def has_missing_data(reading: StationReading) -> bool:
    return any(is_missing(getattr(reading, attr)) for _, attr in REQUIRED_FACTORS)


def format_missing_factors(factors: List[str]) -> str:
    if not factors:
        return NO_FACTORS_PLACEHOLDER
    return FACTOR_SEPARATOR.join(factors)


def find_problem_stations(readings: Iterable[StationReading],
                          ignored: Iterable[str] = IGNORED_STATION_NAMES) -> List[StationReading]:
    """Readings outside the ignore list with at least one missing required factor, in fetch order."""
    ignored = frozenset(ignored)
    return [
        reading
        for reading in readings
        if not is_ignored(reading, ignored) and has_missing_data(reading)
    ]
