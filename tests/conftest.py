"""
Shared pytest fixtures: station readings and a mocked aiohttp session.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from aqi_alert.models import StationReading

COMPLETE_READING = {
    "PositionName": "广雅中学",
    "Quality": "良",
    "AQI": "56",
    "PM2_5": "39",
    "PM10": "61",
    "O3": "42",
    "NO2": "35",
    "SO2": "7",
    "CO": "0.8",
    "Latitude": "23.1422",
    "Longitude": "113.2347",
    "TimePoint": "2025-01-01T10:00:00+08:00",
}


def make_reading(**overrides) -> StationReading:
    """Complete reading with upstream-named fields overridden (e.g. AQI="", PM2_5=None)."""
    data = dict(COMPLETE_READING)
    data.update(overrides)
    return StationReading.model_validate(data)


def mock_response(status=200, json_data=None, text=""):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    return response


def mock_raw_response(status, raw: bytes):
    """Response whose text() decodes raw bytes as UTF-8 the way aiohttp does."""
    response = mock_response(status)

    async def text(encoding=None, errors="strict"):
        return raw.decode(encoding or "utf-8", errors)

    response.text = AsyncMock(side_effect=text)
    return response


def response_context(response):
    """Async context manager yielding the given response, like session.get(...)."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture
def session():
    """aiohttp.ClientSession stand-in; tests wire up session.get / session.post."""
    return MagicMock()
