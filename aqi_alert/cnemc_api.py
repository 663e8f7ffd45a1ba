# file: aqi_alert/cnemc_api.py

import asyncio
import logging
import ssl
from typing import Any, List

import aiohttp
import certifi
from pydantic import TypeAdapter, ValidationError

from aqi_alert.models import StationReading

CNEMC_URL = "https://air.cnemc.cn:18007/CityData/GetAQIDataPublishLive?cityName=%E5%B9%BF%E5%B7%9E%E5%B8%82"
ENVELOPE_KEYS = ("Data", "data", "Rows", "rows", "Table", "table", "Records", "records")

_readings_adapter = TypeAdapter(List[StationReading])


class FetchError(Exception):
    """The upstream feed could not be fetched or decoded."""


def create_ssl_context() -> ssl.SSLContext:
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    ssl_context.set_ciphers("DEFAULT@SECLEVEL=1")  # air.cnemc.cn still negotiates legacy ciphers
    return ssl_context


def unwrap_station_list(payload: Any) -> List[Any]:
    """Return the station array from a bare list or a {"Data": [...]}-style envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ENVELOPE_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    raise FetchError(f"Unexpected response shape: {type(payload).__name__}")


async def fetch_station_readings(session: aiohttp.ClientSession, timeout: int = 30) -> List[StationReading]:
    """Fetch the live station readings for Guangzhou. Any failure aborts with FetchError."""
    try:
        async with session.get(CNEMC_URL, timeout=aiohttp.ClientTimeout(total=timeout)) as response:
            if response.status != 200:
                body = await response.text(errors="replace")
                raise FetchError(f"CNEMC returned HTTP {response.status}: {body[:2048]}")
            payload = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(f"Error fetching CNEMC data: {e!r}") from e
    except ValueError as e:
        raise FetchError(f"CNEMC response is not valid JSON: {e}") from e

    try:
        readings = _readings_adapter.validate_python(unwrap_station_list(payload))
    except ValidationError as e:
        raise FetchError(f"Cannot decode CNEMC station list: {e}") from e

    logging.info(f"Fetched {len(readings)} station readings from CNEMC")
    return readings
