#file: aqi_alert/utils.py

from datetime import datetime, tzinfo
from typing import Optional, Sequence

from aqi_alert.models import StationReading

UNKNOWN_TIME = "Unknown"
ALERT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_display_time(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an aware datetime to the display timezone (system local time when tz is None)."""
    if tz is None:
        return dt.astimezone()
    return dt.astimezone(tz)


def resolve_alert_time(stations: Sequence[StationReading], tz: Optional[tzinfo] = None) -> str:
    """Best-effort timestamp for the alert heading, taken from the first problem station."""
    if not stations:
        return UNKNOWN_TIME
    raw = (stations[0].time_point or "").strip()
    if not raw:
        return UNKNOWN_TIME

    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return raw

    if parsed.tzinfo is None:
        # CNEMC publishes offset-less wall-clock times; render them as they are
        return parsed.strftime(ALERT_TIME_FORMAT)
    return to_display_time(parsed, tz).strftime(ALERT_TIME_FORMAT)
