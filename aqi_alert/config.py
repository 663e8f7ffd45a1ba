# file: aqi_alert/config.py

import os
import logging
import pytz
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict
from typing import Dict, Mapping, Optional

DEFAULT_ENV_FILE = ".env"
DEFAULT_HTTP_TIMEOUT_SEC = 30
CONFIG_KEYS = ("WEBHOOK_KEY", "DINGTALK_ACCESS_TOKEN", "HTTP_TIMEOUT_SEC", "ALERT_TIMEZONE")


class ConfigError(Exception):
    """Raised when the alerter cannot run with the resolved configuration."""


class AlertConfig(BaseModel):
    """Process-wide settings, resolved once at startup."""

    model_config = ConfigDict(frozen=True)

    webhook_key: str = ""
    dingtalk_access_token: str = ""
    http_timeout_sec: int = DEFAULT_HTTP_TIMEOUT_SEC
    alert_timezone: Optional[str] = None

    @property
    def tzinfo(self):
        """Display timezone for alert timestamps; None means system local time."""
        return pytz.timezone(self.alert_timezone) if self.alert_timezone else None


def read_env_file(env_file: str) -> Dict[str, str]:
    """Parse a key=value file. Raises OSError or UnicodeDecodeError when it cannot be read."""
    with open(env_file, "r", encoding="utf-8") as stream:
        values = dotenv_values(stream=stream)
    return {key: value for key, value in values.items() if key in CONFIG_KEYS and value is not None}


def _parse_timeout(raw: str) -> int:
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_SEC
    try:
        timeout = int(raw)
    except ValueError:
        timeout = 0
    if timeout <= 0:
        logging.warning(f"Ignoring invalid HTTP_TIMEOUT_SEC={raw!r}, using {DEFAULT_HTTP_TIMEOUT_SEC}s")
        return DEFAULT_HTTP_TIMEOUT_SEC
    return timeout


def resolve_config(env_file: str = DEFAULT_ENV_FILE, environ: Optional[Mapping[str, str]] = None) -> AlertConfig:
    """Resolve settings from the env file, or from the environment if the file is unreadable."""
    try:
        source: Mapping[str, str] = read_env_file(env_file)
        logging.info(f"Loaded configuration from {env_file}")
    except (OSError, UnicodeDecodeError) as e:
        logging.warning(f"Cannot read {env_file} ({e}), falling back to environment variables")
        source = os.environ if environ is None else environ

    def get(key: str) -> str:
        return (source.get(key) or "").strip()

    timezone = get("ALERT_TIMEZONE") or None
    if timezone and timezone not in pytz.all_timezones_set:
        raise ConfigError(f"Unknown ALERT_TIMEZONE: {timezone}")

    config = AlertConfig(
        webhook_key=get("WEBHOOK_KEY"),
        dingtalk_access_token=get("DINGTALK_ACCESS_TOKEN"),
        http_timeout_sec=_parse_timeout(get("HTTP_TIMEOUT_SEC")),
        alert_timezone=timezone,
    )
    if not config.webhook_key and not config.dingtalk_access_token:
        raise ConfigError("No webhook configured: set WEBHOOK_KEY and/or DINGTALK_ACCESS_TOKEN")
    return config
