# file: aqi_alert/notifier.py

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Sequence
from urllib.parse import quote

import aiohttp

from aqi_alert.config import AlertConfig
from aqi_alert.formatters import build_dingtalk_payload, build_wecom_payload
from aqi_alert.models import StationReading

WECOM_WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key={credential}"
DINGTALK_WEBHOOK_URL = "https://oapi.dingtalk.com/robot/send?access_token={credential}"


class DispatchError(Exception):
    """Delivery to a single notification channel failed."""


class ChannelKind(Enum):
    WECOM = ("WeCom", WECOM_WEBHOOK_URL)
    DINGTALK = ("DingTalk", DINGTALK_WEBHOOK_URL)

    def __init__(self, label: str, url_template: str):
        self.label = label
        self.url_template = url_template

    def webhook_url(self, credential: str) -> str:
        return self.url_template.format(credential=quote(credential.strip(), safe=""))

    def credential(self, config: AlertConfig) -> str:
        if self is ChannelKind.WECOM:
            return config.webhook_key
        return config.dingtalk_access_token

    def build_payload(self, stations: Sequence[StationReading], alert_time: str) -> Dict[str, Any]:
        if self is ChannelKind.WECOM:
            payload = build_wecom_payload(stations, alert_time)
        else:
            payload = build_dingtalk_payload(stations, alert_time)
        return payload.model_dump(by_alias=True)


def _check_errcode(kind: ChannelKind, body: Any) -> None:
    # Both robots answer HTTP 200 and report rejections through errcode
    if not isinstance(body, dict):
        return
    errcode = body.get("errcode")
    if isinstance(errcode, (int, float)) and not isinstance(errcode, bool) and errcode != 0:
        raise DispatchError(f"{kind.label} webhook errcode={errcode}: {body.get('errmsg', '')}")


async def send_alert(session: aiohttp.ClientSession,
                     kind: ChannelKind,
                     stations: Sequence[StationReading],
                     credential: str,
                     alert_time: str,
                     timeout: int = 30) -> bool:
    """
    Post the alert for one channel.

    Returns False without touching the network when there is nothing to report or
    the channel has no credential, True once the webhook accepted the message.
    Raises DispatchError on any delivery failure.
    """
    if not stations or not credential.strip():
        return False

    payload = kind.build_payload(stations, alert_time)
    try:
        async with session.post(kind.webhook_url(credential), json=payload,
                                timeout=aiohttp.ClientTimeout(total=timeout)) as response:
            if response.status != 200:
                text = await response.text(errors="replace")
                raise DispatchError(f"{kind.label} webhook returned HTTP {response.status}: {text[:4096]}")
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = None
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise DispatchError(f"{kind.label} webhook request failed: {e!r}") from e

    _check_errcode(kind, body)
    return True


async def notify_all(session: aiohttp.ClientSession,
                     config: AlertConfig,
                     stations: Sequence[StationReading],
                     alert_time: str) -> Dict[ChannelKind, bool]:
    """Dispatch to every channel in turn; a failing channel never stops the next one."""
    outcomes: Dict[ChannelKind, bool] = {}
    for kind in ChannelKind:
        try:
            sent = await send_alert(session, kind, stations, kind.credential(config),
                                    alert_time, config.http_timeout_sec)
        except DispatchError as e:
            logging.error(f"Failed to send alert to {kind.label}: {e}")
            outcomes[kind] = False
            continue
        if sent:
            logging.info(f"Alert sent to {kind.label}")
            outcomes[kind] = True
        else:
            logging.debug(f"{kind.label} not configured, skipping")
    return outcomes
