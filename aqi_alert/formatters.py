# file: aqi_alert/formatters.py

from typing import Sequence

from aqi_alert.detection import format_missing_factors, missing_factors
from aqi_alert.models import (DingTalkMarkdown, DingTalkPayload, StationReading, WeComMarkdown,
                              WeComPayload)

ALERT_TITLE = "广州市空气质量监测站点数据异常警报"
ALERT_INTRO = "以下站点存在数据缺失问题，请及时关注：\n\n"
ALERT_ADVISORY = "> 请相关技术人员尽快检查设备状态和数据传输链路。（缺失数据基于总站发布平台）"
UNKNOWN_STATION = "Unknown"


def station_name(station: StationReading) -> str:
    return (station.position_name or UNKNOWN_STATION).strip()


def build_wecom_payload(stations: Sequence[StationReading], alert_time: str) -> WeComPayload:
    """WeCom markdown card: one content blob, warning-coloured factor lines."""
    content = f"## 🚨 {ALERT_TITLE}({alert_time})\n"
    content += ALERT_INTRO
    for station in stations:
        content += (
            f"**{station_name(station)}**\n"
            f"<font color=\"warning\">缺失因子: {format_missing_factors(missing_factors(station))}</font>\n\n"
        )
    content += ALERT_ADVISORY
    return WeComPayload(markdown=WeComMarkdown(content=content))


def build_dingtalk_payload(stations: Sequence[StationReading], alert_time: str) -> DingTalkPayload:
    """DingTalk markdown message: separate title, nested list body, empty mention block."""
    text = f"### 🚨 {ALERT_TITLE}\n"
    text += f"#### {alert_time}\n"
    text += ALERT_INTRO
    for station in stations:
        text += (
            f"- **{station_name(station)}**\n"
            f"  - 缺失因子: {format_missing_factors(missing_factors(station))}\n\n"
        )
    text += ALERT_ADVISORY
    return DingTalkPayload(markdown=DingTalkMarkdown(title=f"{ALERT_TITLE}({alert_time})", text=text))
