#file: aqi_alert/models.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional


class StationReading(BaseModel):
    """Latest published sample of one CNEMC monitoring station."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    position_name: Optional[str] = Field(None, alias="PositionName", description="Station name")
    quality: Optional[str] = Field(None, alias="Quality", description="Overall quality label")
    aqi: Optional[str] = Field(None, alias="AQI", description="Air quality index")
    o3: Optional[str] = Field(None, alias="O3", description="O3 concentration (µg/m³)")
    no2: Optional[str] = Field(None, alias="NO2", description="NO2 concentration (µg/m³)")
    pm10: Optional[str] = Field(None, alias="PM10", description="PM10 concentration (µg/m³)")
    pm25: Optional[str] = Field(None, alias="PM2_5", description="PM2.5 concentration (µg/m³)")
    so2: Optional[str] = Field(None, alias="SO2", description="SO2 concentration (µg/m³)")
    co: Optional[str] = Field(None, alias="CO", description="CO concentration (mg/m³)")
    latitude: Optional[str] = Field(None, alias="Latitude")
    longitude: Optional[str] = Field(None, alias="Longitude")
    time_point: Optional[str] = Field(None, alias="TimePoint", description="Observation time")
    station_code: Optional[str] = Field(None, alias="StationCode")
    primary_pollutant: Optional[str] = Field(None, alias="PrimaryPollutant")

    @field_validator("*", mode="before")
    @classmethod
    def absent_on_unexpected_shape(cls, value: Any) -> Optional[str]:
        """Keep strings, stringify numbers, treat everything else as absent."""
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None


class WeComMarkdown(BaseModel):
    content: str


class WeComPayload(BaseModel):
    """WeCom group robot markdown message."""

    msgtype: str = "markdown"
    markdown: WeComMarkdown


class DingTalkMarkdown(BaseModel):
    title: str
    text: str


class DingTalkAt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    at_mobiles: List[str] = Field(default_factory=list, alias="atMobiles")
    at_user_ids: List[str] = Field(default_factory=list, alias="atUserIds")
    is_at_all: bool = Field(False, alias="isAtAll")


class DingTalkPayload(BaseModel):
    """DingTalk custom robot markdown message; the at block never mentions anyone."""

    msgtype: str = "markdown"
    markdown: DingTalkMarkdown
    at: DingTalkAt = Field(default_factory=DingTalkAt)
