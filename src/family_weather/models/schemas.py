# src/family_weather/models/schemas.py
from __future__ import annotations
from typing import Any, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from family_weather.core import settings
from family_weather.models.icons import IconToken, MAX_ICONS, MIN_ICONS
from family_weather.utils.dayparts import DayPart, parse_local_time

# ===== Summary card (LLM 이 무조건 맞춰야 하는 스키마) =====

class TemperatureRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: float = Field(..., description="Lowest temperature in the window, Celsius")
    high: float = Field(..., description="Highest temperature in the window, Celsius")

    @field_validator("low", "high", mode="before")
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        # "12" 같은 문자열이나 bool 은 숫자로 보지 않는다
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("must be a number")
        return v

    @model_validator(mode="after")
    def _ordered(self):
        if self.low > self.high:
            raise ValueError(f"range.low ({self.low}) must be <= range.high ({self.high})")
        return self


class WeatherSummaryCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: DayPart = Field(..., description="One of: morning, afternoon, evening")
    range: TemperatureRange
    icon: List[IconToken] = Field(
        ...,
        min_length=MIN_ICONS,
        max_length=MAX_ICONS,
        description="1-5 icon tokens, left to right, most important first",
    )
    warning: List[str] = Field(default_factory=list, description="Short hazard advisories, may be empty")


class SummaryEnvelope(BaseModel):
    """structured output 용 래퍼. relay 응답에서는 cards 만 내보낸다."""

    cards: List[WeatherSummaryCard] = Field(..., description="Exactly three cards: current day part and the next two")


# ===== Request =====

def check_timezone(value: str) -> str:
    value = (value or "").strip()
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"unknown IANA timezone: {value!r}")
    return value


def check_local_time(value: str) -> str:
    try:
        parse_local_time(value)
    except ValueError:
        raise ValueError(f"localTime must be ISO-8601, got {value!r}")
    return value.strip()


class HourlyForecastRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    hours: int = Field(default_factory=lambda: settings.DEFAULT_FORECAST_HOURS, ge=1, le=settings.MAX_FORECAST_HOURS)


class ForecastContext(BaseModel):
    """요약/조언 공통 입력. forecast 는 내부 구조를 검사하지 않는 opaque payload."""

    model_config = ConfigDict(populate_by_name=True)

    forecast: Any
    day_part: DayPart = Field(..., alias="dayPart")
    timezone: str
    local_time: str = Field(..., alias="localTime")

    @field_validator("forecast")
    @classmethod
    def _forecast_present(cls, v: Any) -> Any:
        # 0, false, "x" 같은 스칼라는 예보로 보지 않는다
        if not isinstance(v, (dict, list)) or not v:
            raise ValueError("forecast must be a non-empty object or array")
        return v

    @field_validator("timezone")
    @classmethod
    def _valid_timezone(cls, v: str) -> str:
        return check_timezone(v)

    @field_validator("local_time")
    @classmethod
    def _valid_local_time(cls, v: str) -> str:
        return check_local_time(v)


class SummaryRequest(ForecastContext):
    pass


class AdvisoryRequest(ForecastContext):
    family_context: Optional[str] = Field(default=None, alias="familyContext")


class BriefingRequest(BaseModel):
    """위치 → 예보 → 요약/조언을 한 번에 실행하는 요청"""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    hours: int = Field(default_factory=lambda: settings.DEFAULT_FORECAST_HOURS, ge=1, le=settings.MAX_FORECAST_HOURS)
    timezone: str
    local_time: str = Field(..., alias="localTime")
    day_part: Optional[DayPart] = Field(default=None, alias="dayPart")
    family_context: Optional[str] = Field(default=None, alias="familyContext")

    @field_validator("timezone")
    @classmethod
    def _valid_timezone(cls, v: str) -> str:
        return check_timezone(v)

    @field_validator("local_time")
    @classmethod
    def _valid_local_time(cls, v: str) -> str:
        return check_local_time(v)
