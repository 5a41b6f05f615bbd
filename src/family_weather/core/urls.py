# src/family_weather/core/urls.py
from __future__ import annotations
import os
from enum import Enum
from typing import Final

# 베이스 도메인은 .env로 덮어쓸 수 있게
GOOGLE_WEATHER_BASE: Final[str] = os.getenv("GOOGLE_WEATHER_BASE", "https://weather.googleapis.com")


class GoogleWeatherEndpoint(str, Enum):
    # 시간별 예보 (최대 240시간)
    HOURLY = "/v1/forecast/hours:lookup"


def google_weather_url(endpoint: GoogleWeatherEndpoint) -> str:
    """
    Google Weather endpoint 빌더.
    ex) google_weather_url(GoogleWeatherEndpoint.HOURLY)
        -> "https://weather.googleapis.com/v1/forecast/hours:lookup"
    """
    return f"{GOOGLE_WEATHER_BASE}{endpoint.value}"
