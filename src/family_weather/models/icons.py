# src/family_weather/models/icons.py
from __future__ import annotations
from enum import Enum
from typing import List


class IconToken(str, Enum):
    """요약 카드 아이콘 어휘. 생성 스키마와 렌더러가 이 enum 하나만 참조한다."""

    CLOUD = "cloud"
    CLOUD_DRIZZLE = "cloud-drizzle"
    CLOUD_FOG = "cloud-fog"
    CLOUD_HAIL = "cloud-hail"
    CLOUD_LIGHTNING = "cloud-lightning"
    CLOUD_MOON = "cloud-moon"
    CLOUD_MOON_RAIN = "cloud-moon-rain"
    CLOUD_RAIN = "cloud-rain"
    CLOUD_RAIN_WIND = "cloud-rain-wind"
    CLOUD_SNOW = "cloud-snow"
    CLOUD_SUN = "cloud-sun"
    CLOUD_SUN_RAIN = "cloud-sun-rain"
    CLOUDY = "cloudy"
    MOON = "moon"
    MOON_STAR = "moon-star"
    SNOWFLAKE = "snowflake"
    SUN = "sun"
    SUN_DIM = "sun-dim"
    SUN_MEDIUM = "sun-medium"
    SUN_MOON = "sun-moon"
    SUN_SNOW = "sun-snow"
    THERMOMETER_SNOWFLAKE = "thermometer-snowflake"
    THERMOMETER_SUN = "thermometer-sun"
    TORNADO = "tornado"
    UMBRELLA = "umbrella"
    WIND = "wind"


ICON_VOCABULARY: List[str] = [t.value for t in IconToken]

MIN_ICONS = 1
MAX_ICONS = 5
