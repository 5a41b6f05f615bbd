# src/family_weather/weather/types.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Protocol

# 제공자 응답은 필드 구성이 바뀔 수 있으므로 타입을 고정하지 않는다
RawHourlyForecast = Dict[str, Any]


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class ForecastProvider(Protocol):
    async def hourly(self, *, lat: float, lng: float, hours: int) -> RawHourlyForecast: ...
