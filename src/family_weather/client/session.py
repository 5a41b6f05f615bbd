# src/family_weather/client/session.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol

from family_weather.client.family import FamilySettings
from family_weather.client.location import LocationResolver, LocationState, LocationStatus
from family_weather.client.query_cache import QueryCache
from family_weather.client.relay import RelayError
from family_weather.core import settings
from family_weather.utils.dayparts import DayPart, local_now, resolve_day_part
from family_weather.weather.types import Coordinate

logger = logging.getLogger(__name__)


class WeatherBackend(Protocol):
    async def hourly_forecast(self, *, lat: float, lng: float, hours: int) -> Dict[str, Any]: ...

    async def summarize(
        self, *, forecast: Dict[str, Any], day_part: str, timezone: str, local_time: str
    ) -> List[Dict[str, Any]]: ...

    async def advise(
        self,
        *,
        forecast: Dict[str, Any],
        day_part: str,
        timezone: str,
        local_time: str,
        family_context: Optional[str] = None,
    ) -> str: ...


@dataclass
class WeatherView:
    """화면 한 장 분량의 상태. notice 는 위치/예보 오류 (계속 표시)."""
    location: LocationState
    day_part: Optional[DayPart] = None
    cards: Optional[List[Dict[str, Any]]] = None
    advisory: Optional[str] = None
    notice: Optional[str] = None
    summary_error: Optional[str] = None
    advisory_error: Optional[str] = None


class WeatherSession:
    """
    위치 → 예보 → (요약 ∥ 조언) 흐름과 캐시를 관리한다.
    - 예보: (좌표, 시간 수) 키, 10분
    - 요약: (구간, 좌표, 시간 수, 타임존, 로컬 날짜) 키, 15분
    - 조언: 요약 키 + 가족 정보, 15분
    raw forecast 자체는 키에 넣지 않는다.
    """

    def __init__(
        self,
        backend: WeatherBackend,
        location: LocationResolver,
        family: FamilySettings,
        *,
        timezone: Optional[str] = None,
        hours: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        cache: Optional[QueryCache] = None,
    ) -> None:
        self.backend = backend
        self.location = location
        self.family = family
        self.timezone = timezone or settings.CLIENT_TZ
        self.hours = hours or settings.DEFAULT_FORECAST_HOURS
        self._clock = clock or (lambda: local_now(self.timezone))
        self.cache = cache or QueryCache()
        self.view: Optional[WeatherView] = None
        self._generation = 0

    async def refresh(self) -> WeatherView:
        """새 화면 상태 계산. 도중에 더 새로운 refresh 가 시작되면 이 결과는 표시하지 않는다."""
        self._generation += 1
        generation = self._generation
        view = await self._build()
        if generation == self._generation:
            self.view = view
        else:
            logger.info("↩️ 오래된 결과 폐기 (generation %s < %s)", generation, self._generation)
        return view

    async def set_family_context(self, value: str) -> WeatherView:
        self.family.set_family(value)
        return await self.refresh()

    async def _build(self) -> WeatherView:
        loc = self.location.state
        if loc.status is LocationStatus.LOADING:
            loc = await self.location.resolve()
        if loc.status is not LocationStatus.READY or loc.coordinate is None:
            return WeatherView(location=loc, notice=loc.error or "Location unavailable.")

        coord = loc.coordinate
        now = self._clock()
        day_part = resolve_day_part(now)
        local_time = now.isoformat(timespec="seconds")

        try:
            forecast = await self.cache.fetch(
                ("hourlyWeather", coord.latitude, coord.longitude, self.hours),
                lambda: self._fetch_forecast(coord),
                settings.FORECAST_STALE_S,
            )
        except RelayError as e:
            logger.error("⛔️ 예보 조회 실패: %s", e)
            return WeatherView(location=loc, day_part=day_part, notice=f"Weather unavailable: {e.error}")

        base_key = (day_part.value, coord.latitude, coord.longitude, self.hours, self.timezone, now.date().isoformat())
        family_context = self.family.family
        common = {
            "forecast": forecast,
            "day_part": day_part.value,
            "timezone": self.timezone,
            "local_time": local_time,
        }

        summary, advisory = await asyncio.gather(
            self.cache.fetch(
                ("weatherData", *base_key),
                lambda: self.backend.summarize(**common),
                settings.DERIVED_STALE_S,
            ),
            self.cache.fetch(
                ("weatherTips", *base_key, family_context),
                lambda: self.backend.advise(**common, family_context=family_context),
                settings.DERIVED_STALE_S,
            ),
            return_exceptions=True,
        )

        view = WeatherView(location=loc, day_part=day_part)
        if isinstance(summary, RelayError):
            logger.warning("⚠️ 요약 카드 생략: %s", summary)
            view.summary_error = summary.error
        elif isinstance(summary, BaseException):
            raise summary
        else:
            view.cards = summary

        if isinstance(advisory, RelayError):
            logger.warning("⚠️ 조언 생략: %s", advisory)
            view.advisory_error = advisory.error
        elif isinstance(advisory, BaseException):
            raise advisory
        else:
            view.advisory = advisory
        return view

    async def _fetch_forecast(self, coord: Coordinate) -> Dict[str, Any]:
        # 예보 조회만 1회 재시도
        try:
            return await self.backend.hourly_forecast(lat=coord.latitude, lng=coord.longitude, hours=self.hours)
        except RelayError as e:
            if not e.retryable:
                raise
            logger.warning("🔁 예보 조회 재시도: %s", e)
            return await self.backend.hourly_forecast(lat=coord.latitude, lng=coord.longitude, hours=self.hours)
