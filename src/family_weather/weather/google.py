# src/family_weather/weather/google.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from family_weather.core import settings
from family_weather.core.errors import ConfigError, UpstreamError
from family_weather.core.urls import GoogleWeatherEndpoint, google_weather_url
from family_weather.weather.types import ForecastProvider, RawHourlyForecast

logger = logging.getLogger(__name__)

# 240시간 / 기본 pageSize 24 = 10 페이지
MAX_PAGES = 10


class GoogleHourlyForecastProvider(ForecastProvider):
    """
    Google Weather forecast.hours:lookup 사용. 응답은 가공하지 않고 그대로 전달.
    페이지가 나뉘면 nextPageToken 을 따라가 forecastHours 를 이어 붙인다.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.GOOGLE_WEATHER_API_KEY
        self.timeout = timeout if timeout is not None else settings.WEATHER_TIMEOUT_S
        self._transport = transport

    async def hourly(self, *, lat: float, lng: float, hours: int) -> RawHourlyForecast:
        # 키 누락은 요청 단위 설정 오류 (프로세스는 계속 동작)
        if not self.api_key:
            raise ConfigError(detail="GOOGLE_WEATHER_API_KEY not set")

        url = google_weather_url(GoogleWeatherEndpoint.HOURLY)
        params: Dict[str, Any] = {
            "key": self.api_key,
            "location.latitude": lat,
            "location.longitude": lng,
            "hours": hours,
            "pageSize": hours,
        }

        pages: List[Dict[str, Any]] = []
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                while len(pages) < MAX_PAGES:
                    r = await client.get(url, params=params, headers={"Accept": "application/json"})
                    if r.status_code != 200:
                        logger.error("⛔️ Google Weather API error %s: %s", r.status_code, r.text[:500])
                        raise UpstreamError("Failed to fetch weather data.", detail=r.text)
                    page = r.json()
                    if not isinstance(page, dict):
                        raise UpstreamError("Weather provider returned an unexpected payload", detail=r.text[:500])
                    pages.append(page)
                    token = page.get("nextPageToken")
                    if not token:
                        break
                    params["pageToken"] = token
        except httpx.TimeoutException as e:
            raise UpstreamError("Weather provider timed out", detail=str(e))
        except httpx.RequestError as e:
            raise UpstreamError("Failed to fetch weather data.", detail=f"{type(e).__name__}: {e}")
        except ValueError as e:
            raise UpstreamError("Weather provider returned invalid JSON", detail=str(e))

        forecast = _merge_pages(pages)
        logger.info("🌦️ hourly forecast 수신: %s시간 (%.4f, %.4f)", len(forecast.get("forecastHours", [])), lat, lng)
        return forecast


def _merge_pages(pages: List[Dict[str, Any]]) -> RawHourlyForecast:
    merged = dict(pages[0])
    if len(pages) > 1:
        hours_acc: List[Any] = []
        for page in pages:
            hours_acc.extend(page.get("forecastHours", []))
        merged["forecastHours"] = hours_acc
    merged.pop("nextPageToken", None)
    return merged
