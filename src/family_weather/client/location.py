# src/family_weather/client/location.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

import httpx

from family_weather.core import settings
from family_weather.weather.types import Coordinate

logger = logging.getLogger(__name__)


class LocationStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class LocationState:
    status: LocationStatus
    coordinate: Optional[Coordinate] = None
    error: Optional[str] = None


class LocationSource(Protocol):
    async def current(self) -> Coordinate: ...


class StaticLocationSource:
    """CLI 인자/설정으로 주어진 고정 좌표"""

    def __init__(self, latitude: float, longitude: float) -> None:
        self.coordinate = Coordinate(latitude, longitude)

    async def current(self) -> Coordinate:
        return self.coordinate


class IpGeolocationSource:
    """IP 기반 저정밀 위치 (도시 수준이면 충분)"""

    def __init__(self, url: Optional[str] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.url = url or settings.IP_GEOLOCATION_URL
        self._transport = transport

    async def current(self) -> Coordinate:
        async with httpx.AsyncClient(transport=self._transport) as client:
            r = await client.get(self.url, headers={"Accept": "application/json"})
            r.raise_for_status()
            data = r.json()
        if not isinstance(data, dict):
            raise ValueError("unexpected geolocation response")
        lat = data.get("latitude", data.get("lat"))
        lng = data.get("longitude", data.get("lon"))
        if lat is None or lng is None:
            raise ValueError("no coordinates in geolocation response")
        return Coordinate(float(lat), float(lng))


class LocationResolver:
    """
    1회성 위치 조회. 대기 시간을 제한하고 실패 시 사람이 읽을 수 있는 오류로 끝난다.
    state: loading → ready | error
    """

    def __init__(self, source: LocationSource, *, timeout: Optional[float] = None) -> None:
        self.source = source
        self.timeout = timeout if timeout is not None else settings.LOCATION_TIMEOUT_S
        self.state = LocationState(LocationStatus.LOADING)

    async def resolve(self) -> LocationState:
        self.state = LocationState(LocationStatus.LOADING)
        try:
            coordinate = await asyncio.wait_for(self.source.current(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.state = LocationState(
                LocationStatus.ERROR,
                error=f"Location unavailable: no position within {self.timeout:g}s.",
            )
        except (httpx.HTTPError, ValueError, KeyError) as e:
            self.state = LocationState(LocationStatus.ERROR, error=f"Failed to get location: {e}")
        else:
            self.state = LocationState(LocationStatus.READY, coordinate=coordinate)

        if self.state.error:
            logger.warning("📍 %s", self.state.error)
        return self.state
