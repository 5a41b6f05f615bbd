# src/family_weather/client/relay.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from family_weather.core import settings

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """relay 가 오류 envelope 또는 연결 실패로 응답한 경우"""

    def __init__(self, status: int, error: str, detail: Optional[str] = None) -> None:
        self.status = status
        self.error = error
        self.detail = detail
        super().__init__(f"{status} {error}" + (f": {detail}" if detail else ""))

    @property
    def retryable(self) -> bool:
        # 0 = 연결 실패
        return self.status == 0 or self.status >= 502


class RelayClient:
    """서버 relay 3종 호출 (hourly / summary / advisory)"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        *,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.RELAY_BASE_URL).rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _post(self, path: str, body: Dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                r = await client.post(path, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise RelayError(0, "Could not reach weather service", str(e))

        if r.status_code != 200:
            try:
                envelope = r.json()
            except ValueError:
                envelope = {"error": r.text or r.reason_phrase}
            if not isinstance(envelope, dict):
                envelope = {"error": str(envelope)}
            raise RelayError(r.status_code, str(envelope.get("error", "Request failed")), envelope.get("detail"))
        return r

    async def hourly_forecast(self, *, lat: float, lng: float, hours: int) -> Dict[str, Any]:
        r = await self._post("/api/weather/hourly", {"lat": lat, "lng": lng, "hours": hours})
        return r.json()

    async def summarize(
        self, *, forecast: Dict[str, Any], day_part: str, timezone: str, local_time: str
    ) -> List[Dict[str, Any]]:
        r = await self._post(
            "/api/weather/summary",
            {"forecast": forecast, "dayPart": day_part, "timezone": timezone, "localTime": local_time},
        )
        return r.json()

    async def advise(
        self,
        *,
        forecast: Dict[str, Any],
        day_part: str,
        timezone: str,
        local_time: str,
        family_context: Optional[str] = None,
    ) -> str:
        body: Dict[str, Any] = {
            "forecast": forecast,
            "dayPart": day_part,
            "timezone": timezone,
            "localTime": local_time,
        }
        if family_context:
            body["familyContext"] = family_context
        r = await self._post("/api/weather/advisory", body)
        return r.text
