# src/family_weather/api/forecast.py
import logging

from fastapi import APIRouter, Depends

from family_weather.api.deps import get_forecast_provider
from family_weather.core.auth import verify_token
from family_weather.models.schemas import HourlyForecastRequest
from family_weather.weather.types import ForecastProvider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/weather/hourly")
async def hourly_forecast(
    body: HourlyForecastRequest,
    provider: ForecastProvider = Depends(get_forecast_provider),
    token_payload: dict = Depends(verify_token),
):
    """
    시간별 예보 relay (서버 캐시 없음)
    - Header: Authorization: Bearer <JWT>
    - Body: {lat, lng, hours?=24}
    - 응답: 제공자 JSON 그대로
    """
    logger.info("📡 hourly 요청 user=%s lat=%.4f lng=%.4f hours=%s", token_payload.get("sub"), body.lat, body.lng, body.hours)
    return await provider.hourly(lat=body.lat, lng=body.lng, hours=body.hours)
