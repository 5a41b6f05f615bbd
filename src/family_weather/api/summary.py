# src/family_weather/api/summary.py
from typing import List

from fastapi import APIRouter, Depends

from family_weather.api.deps import get_llm_factory
from family_weather.config import LLMFactory
from family_weather.core.auth import verify_token
from family_weather.models.schemas import SummaryRequest, WeatherSummaryCard
from family_weather.nodes.summary_llm_node import summarize_forecast

router = APIRouter()


@router.post("/weather/summary", response_model=List[WeatherSummaryCard])
async def summary_cards(
    body: SummaryRequest,
    llm_factory: LLMFactory = Depends(get_llm_factory),
    token_payload: dict = Depends(verify_token),
):
    """
    raw forecast → 요약 카드 3장 (현재 구간 + 다음 두 구간)
    - Body: {forecast, dayPart, timezone, localTime}
    - 응답: WeatherSummaryCard[3], 래퍼 없음
    """
    return await summarize_forecast(body, llm_factory("summary"))
