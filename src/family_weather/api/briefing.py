# src/family_weather/api/briefing.py
import logging

from fastapi import APIRouter, Depends

from family_weather.api.deps import get_forecast_provider, get_llm_factory
from family_weather.config import LLMFactory
from family_weather.core.auth import verify_token
from family_weather.models.lg_schemas import BriefingState
from family_weather.models.schemas import BriefingRequest
from family_weather.pipelines.pipeline import build_workflow
from family_weather.utils.dayparts import parse_local_time, resolve_day_part
from family_weather.weather.types import ForecastProvider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/weather/briefing")
async def briefing(
    body: BriefingRequest,
    provider: ForecastProvider = Depends(get_forecast_provider),
    llm_factory: LLMFactory = Depends(get_llm_factory),
    token_payload: dict = Depends(verify_token),
):
    """
    예보 조회 + 요약 + 조언 한 번에 (LangGraph)
    - 예보 실패 → 502
    - 요약/조언 실패 → 해당 값 null, errors 에 사유
    """
    day_part = body.day_part or resolve_day_part(parse_local_time(body.local_time, body.timezone))

    state: BriefingState = {
        "request": body,
        "day_part": day_part,
        "forecast": None,
        "cards": None,
        "advisory": None,
        "errors": {},
        "final_output": None,
    }

    logger.info("⚙️ 브리핑 파이프라인 실행 dayPart=%s", day_part.value)
    graph = build_workflow(provider, llm_factory).compile()
    final_state = await graph.ainvoke(state)
    return final_state["final_output"]
