import logging
from typing import Any, Dict

from langgraph.graph import StateGraph, END

from family_weather.config import LLMFactory
from family_weather.core.errors import UpstreamError, WeatherAppError
from family_weather.models.lg_schemas import BriefingState
from family_weather.models.schemas import AdvisoryRequest, SummaryRequest
from family_weather.nodes.advisory_llm_node import generate_advisory
from family_weather.nodes.summary_llm_node import summarize_forecast
from family_weather.weather.types import ForecastProvider

logger = logging.getLogger(__name__)


def _context(state: BriefingState) -> Dict[str, Any]:
    req = state["request"]
    return {
        "forecast": state["forecast"],
        "dayPart": state["day_part"],
        "timezone": req.timezone,
        "localTime": req.local_time,
    }


def build_workflow(provider: ForecastProvider, llm_factory: LLMFactory) -> StateGraph:
    """
    fetch_forecast → (summarize ∥ advise) → output
    예보 실패는 그대로 전파(502), 요약/조언 실패는 해당 항목만 비우고 errors 에 기록.
    """

    async def fetch_forecast_node(state: BriefingState) -> Dict[str, Any]:
        req = state["request"]
        forecast = await provider.hourly(lat=req.lat, lng=req.lng, hours=req.hours)
        if not forecast:
            raise UpstreamError("Weather provider returned an empty forecast")
        return {"forecast": forecast}

    async def summarize_node(state: BriefingState) -> Dict[str, Any]:
        try:
            request = SummaryRequest.model_validate(_context(state))
            cards = await summarize_forecast(request, llm_factory("summary"))
            return {"cards": cards}
        except WeatherAppError as e:
            logger.warning("⚠️ 브리핑 요약 생략: %s", e)
            return {"errors": {"summary": e.error}}

    async def advise_node(state: BriefingState) -> Dict[str, Any]:
        try:
            request = AdvisoryRequest.model_validate(
                {**_context(state), "familyContext": state["request"].family_context}
            )
            advisory = await generate_advisory(request, llm_factory("advisory"))
            return {"advisory": advisory}
        except WeatherAppError as e:
            logger.warning("⚠️ 브리핑 조언 생략: %s", e)
            return {"errors": {"advisory": e.error}}

    def output_node(state: BriefingState) -> Dict[str, Any]:
        cards = state.get("cards")
        final_output = {
            "dayPart": state["day_part"].value,
            "cards": [c.model_dump(mode="json") for c in cards] if cards is not None else None,
            "advisory": state.get("advisory"),
            "errors": dict(state.get("errors") or {}),
        }
        logger.info(
            "🎯 브리핑 완료: cards=%s advisory=%s errors=%s",
            cards is not None, state.get("advisory") is not None, list(final_output["errors"]),
        )
        return {"final_output": final_output}

    workflow = StateGraph(BriefingState)
    workflow.add_node("fetch_forecast", fetch_forecast_node)
    workflow.add_node("summarize", summarize_node)
    workflow.add_node("advise", advise_node)
    workflow.add_node("output", output_node)

    workflow.set_entry_point("fetch_forecast")

    # 두 소비자는 예보에만 의존하고 서로는 독립
    workflow.add_edge("fetch_forecast", "summarize")
    workflow.add_edge("fetch_forecast", "advise")
    workflow.add_edge(["summarize", "advise"], "output")
    workflow.add_edge("output", END)
    return workflow
