# src/family_weather/nodes/advisory_llm_node.py
import json
import logging
from typing import Any, Dict

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser

from family_weather.core.errors import AIOutputError
from family_weather.models.schemas import AdvisoryRequest
from family_weather.nodes.llm_call import call_llm
from family_weather.nodes.prompts import advisory_prompt
from family_weather.utils.dayparts import window_labels

logger = logging.getLogger(__name__)


def build_advisory_inputs(request: AdvisoryRequest) -> Dict[str, Any]:
    family = (request.family_context or "").strip()
    return {
        "forecast": json.dumps(request.forecast, ensure_ascii=False),
        "day_part": request.day_part.value,
        "labels": ", ".join(window_labels(request.day_part)),
        "timezone": request.timezone,
        "local_time": request.local_time,
        "family_line": f"- family/preferences: {family}\n" if family else "",
    }


async def generate_advisory(request: AdvisoryRequest, llm: BaseChatModel) -> str:
    """옷차림/준비물 조언 (plain text, 1-2 문단). 구조 검증 없음."""
    logger.info("✅ 조언 LLM 실행 dayPart=%s family=%s", request.day_part.value, bool(request.family_context))
    text = await call_llm(
        advisory_prompt() | llm | StrOutputParser(),
        build_advisory_inputs(request),
        what="advisory",
    )
    text = (text or "").strip()
    if not text:
        raise AIOutputError("Error producing weather tips", detail="No text output in model result")
    return text
