# src/family_weather/nodes/summary_llm_node.py
from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, List

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_core.output_parsers import StrOutputParser
from pydantic import BaseModel

from family_weather.core.errors import AIOutputError
from family_weather.models.icons import ICON_VOCABULARY
from family_weather.models.schemas import SummaryEnvelope, SummaryRequest, WeatherSummaryCard
from family_weather.nodes.llm_call import call_llm
from family_weather.nodes.prompts import JSON_FORMAT, STRUCTURED_FORMAT, summary_prompt
from family_weather.nodes.verification_node import validate_cards
from family_weather.utils.dayparts import window, window_labels

logger = logging.getLogger(__name__)


def _strip_code_fence(text: str) -> str:
    if text.startswith("```") and text.endswith("```"):
        stripped = text.strip("`").strip()
        if stripped.lower().startswith("json"):
            return stripped[4:].strip()
        return stripped
    return text


def _extract_json_payload(raw_text: str) -> Any:
    """텍스트 응답에서 JSON 배열(또는 객체)을 꺼낸다. 실패 시 AIOutputError."""
    cleaned = _strip_code_fence(raw_text.strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    for pattern in (r"\[.*\]", r"\{.*\}"):
        match = re.search(pattern, cleaned, re.S)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                continue

    logger.warning("⚠️ LLM 응답 JSON 파싱 실패: %s", raw_text[:300])
    raise AIOutputError(detail="Model output is not valid JSON", ai_output=raw_text)


def _raw_output(message: Any) -> Any:
    """진단용 원본 출력: tool call 인자가 있으면 그것, 없으면 content"""
    if isinstance(message, AIMessage):
        if message.tool_calls:
            return message.tool_calls[0].get("args")
        return message.content
    return message


def build_summary_inputs(request: SummaryRequest, *, structured: bool) -> Dict[str, Any]:
    parts = window(request.day_part)
    labels = window_labels(request.day_part)
    rollover = [label for label in labels if label.startswith("Tomorrow")]
    rollover_note = ""
    if rollover:
        rollover_note = (
            f"Note: {' and '.join(rollover)} fall on the next calendar day. "
            "Still use the bare day part name as the label.\n"
        )

    return {
        "forecast": json.dumps(request.forecast, ensure_ascii=False),
        "timezone": request.timezone,
        "local_time": request.local_time,
        "day_part": request.day_part.value,
        "part_1": parts[0].value,
        "part_2": parts[1].value,
        "part_3": parts[2].value,
        "label_1": labels[0],
        "label_2": labels[1],
        "label_3": labels[2],
        "rollover_note": rollover_note,
        "icons": ", ".join(ICON_VOCABULARY),
        "format_instructions": STRUCTURED_FORMAT if structured else JSON_FORMAT,
    }


async def summarize_forecast(request: SummaryRequest, llm: BaseChatModel) -> List[WeatherSummaryCard]:
    """
    raw forecast → 카드 3장.
    구조화 출력을 지원하는 모델이면 스키마로 생성을 제한하고,
    지원하지 않으면 일반 텍스트로 받아 JSON 을 추출한 뒤 검증한다.
    """
    expected = window(request.day_part)
    prompt = summary_prompt()

    try:
        structured_llm = llm.with_structured_output(SummaryEnvelope, include_raw=True)
    except NotImplementedError:
        structured_llm = None

    if structured_llm is not None:
        logger.info("✅ 요약 LLM 실행 (structured) dayPart=%s", request.day_part.value)
        result = await call_llm(
            prompt | structured_llm,
            build_summary_inputs(request, structured=True),
            what="summary",
        )
        raw = _raw_output(result.get("raw"))
        parsed = result.get("parsed")
        parsing_error = result.get("parsing_error")
        if parsing_error is not None or parsed is None:
            logger.warning("⚠️ 구조화 출력 파싱 실패: %s", parsing_error)
            raise AIOutputError(detail=str(parsing_error or "No structured output returned"), ai_output=raw)
        payload = parsed.model_dump(mode="json") if isinstance(parsed, BaseModel) else parsed
    else:
        logger.info("✅ 요약 LLM 실행 (plain JSON) dayPart=%s", request.day_part.value)
        text = await call_llm(
            prompt | llm | StrOutputParser(),
            build_summary_inputs(request, structured=False),
            what="summary",
        )
        raw = text
        payload = _extract_json_payload(text or "")

    cards = validate_cards(payload, expected, raw=raw)
    logger.info("✔️ 요약 카드 %s장 검증 완료: %s", len(cards), [c.label.value for c in cards])
    return cards
