# src/family_weather/nodes/verification_node.py
from __future__ import annotations
import logging
from typing import Any, List, Sequence

from pydantic import TypeAdapter, ValidationError

from family_weather.core.errors import AIOutputError
from family_weather.models.schemas import WeatherSummaryCard
from family_weather.utils.dayparts import DayPart

logger = logging.getLogger(__name__)

_CARDS = TypeAdapter(List[WeatherSummaryCard])


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        parts.append(f"{loc}: {e.get('msg')}")
    return "; ".join(parts)


def validate_cards(payload: Any, expected: Sequence[DayPart], *, raw: Any = None) -> List[WeatherSummaryCard]:
    """
    모델 출력 사후 검증. 하나라도 틀리면 전체 거부 (부분 수용 없음).
    - 배열 (structured output 래퍼 {"cards": [...]} 도 허용)
    - 카드 수 == len(expected), label 순서 == expected
    - range 숫자, low <= high / icon 1-5개, 어휘 내 / warning 문자열 배열
    """
    offending = raw if raw is not None else payload

    cards_data = payload
    if isinstance(payload, dict) and "cards" in payload:
        cards_data = payload["cards"]

    if not isinstance(cards_data, list):
        raise AIOutputError(detail="Not an array", ai_output=offending)

    if len(cards_data) != len(expected):
        raise AIOutputError(detail=f"Expected {len(expected)} cards, got {len(cards_data)}", ai_output=offending)

    try:
        cards = _CARDS.validate_python(cards_data)
    except ValidationError as e:
        raise AIOutputError(
            detail=f"Validation failed on WeatherSummaryCard object(s): {_describe(e)}",
            ai_output=offending,
        )

    labels = [c.label for c in cards]
    expected_labels = [DayPart(p) for p in expected]
    if labels != expected_labels:
        raise AIOutputError(
            detail=f"Labels {[l.value for l in labels]} do not match expected order {[p.value for p in expected_labels]}",
            ai_output=offending,
        )

    return cards
