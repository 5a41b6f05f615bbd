# src/family_weather/nodes/prompts.py
from __future__ import annotations
import logging
from functools import lru_cache

from langchain_core.prompts import ChatPromptTemplate
from langsmith import Client

from family_weather.core import settings

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM = (
    "You summarize hourly weather forecasts for a family weather app. "
    "You answer with data only, never with prose or markdown."
)

SUMMARY_HUMAN = """You are given an hourly weather forecast (JSON): {forecast}

Timezone: {timezone}
Local time: {local_time}
It is currently the "{day_part}" day part.

Summarize exactly three day parts, in this order:
1. {label_1} (label "{part_1}")
2. {label_2} (label "{part_2}")
3. {label_3} (label "{part_3}")
{rollover_note}
Day parts in local time: morning until 11:59, afternoon 12:00-17:59, evening from 18:00.
Only use the forecast hours that fall inside each window.

For each day part give:
- label: exactly one of "morning", "afternoon", "evening". No "tomorrow", no other text.
- range: {{"low": number, "high": number}} in Celsius, low <= high.
- icon: 1 to 5 icons, most important first, picked by the conditions that matter most for comfort and safety (rain, wind, heat, cold, storms, fog). Allowed icons only: {icons}
- warning: short hazard notes for parents (e.g. "Strong gusts around school pickup"). Empty list if none.

{format_instructions}"""

STRUCTURED_FORMAT = "Put the three summaries, in order, into the `cards` field."

JSON_FORMAT = (
    "Output a pure JSON array of three objects ONLY. Do not include markdown or any explanation. "
    'Example: [{"label":"morning","range":{"low":11,"high":15},"icon":["cloud-sun","wind"],"warning":[]}]'
)

ADVISORY_HUMAN = """You will be given weather data and a brief description of the user's family and clothing preferences.

ONLY output specific, actionable recommendations on what to wear and how to prepare for the weather for the next ~12 hours (the current and next two day parts: {labels}).
- Focus on clothing choices: for example, long vs short sleeves, if a jacket is needed, if rubber boots and rain gear are a good idea, or if one should consider avoiding going out entirely.
- Pay special attention to advice for children and day programs like daycare or school, such as suggesting packing extra clothes for the afternoon if the weather is expected to shift.
- Highlight important changes between morning, afternoon, and evening.

Inputs:
- forecast: {forecast}
- current day part: {day_part}
- timezone: {timezone}
- local time: {local_time}
{family_line}
RESPONSE FORMAT:
- Write 1-2 short paragraphs of actionable advice (no markdown, no JSON, just plain text).
- Do NOT explain the weather in detail. Focus on what to wear or pack and recommended actions."""


@lru_cache(maxsize=8)
def _pull(name: str) -> ChatPromptTemplate:
    return Client().pull_prompt(name)


def _load(name: str, default: ChatPromptTemplate) -> ChatPromptTemplate:
    """LangSmith hub 에 이름이 설정돼 있으면 그 프롬프트를, 아니면 내장 프롬프트를 사용."""
    if not name:
        return default
    try:
        return _pull(name)
    except Exception as e:
        logger.warning("⚠️ LangSmith 프롬프트 '%s' 불러오기 실패 → 내장 프롬프트 사용: %s", name, e)
        return default


def summary_prompt() -> ChatPromptTemplate:
    default = ChatPromptTemplate.from_messages([("system", SUMMARY_SYSTEM), ("human", SUMMARY_HUMAN)])
    return _load(settings.SUMMARY_PROMPT_NAME, default)


def advisory_prompt() -> ChatPromptTemplate:
    default = ChatPromptTemplate.from_messages([("human", ADVISORY_HUMAN)])
    return _load(settings.ADVISORY_PROMPT_NAME, default)
