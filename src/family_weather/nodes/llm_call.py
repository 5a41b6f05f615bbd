# src/family_weather/nodes/llm_call.py
from __future__ import annotations
import asyncio
import logging
from typing import Any

from langchain_core.runnables import Runnable

from family_weather.core import settings
from family_weather.core.errors import UpstreamError, WeatherAppError

logger = logging.getLogger(__name__)


async def call_llm(chain: Runnable, inputs: dict, *, what: str) -> Any:
    """
    모델 호출 공통 래퍼.
    - 실패 시 최대 LLM_MAX_RETRIES 회 재시도 (기본 1회)
    - 재시도 포함 전체 대기 시간은 LLM_TIMEOUT_S 로 제한
    - 실패/타임아웃은 UpstreamError(502, 재시도 가능)로 변환
    """
    retrying = chain.with_retry(
        stop_after_attempt=settings.LLM_MAX_RETRIES + 1,
        wait_exponential_jitter=False,
    )
    try:
        return await asyncio.wait_for(retrying.ainvoke(inputs), timeout=settings.LLM_TIMEOUT_S)
    except asyncio.TimeoutError:
        logger.error("⛔️ %s LLM 응답 지연 (%ss 초과)", what, settings.LLM_TIMEOUT_S)
        raise UpstreamError("Gemini API timeout", detail=f"{what}: no response within {settings.LLM_TIMEOUT_S}s")
    except WeatherAppError:
        raise
    except Exception as e:
        logger.error("⛔️ %s LLM 호출 실패: %s: %s", what, type(e).__name__, e)
        raise UpstreamError("Gemini API error", detail=f"{type(e).__name__}: {e}")
