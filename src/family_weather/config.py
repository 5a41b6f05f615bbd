from typing import Callable

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from family_weather.core import settings
from family_weather.core.errors import ConfigError

# 용도별 생성 파라미터 (요약은 낮은 temperature, 조언은 약간 높게)
LLM_PURPOSES = {
    "summary": lambda: (settings.SUMMARY_TEMPERATURE, settings.SUMMARY_MAX_TOKENS),
    "advisory": lambda: (settings.ADVISORY_TEMPERATURE, settings.ADVISORY_MAX_TOKENS),
}

LLMFactory = Callable[[str], BaseChatModel]


def build_llm(purpose: str) -> BaseChatModel:
    """요청마다 Gemini 클라이언트 생성. 키가 없으면 해당 요청만 500."""
    if not settings.GEMINI_API_KEY:
        raise ConfigError(detail="GEMINI_API_KEY not set")
    temperature, max_tokens = LLM_PURPOSES[purpose]()
    return ChatGoogleGenerativeAI(
        model=settings.GEMINI_MODEL,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=temperature,
        max_output_tokens=max_tokens,
        timeout=settings.LLM_TIMEOUT_S,
        # 재시도는 호출부(with_retry)에서 한 번만
        max_retries=0,
    )
