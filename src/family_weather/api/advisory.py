# src/family_weather/api/advisory.py
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from family_weather.api.deps import get_llm_factory
from family_weather.config import LLMFactory
from family_weather.core.auth import verify_token
from family_weather.models.schemas import AdvisoryRequest
from family_weather.nodes.advisory_llm_node import generate_advisory

router = APIRouter()


@router.post("/weather/advisory", response_class=PlainTextResponse)
async def advisory_text(
    body: AdvisoryRequest,
    llm_factory: LLMFactory = Depends(get_llm_factory),
    token_payload: dict = Depends(verify_token),
):
    """
    옷차림/준비물 조언
    - Body: {forecast, dayPart, timezone, localTime, familyContext?}
    - 응답: text/plain (오류는 JSON envelope)
    """
    return PlainTextResponse(await generate_advisory(body, llm_factory("advisory")))
