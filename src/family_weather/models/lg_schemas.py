import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from family_weather.models.schemas import BriefingRequest, WeatherSummaryCard
from family_weather.utils.dayparts import DayPart

# LangGraph State 스키마

class BriefingState(TypedDict, total=False):
    """브리핑 파이프라인 상태. summarize / advise 는 병렬로 실행된다."""
    request: BriefingRequest                   # 검증된 요청
    day_part: DayPart                          # 현재 구간 (요청값 또는 localTime 으로 계산)
    forecast: Optional[Dict[str, Any]]         # 제공자 응답 원본 (opaque)
    cards: Optional[List[WeatherSummaryCard]]  # 요약 카드 3장
    advisory: Optional[str]                    # 옷차림 조언
    errors: Annotated[Dict[str, str], operator.or_]  # 병렬 노드 오류 병합
    final_output: Optional[Dict[str, Any]]     # 최종 응답
