# src/family_weather/utils/dayparts.py
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import List, Tuple
from zoneinfo import ZoneInfo


class DayPart(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


DAYPART_ORDER: Tuple[DayPart, ...] = (DayPart.MORNING, DayPart.AFTERNOON, DayPart.EVENING)

AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 18


def resolve_day_part(now: datetime) -> DayPart:
    """로컬 시각 기준: 0-11 morning, 12-17 afternoon, 18-23 evening"""
    hour = now.hour
    if hour < AFTERNOON_START_HOUR:
        return DayPart.MORNING
    if hour < EVENING_START_HOUR:
        return DayPart.AFTERNOON
    return DayPart.EVENING


def next_two(current: DayPart) -> Tuple[DayPart, DayPart]:
    idx = DAYPART_ORDER.index(DayPart(current))
    return (
        DAYPART_ORDER[(idx + 1) % len(DAYPART_ORDER)],
        DAYPART_ORDER[(idx + 2) % len(DAYPART_ORDER)],
    )


def window(current: DayPart) -> List[DayPart]:
    """현재 + 다음 두 구간 (카드 순서)"""
    current = DayPart(current)
    return [current, *next_two(current)]


def window_labels(current: DayPart) -> List[str]:
    """
    날짜 롤오버는 enum 값이 아니라 문구로만 표현한다.
    ex) evening -> ["This evening", "Tomorrow morning", "Tomorrow afternoon"]
    """
    labels: List[str] = []
    rolled_over = False
    prev_idx = -1
    for part in window(current):
        idx = DAYPART_ORDER.index(part)
        if idx < prev_idx:
            rolled_over = True
        prev_idx = idx
        labels.append(f"{'Tomorrow' if rolled_over else 'This'} {part.value}")
    return labels


def local_now(tz: str) -> datetime:
    return datetime.now(ZoneInfo(tz))


def parse_local_time(value: str, tz: str | None = None) -> datetime:
    """ISO-8601 파싱. 'Z' 접미사 허용, tz 가 주어지면 해당 로컬 시각으로 변환."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if tz:
        zone = ZoneInfo(tz)
        parsed = parsed.replace(tzinfo=zone) if parsed.tzinfo is None else parsed.astimezone(zone)
    return parsed
