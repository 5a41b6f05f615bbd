# src/family_weather/client/render.py
from __future__ import annotations
import textwrap
from typing import Any, Iterable, List, Mapping, Optional

from family_weather.client.location import LocationStatus
from family_weather.client.session import WeatherView
from family_weather.models.icons import IconToken
from family_weather.utils.dayparts import DayPart, window_labels

ICON_GLYPHS = {
    IconToken.CLOUD: "☁️",
    IconToken.CLOUD_DRIZZLE: "🌦️",
    IconToken.CLOUD_FOG: "🌫️",
    IconToken.CLOUD_HAIL: "🧊",
    IconToken.CLOUD_LIGHTNING: "🌩️",
    IconToken.CLOUD_MOON: "☁️🌙",
    IconToken.CLOUD_MOON_RAIN: "🌧️🌙",
    IconToken.CLOUD_RAIN: "🌧️",
    IconToken.CLOUD_RAIN_WIND: "🌧️💨",
    IconToken.CLOUD_SNOW: "🌨️",
    IconToken.CLOUD_SUN: "⛅",
    IconToken.CLOUD_SUN_RAIN: "🌦️",
    IconToken.CLOUDY: "☁️☁️",
    IconToken.MOON: "🌙",
    IconToken.MOON_STAR: "🌙✨",
    IconToken.SNOWFLAKE: "❄️",
    IconToken.SUN: "☀️",
    IconToken.SUN_DIM: "🌤️",
    IconToken.SUN_MEDIUM: "🌞",
    IconToken.SUN_MOON: "🌗",
    IconToken.SUN_SNOW: "🌤️❄️",
    IconToken.THERMOMETER_SNOWFLAKE: "🥶",
    IconToken.THERMOMETER_SUN: "🥵",
    IconToken.TORNADO: "🌪️",
    IconToken.UMBRELLA: "☂️",
    IconToken.WIND: "💨",
}

_GLYPHS_BY_VALUE = {token.value: glyph for token, glyph in ICON_GLYPHS.items()}


def safe_icons(icons: Any) -> List[str]:
    """알 수 없는 토큰은 조용히 버린다 (모델 출력은 신뢰하지 않음)."""
    if not isinstance(icons, (list, tuple)):
        return []
    return [_GLYPHS_BY_VALUE[ic] for ic in icons if isinstance(ic, str) and ic in _GLYPHS_BY_VALUE]


def _fmt_temp(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "?"
    return f"{round(value)}°"


def render_card(card: Mapping[str, Any], title: Optional[str] = None) -> str:
    rng = card.get("range") or {}
    if not isinstance(rng, Mapping):
        rng = {}
    lines = [
        (title or str(card.get("label", ""))).upper(),
        " ".join(safe_icons(card.get("icon"))),
        f"{_fmt_temp(rng.get('low'))} – {_fmt_temp(rng.get('high'))}",
    ]
    warnings = card.get("warning") or []
    if isinstance(warnings, (list, tuple)):
        lines.extend(f"⚠️ {w}" for w in warnings if isinstance(w, str))
    return "\n".join(lines)


def render_cards(cards: Iterable[Mapping[str, Any]], day_part: Optional[DayPart] = None) -> str:
    cards = list(cards)
    titles: List[Optional[str]] = [None] * len(cards)
    if day_part is not None and len(cards) == 3:
        titles = list(window_labels(day_part))
    return "\n\n".join(render_card(card, title) for card, title in zip(cards, titles))


def render_view(view: WeatherView, width: int = 72) -> str:
    if view.location.status is LocationStatus.LOADING:
        return "📍 Detecting your location for local weather…"

    blocks: List[str] = ["Family Weather"]
    if view.notice:
        blocks.append(f"📍 {view.notice}")

    if view.cards:
        blocks.append(render_cards(view.cards, view.day_part))
    elif not view.notice and not view.summary_error:
        blocks.append("No weather information found.")

    if view.advisory:
        paragraphs = [p.strip() for p in view.advisory.splitlines() if p.strip()]
        blocks.append("\n\n".join(textwrap.fill(p, width=width) for p in paragraphs))

    return "\n\n".join(blocks)
