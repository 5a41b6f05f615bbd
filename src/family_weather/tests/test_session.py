import asyncio
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

from family_weather.client.family import FamilySettings, MemoryStore
from family_weather.client.location import LocationResolver, LocationStatus, StaticLocationSource
from family_weather.client.query_cache import QueryCache
from family_weather.client.relay import RelayError
from family_weather.client.session import WeatherSession
from family_weather.tests.fakes import SAMPLE_FORECAST, cards_for


class FakeBackend:
    def __init__(self, forecast_errors: Optional[List[RelayError]] = None):
        self.calls = Counter()
        self.forecast_errors = list(forecast_errors or [])
        self.summary_error: Optional[RelayError] = None
        self.families: List[Optional[str]] = []
        self.hold_unset_family: Optional[asyncio.Event] = None
        self.advise_started = asyncio.Event()

    async def hourly_forecast(self, *, lat, lng, hours):
        self.calls["hourly"] += 1
        if self.forecast_errors:
            raise self.forecast_errors.pop(0)
        return SAMPLE_FORECAST

    async def summarize(self, *, forecast, day_part, timezone, local_time):
        self.calls["summary"] += 1
        if self.summary_error:
            raise self.summary_error
        return cards_for("morning", "afternoon", "evening")

    async def advise(self, *, forecast, day_part, timezone, local_time, family_context=None):
        self.calls["advisory"] += 1
        self.families.append(family_context)
        if self.hold_unset_family is not None and not family_context:
            self.advise_started.set()
            await self.hold_unset_family.wait()
        return f"tip for {family_context or 'everyone'}"


def _clock():
    return datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def _session(backend, family: str = "", source=None) -> WeatherSession:
    return WeatherSession(
        backend,
        LocationResolver(source or StaticLocationSource(59.91, 10.75)),
        FamilySettings(MemoryStore({"family_info": family} if family else None)),
        timezone="UTC",
        clock=_clock,
        cache=QueryCache(),
    )


def test_refresh_builds_full_view():
    backend = FakeBackend()
    session = _session(backend)
    view = asyncio.run(session.refresh())

    assert view.location.status is LocationStatus.READY
    assert view.day_part.value == "morning"
    assert [c["label"] for c in view.cards] == ["morning", "afternoon", "evening"]
    assert view.advisory == "tip for everyone"
    assert view.notice is None
    assert session.view is view


def test_family_change_refetches_only_advisory():
    backend = FakeBackend()
    session = _session(backend, family="One toddler")

    async def scenario():
        await session.refresh()
        return await session.set_family_context("One toddler, one 8yo who runs hot")

    view = asyncio.run(scenario())

    assert backend.calls == Counter({"hourly": 1, "summary": 1, "advisory": 2})
    assert backend.families == ["One toddler", "One toddler, one 8yo who runs hot"]
    assert view.advisory == "tip for One toddler, one 8yo who runs hot"
    assert session.family.family == "One toddler, one 8yo who runs hot"


def test_repeat_refresh_uses_cache():
    backend = FakeBackend()
    session = _session(backend)

    async def scenario():
        await session.refresh()
        await session.refresh()

    asyncio.run(scenario())
    assert backend.calls == Counter({"hourly": 1, "summary": 1, "advisory": 1})


def test_superseded_result_is_not_displayed():
    backend = FakeBackend()
    session = _session(backend)

    async def scenario():
        backend.hold_unset_family = asyncio.Event()
        first = asyncio.create_task(session.refresh())
        await backend.advise_started.wait()

        session.family.set_family("Twins")
        second = await session.refresh()

        backend.hold_unset_family.set()
        return await first, second

    first, second = asyncio.run(scenario())
    assert first.advisory == "tip for everyone"
    assert second.advisory == "tip for Twins"
    assert session.view is second


def test_forecast_retried_once_on_retryable_error():
    backend = FakeBackend(forecast_errors=[RelayError(502, "Failed to fetch weather data.")])
    view = asyncio.run(_session(backend).refresh())
    assert backend.calls["hourly"] == 2
    assert view.cards is not None
    assert view.notice is None


def test_forecast_failure_sets_notice_and_skips_consumers():
    backend = FakeBackend(forecast_errors=[RelayError(502, "Failed to fetch weather data.")] * 2)
    view = asyncio.run(_session(backend).refresh())
    assert backend.calls == Counter({"hourly": 2})
    assert view.notice == "Weather unavailable: Failed to fetch weather data."
    assert view.cards is None and view.advisory is None


def test_forecast_client_error_is_not_retried():
    backend = FakeBackend(forecast_errors=[RelayError(401, "Missing token")])
    view = asyncio.run(_session(backend).refresh())
    assert backend.calls["hourly"] == 1
    assert view.notice == "Weather unavailable: Missing token"


def test_summary_failure_keeps_advisory():
    backend = FakeBackend()
    backend.summary_error = RelayError(502, "AI output parse/validation error")
    view = asyncio.run(_session(backend).refresh())
    assert view.cards is None
    assert view.summary_error == "AI output parse/validation error"
    assert view.advisory == "tip for everyone"


def test_summary_failure_is_not_cached():
    backend = FakeBackend()
    backend.summary_error = RelayError(502, "Gemini API timeout")
    session = _session(backend)

    async def scenario():
        await session.refresh()
        backend.summary_error = None
        return await session.refresh()

    view = asyncio.run(scenario())
    assert backend.calls["summary"] == 2
    assert len(view.cards) == 3


class NeverAnswers:
    async def current(self):
        await asyncio.sleep(1)


def test_location_timeout_becomes_notice():
    backend = FakeBackend()
    session = WeatherSession(
        backend,
        LocationResolver(NeverAnswers(), timeout=0.01),
        FamilySettings(MemoryStore()),
        timezone="UTC",
        clock=_clock,
    )
    view = asyncio.run(session.refresh())
    assert view.location.status is LocationStatus.ERROR
    assert view.notice == "Location unavailable: no position within 0.01s."
    assert backend.calls == Counter()
