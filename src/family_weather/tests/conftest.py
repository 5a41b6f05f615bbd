# conftest.py
import json

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from family_weather.api.deps import get_forecast_provider, get_llm_factory
from family_weather.core import settings
from family_weather.core.auth import verify_token
from family_weather.server import create_app
from family_weather.tests.fakes import LLMRecorder, StubProvider, cards_for


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # 로컬 .env 값이 테스트에 섞이지 않도록
    monkeypatch.setattr(settings, "SUMMARY_PROMPT_NAME", "")
    monkeypatch.setattr(settings, "ADVISORY_PROMPT_NAME", "")
    monkeypatch.setattr(settings, "LLM_MAX_RETRIES", 1)
    monkeypatch.setattr(settings, "LLM_TIMEOUT_S", 5.0)


@pytest.fixture
def app():
    application = create_app()
    application.dependency_overrides[verify_token] = lambda: {"sub": "user-123", "aud": "authenticated"}
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def provider(app):
    stub = StubProvider()
    app.dependency_overrides[get_forecast_provider] = lambda: stub
    return stub


@pytest.fixture
def llms(app):
    recorder = LLMRecorder(
        summary=FakeListChatModel(responses=[json.dumps(cards_for("morning", "afternoon", "evening"))]),
        advisory=FakeListChatModel(responses=["Pack a light rain jacket and boots for daycare pickup."]),
    )
    app.dependency_overrides[get_llm_factory] = lambda: recorder
    return recorder
