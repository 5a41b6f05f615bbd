import asyncio
import json

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import RunnableLambda

from family_weather.core import settings
from family_weather.core.errors import AIOutputError, UpstreamError
from family_weather.models.schemas import SummaryRequest
from family_weather.nodes import prompts
from family_weather.nodes.llm_call import call_llm
from family_weather.nodes.summary_llm_node import build_summary_inputs, summarize_forecast
from family_weather.tests.fakes import FlakyChat, StructuredFakeChat, card, cards_for, morning_body


def _request(**overrides) -> SummaryRequest:
    return SummaryRequest.model_validate(morning_body(**overrides))


def test_structured_output_path():
    llm = StructuredFakeChat(responses=[json.dumps({"cards": cards_for("morning", "afternoon", "evening")})])
    cards = asyncio.run(summarize_forecast(_request(), llm))
    assert [c.label.value for c in cards] == ["morning", "afternoon", "evening"]


def test_structured_parse_error_reports_raw_output():
    bad = {"cards": [card("morning", icon=["rainbow"]), card("afternoon"), card("evening")]}
    llm = StructuredFakeChat(responses=[json.dumps(bad)])
    with pytest.raises(AIOutputError) as exc:
        asyncio.run(summarize_forecast(_request(), llm))
    assert exc.value.ai_output == json.dumps(bad)


def test_structured_output_with_wrong_order_rejected():
    llm = StructuredFakeChat(responses=[json.dumps({"cards": cards_for("evening", "morning", "afternoon")})])
    with pytest.raises(AIOutputError) as exc:
        asyncio.run(summarize_forecast(_request(), llm))
    assert "expected order" in exc.value.detail


def test_plain_json_fallback_strips_code_fence():
    text = "```json\n" + json.dumps(cards_for("evening", "morning", "afternoon")) + "\n```"
    llm = FakeListChatModel(responses=[text])
    cards = asyncio.run(summarize_forecast(_request(dayPart="evening", localTime="2024-01-01T19:00:00Z"), llm))
    assert [c.label.value for c in cards] == ["evening", "morning", "afternoon"]


def test_plain_json_fallback_finds_array_in_prose():
    text = "Here you go: " + json.dumps(cards_for("morning", "afternoon", "evening")) + " Have a nice day!"
    cards = asyncio.run(summarize_forecast(_request(), FakeListChatModel(responses=[text])))
    assert len(cards) == 3


def test_non_json_output_is_ai_output_error():
    llm = FakeListChatModel(responses=["It will be sunny all day."])
    with pytest.raises(AIOutputError) as exc:
        asyncio.run(summarize_forecast(_request(), llm))
    assert exc.value.status_code == 502
    assert exc.value.detail == "Model output is not valid JSON"
    assert exc.value.ai_output == "It will be sunny all day."


def test_model_failure_retried_once():
    llm = FlakyChat(responses=[json.dumps(cards_for("morning", "afternoon", "evening"))], failures=1)
    cards = asyncio.run(summarize_forecast(_request(), llm))
    assert len(cards) == 3
    assert llm.calls == 2


def test_model_failure_after_retry_is_upstream_error():
    llm = FlakyChat(responses=["[]"], failures=5)
    with pytest.raises(UpstreamError) as exc:
        asyncio.run(summarize_forecast(_request(), llm))
    assert exc.value.error == "Gemini API error"
    assert exc.value.retryable
    assert llm.calls == 2


def test_validation_failure_is_not_retried():
    llm = FlakyChat(responses=[json.dumps(cards_for("morning", "afternoon"))], failures=0)
    with pytest.raises(AIOutputError):
        asyncio.run(summarize_forecast(_request(), llm))
    assert llm.calls == 1


def test_call_llm_timeout(monkeypatch):
    monkeypatch.setattr(settings, "LLM_TIMEOUT_S", 0.05)

    async def slow(_inputs):
        await asyncio.sleep(1)
        return "late"

    with pytest.raises(UpstreamError) as exc:
        asyncio.run(call_llm(RunnableLambda(slow), {}, what="summary"))
    assert exc.value.error == "Gemini API timeout"


def test_inputs_describe_rollover_for_evening():
    inputs = build_summary_inputs(_request(dayPart="evening"), structured=False)
    assert (inputs["part_1"], inputs["part_2"], inputs["part_3"]) == ("evening", "morning", "afternoon")
    assert inputs["label_2"] == "Tomorrow morning"
    assert "next calendar day" in inputs["rollover_note"]
    assert "thermometer-snowflake" in inputs["icons"]


def test_inputs_without_rollover_for_morning():
    inputs = build_summary_inputs(_request(), structured=True)
    assert inputs["rollover_note"] == ""
    assert inputs["format_instructions"] == prompts.STRUCTURED_FORMAT


def test_prompt_renders_with_inputs():
    messages = prompts.summary_prompt().format_messages(**build_summary_inputs(_request(), structured=False))
    text = messages[-1].content
    assert '"label":"morning"' in text
    assert "This afternoon" in text


def test_hub_prompt_failure_falls_back_to_builtin(monkeypatch):
    monkeypatch.setattr(settings, "SUMMARY_PROMPT_NAME", "family-weather-summary")

    def boom(name):
        raise RuntimeError("hub unreachable")

    monkeypatch.setattr(prompts, "_pull", boom)
    prompt = prompts.summary_prompt()
    assert prompt.messages[0].prompt.template == prompts.SUMMARY_SYSTEM


def test_hub_prompt_used_when_available(monkeypatch):
    custom = ChatPromptTemplate.from_messages([("human", "{forecast}")])
    monkeypatch.setattr(settings, "ADVISORY_PROMPT_NAME", "family-weather-advisory")
    monkeypatch.setattr(prompts, "_pull", lambda name: custom)
    assert prompts.advisory_prompt() is custom
