import asyncio

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from family_weather.core.errors import AIOutputError
from family_weather.models.schemas import AdvisoryRequest
from family_weather.nodes.advisory_llm_node import build_advisory_inputs, generate_advisory
from family_weather.tests.fakes import morning_body


def test_advisory_text_is_stripped():
    request = AdvisoryRequest.model_validate(morning_body())
    llm = FakeListChatModel(responses=["  Long sleeves this morning, rain boots after lunch.\n\n"])
    assert asyncio.run(generate_advisory(request, llm)) == "Long sleeves this morning, rain boots after lunch."


def test_empty_advisory_is_error():
    request = AdvisoryRequest.model_validate(morning_body())
    with pytest.raises(AIOutputError) as exc:
        asyncio.run(generate_advisory(request, FakeListChatModel(responses=["   "])))
    assert exc.value.error == "Error producing weather tips"
    assert exc.value.detail == "No text output in model result"


def test_family_context_included_only_when_given():
    with_family = build_advisory_inputs(
        AdvisoryRequest.model_validate(morning_body(familyContext="Two kids, 3 and 6; the 6yo hates hats"))
    )
    assert "the 6yo hates hats" in with_family["family_line"]

    without = build_advisory_inputs(AdvisoryRequest.model_validate(morning_body(familyContext="  ")))
    assert without["family_line"] == ""
    assert without["labels"] == "This morning, This afternoon, This evening"
