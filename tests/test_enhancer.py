"""Tests for AI résumé enhancement and its fallbacks."""

from __future__ import annotations

import json

from conftest import FakeClient
from enhancer import ENHANCE_TEMPERATURE, NOT_CONFIGURED, UNAVAILABLE, enhance_resume
from errors import ApiStatusError
from parser_rule import parse_resume_rule


def test_without_provider(sample_text) -> None:
    assert enhance_resume(parse_resume_rule(sample_text), None) == NOT_CONFIGURED


def test_enhanced_payload(sample_text, settings) -> None:
    reply = {
        "enhancedSummary": "  Seasoned backend engineer.  ",
        "improvedExperiences": [{"description": "Led payments"}, "Ran ETL", {"other": 1}],
        "skillSuggestions": ["Kafka", " ", "Terraform"],
    }
    client = FakeClient("```json\n" + json.dumps(reply) + "\n```")

    result = enhance_resume(parse_resume_rule(sample_text), client, settings)
    assert result == {
        "enhancedSummary": "Seasoned backend engineer.",
        "improvedExperiences": [{"description": "Led payments"}, {"description": "Ran ETL"}],
        "skillSuggestions": ["Kafka", "Terraform"],
    }
    call = client.calls[0]
    assert call["temperature"] == ENHANCE_TEMPERATURE
    assert "Acme Corp" in call["messages"][1]["content"]


def test_provider_error_falls_back(sample_text, settings) -> None:
    client = FakeClient(ApiStatusError(500, "overloaded"))
    result = enhance_resume(parse_resume_rule(sample_text), client, settings)
    assert result == UNAVAILABLE
    assert len(result["skillSuggestions"]) == 3


def test_unparsable_reply_falls_back(sample_text, settings) -> None:
    result = enhance_resume(parse_resume_rule(sample_text), FakeClient("no json here"), settings)
    assert result["enhancedSummary"] == UNAVAILABLE["enhancedSummary"]
