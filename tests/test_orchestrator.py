"""Tests for choosing between AI and rule-based extraction."""

from __future__ import annotations

import dataclasses
import json
import threading

import pytest  # type: ignore

from config import Settings
from conftest import FakeClient
from errors import AiExtractionError, InvalidFileType, ProcessingCancelled, RateLimited
from orchestrator import ExtractionOrchestrator, ExtractionState
from parser_rule import parse_resume_rule
from scoring import score_resume


def test_no_provider_uses_rule_based_parser(sample_text) -> None:
    orchestrator = ExtractionOrchestrator(Settings())
    assert orchestrator.client is None

    result = orchestrator.extract(sample_text)
    assert result.method == "heuristic"
    assert result.fallback_reason is None
    assert result.resume == parse_resume_rule(sample_text)
    assert result.scores == score_resume(result.resume)
    assert result.state is ExtractionState.SUCCESS
    assert result.path == (
        ExtractionState.IDLE, ExtractionState.EXTRACTING_HEURISTIC, ExtractionState.SUCCESS,
    )


def test_rate_limited_ai_falls_back(sample_text, settings, no_sleep) -> None:
    client = FakeClient(RateLimited("Rate limit hit"))
    orchestrator = ExtractionOrchestrator(settings, client)

    result = orchestrator.extract(sample_text)
    assert len(client.calls) == 3
    assert result.method == "heuristic"
    assert result.used_fallback
    assert "after 3 attempts" in result.fallback_reason
    assert result.resume == parse_resume_rule(sample_text)


def test_invalid_ai_response_falls_back(sample_text, settings) -> None:
    orchestrator = ExtractionOrchestrator(settings, FakeClient("I cannot help with that"))
    result = orchestrator.extract(sample_text)
    assert result.method == "heuristic"
    assert result.fallback_reason == "invalid JSON"


def test_ai_success(settings) -> None:
    payload = {"personalInfo": {"name": "Jane Doe"}, "skills": ["Python"]}
    orchestrator = ExtractionOrchestrator(settings, FakeClient(json.dumps(payload)))

    result = orchestrator.extract("some text")
    assert result.method == "ai"
    assert result.resume["personalInfo"]["name"] == "Jane Doe"
    data = result.to_dict()
    assert data["parsingMethod"] == "ai"
    assert data["overallScore"] == result.scores["overallScore"]
    assert data["skills"][0]["name"] == "Python"


def test_required_ai_propagates_failure(settings, no_sleep) -> None:
    required = dataclasses.replace(settings, require_ai=True)
    orchestrator = ExtractionOrchestrator(required, FakeClient(RateLimited("slow down")))
    with pytest.raises(RateLimited):
        orchestrator.extract("text")


def test_required_ai_without_provider() -> None:
    orchestrator = ExtractionOrchestrator(Settings(require_ai=True))
    with pytest.raises(AiExtractionError, match="no provider is configured"):
        orchestrator.extract("text")


def test_cancellation_propagates(settings) -> None:
    cancel = threading.Event()
    cancel.set()
    orchestrator = ExtractionOrchestrator(settings, FakeClient("{}"))
    with pytest.raises(ProcessingCancelled):
        orchestrator.extract("text", cancel)


def test_unsupported_media_type_rejected_before_extraction(settings) -> None:
    client = FakeClient("{}")
    orchestrator = ExtractionOrchestrator(settings, client)
    with pytest.raises(InvalidFileType):
        orchestrator.process_document(b"plain text resume " * 20, "text/plain")
    assert client.calls == []


def test_process_pdf_document() -> None:
    pdf = b"\n".join([
        b"%PDF-1.4",
        b"1 0 obj",
        b"<< /Type /Catalog >>",
        b"endobj",
        b"BT (Jane Doe) Tj ET",
        b"BT (Skills: Python, SQL, Docker) Tj ET",
        b"BT (Experience building data pipelines and web services for many years across several teams) Tj ET",
        b"stream",
        b"endstream",
        b"%%EOF",
    ])
    result = ExtractionOrchestrator(Settings()).process_document(pdf, "application/pdf")
    assert result.method == "heuristic"
    assert result.resume["personalInfo"]["name"] == "Jane Doe"
    assert [s["name"] for s in result.resume["skills"]][:3] == ["Python", "SQL", "Docker"]


def test_fallback_path_is_recorded(sample_text, settings) -> None:
    result = ExtractionOrchestrator(settings, FakeClient("not json")).extract(sample_text)
    assert result.path == (
        ExtractionState.IDLE,
        ExtractionState.EXTRACTING_AI,
        ExtractionState.FALLBACK_TO_HEURISTIC,
        ExtractionState.EXTRACTING_HEURISTIC,
        ExtractionState.SUCCESS,
    )


def test_unexpected_client_error_falls_back(sample_text, settings) -> None:
    orchestrator = ExtractionOrchestrator(settings, FakeClient(IndexError("list index out of range")))

    result = orchestrator.extract(sample_text)
    assert result.method == "heuristic"
    assert result.fallback_reason == "list index out of range"
    assert result.resume == parse_resume_rule(sample_text)


def test_unexpected_client_error_propagates_when_ai_required(settings) -> None:
    required = dataclasses.replace(settings, require_ai=True)
    orchestrator = ExtractionOrchestrator(required, FakeClient(KeyError("choices")))
    with pytest.raises(KeyError):
        orchestrator.extract("text")


def test_concurrent_extractions_keep_their_own_path(sample_text, settings) -> None:
    ai_reply = json.dumps({"personalInfo": {"name": "Jane Doe"}})
    shared = ExtractionOrchestrator(settings, FakeClient(ai_reply))
    offline = ExtractionOrchestrator(Settings())
    results = {}

    def run(name, orchestrator):
        results[name] = orchestrator.extract(sample_text)

    threads = [threading.Thread(target=run, args=(f"ai-{i}", shared)) for i in range(4)]
    threads += [threading.Thread(target=run, args=(f"rule-{i}", offline)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for name, result in results.items():
        expected = ExtractionState.EXTRACTING_AI if name.startswith("ai") else ExtractionState.EXTRACTING_HEURISTIC
        assert result.path == (ExtractionState.IDLE, expected, ExtractionState.SUCCESS)
    assert not hasattr(shared, "state")
