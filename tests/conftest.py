"""Shared fixtures: a scripted LLM client and a sample résumé text."""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest  # type: ignore

from config import Settings
from llm_client import LLMClient, LLMResponse


class FakeClient(LLMClient):
    """Replays scripted replies; an exception in the script is raised instead."""

    def __init__(self, *replies, on_call=None):
        self.replies = list(replies)
        self.calls: List[Dict] = []
        self.on_call = on_call

    def chat(self, model: str, messages: List[Dict[str, str]],
             temperature: Optional[float] = None) -> LLMResponse:
        self.calls.append({"model": model, "messages": messages, "temperature": temperature})
        if self.on_call:
            self.on_call()
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(reply)


SAMPLE_RESUME = """Jane Doe
San Francisco, CA
jane.doe@example.com | (555) 867-5309
linkedin.com/in/janedoe

Professional Summary
Backend engineer building data platforms for fintech companies.

Skills
Python, SQL, Docker, AWS

Experience
Senior Engineer at Acme Corp
2019 - Present
- Built the payments API
- Cut deployment time by 40%

Engineer | Globex
2016 - 2019
- Maintained ETL jobs

Education
Bachelor of Science in Computer Science, MIT, 2016

Languages
Spanish (Fluent), French (Basic)
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def settings() -> Settings:
    return Settings(provider="openai", model="test-model", api_key="sk-test")


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    """Record backoff delays instead of waiting."""
    import parser_llm

    delays: List[float] = []
    monkeypatch.setattr(parser_llm, "_backoff", lambda delay, cancel_event: delays.append(delay))
    return delays
