"""Tests for provider clients and their error mapping."""

from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest  # type: ignore

from config import Settings
from errors import (
    ApiStatusError,
    Forbidden,
    NetworkError,
    RateLimited,
    Unauthorized,
    error_for_status,
)
from llm_client import OpenAIClient, get_llm_client

MESSAGES = [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]


@pytest.mark.parametrize("status,cls", [(429, RateLimited), (401, Unauthorized), (403, Forbidden)])
def test_error_for_status(status, cls) -> None:
    err = error_for_status(status, "nope")
    assert type(err) is cls
    assert err.status_code == status


def test_other_status() -> None:
    err = error_for_status(500, "boom")
    assert isinstance(err, ApiStatusError)
    assert err.status_code == 500
    assert err.message == "LLM API error: 500 - boom"


def test_unsupported_provider() -> None:
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        get_llm_client(Settings(provider="bogus", api_key="x"))


def test_openai_requires_key() -> None:
    with pytest.raises(ValueError):
        OpenAIClient(None)


def _openai_with(create) -> OpenAIClient:
    client = OpenAIClient("sk-test")
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client


def test_openai_success() -> None:
    seen = {}

    def create(**kwargs):
        seen.update(kwargs)
        message = SimpleNamespace(content='{"summary": "x"}')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    rsp = _openai_with(create).chat("gpt-4o-mini", MESSAGES)
    assert rsp.message.content == '{"summary": "x"}'
    assert seen["temperature"] == 0.1
    assert seen["max_tokens"] == 4096


def test_openai_rate_limit_is_mapped() -> None:
    openai = pytest.importorskip("openai")
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

    def create(**kwargs):
        raise openai.RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)

    with pytest.raises(RateLimited):
        _openai_with(create).chat("gpt-4o-mini", MESSAGES)


def test_openai_connection_error_is_mapped() -> None:
    openai = pytest.importorskip("openai")
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

    def create(**kwargs):
        raise openai.APIConnectionError(request=request)

    with pytest.raises(NetworkError):
        _openai_with(create).chat("gpt-4o-mini", MESSAGES)


def test_gemini_uses_system_instruction_and_safety() -> None:
    pytest.importorskip("google.genai")
    from llm_client import GeminiClient

    seen = {}

    def generate_content(**kwargs):
        seen.update(kwargs)
        return SimpleNamespace(text="{}")

    client = GeminiClient("g-key")
    client.client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))

    assert client.chat("gemini-2.0-flash", MESSAGES).message.content == "{}"
    assert seen["contents"] == "hi"
    config = seen["config"]
    assert config.system_instruction == "sys"
    assert len(config.safety_settings) == 4
    assert all(s.threshold == "BLOCK_NONE" for s in config.safety_settings)


def test_gemini_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("google.genai")
    import llm_client

    built = {}

    def fake_client(**kwargs):
        built.update(kwargs)
        return SimpleNamespace()

    monkeypatch.setattr(llm_client, "genai", SimpleNamespace(Client=fake_client))
    client = get_llm_client(Settings(provider="gemini", api_key="g-key", request_timeout=12.5))

    assert isinstance(client, llm_client.GeminiClient)
    assert built["api_key"] == "g-key"
    assert built["http_options"].timeout == 12500
