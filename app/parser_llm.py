"""
LLM-based résumé parser.

• Supports multiple LLM providers (OpenAI, Gemini, Ollama) through LLMClient
• Retries only on rate limiting, with exponential backoff (2 s, 4 s, …)
• Runs clean_resume() so the payload always matches the canonical schema
"""

from __future__ import annotations
import json, logging, re, textwrap, threading, time
from typing import Dict, List, Optional

from cleaner import clean_resume
from config import Settings
from errors import InvalidResponse, ProcessingCancelled, RateLimited
from llm_client import LLMClient
from schema_resume import PROMPT_SCHEMA

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are an expert résumé parser. Extract structured information from the "
    "résumé text and return ONLY valid JSON. Do not wrap it in markdown fences "
    "and do not add any commentary."
)

_USER_PROMPT = textwrap.dedent(
    """
Parse this résumé and return a JSON object with exactly this structure:

{schema}

Rules:
- use "" for anything not present in the résumé, never invent values
- skill level is an integer from 0 to 100 reflecting the evidence in the text
- skill category is one of Technical, Design, Cloud, Other
- endDate is "Present" for a current role

Résumé text:
{text}
"""
)

_JSON_FINDER = re.compile(r"\{.*\}", re.S)
_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.I)


def _build_messages(raw_text: str) -> List[Dict[str, str]]:
    user = _USER_PROMPT.format(
        schema=json.dumps(PROMPT_SCHEMA, indent=2), text=raw_text
    )
    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


def _extract_json(raw: str) -> dict:
    payload = _FENCE.sub("", (raw or "").strip())
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        m = _JSON_FINDER.search(payload)
        if not m:
            raise InvalidResponse("invalid JSON") from None
        try:
            data = json.loads(m.group())
        except json.JSONDecodeError:
            raise InvalidResponse("invalid JSON") from None
    if not isinstance(data, dict):
        raise InvalidResponse("invalid JSON")
    return data


def _backoff(delay: float, cancel_event: Optional[threading.Event]) -> None:
    """Sleep for *delay* seconds, waking early if the job is cancelled."""
    if cancel_event is None:
        time.sleep(delay)
    elif cancel_event.wait(delay):
        raise ProcessingCancelled()


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ProcessingCancelled()


def parse_resume_llm(raw_text: str, client: LLMClient, settings: Settings | None = None,
                     cancel_event: Optional[threading.Event] = None) -> dict:
    settings = settings or Settings()
    messages = _build_messages(raw_text)
    attempts = max(1, settings.max_attempts)

    for attempt in range(1, attempts + 1):
        _check_cancelled(cancel_event)
        logger.info("AI extraction attempt %d/%d (%s)", attempt, attempts, settings.model)
        try:
            rsp = client.chat(
                model=settings.model, messages=messages, temperature=settings.temperature
            )
        except RateLimited:
            if attempt == attempts:
                raise RateLimited(f"Rate limit exceeded after {attempts} attempts") from None
            delay = settings.initial_backoff * 2 ** (attempt - 1)
            logger.warning("Rate limited, retrying in %.1fs", delay)
            _backoff(delay, cancel_event)
            continue

        content = rsp.message.content or ""
        logger.debug("AI response: %d chars", len(content))
        return clean_resume(_extract_json(content))

    raise RateLimited(f"Rate limit exceeded after {attempts} attempts")
