"""
Chooses between AI and rule-based extraction for one document.

The AI path runs first whenever a provider is configured. Any AI failure
falls back to parse_resume_rule() unless the settings demand AI, in which
case the error reaches the caller. Cancellation always reaches the caller.
"""

from __future__ import annotations
import logging, threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from config import Settings
from errors import AiExtractionError, Forbidden, ProcessingCancelled, Unauthorized
from extractor import extract_text, validate_upload
from llm_client import LLMClient, get_llm_client
from parser_llm import parse_resume_llm
from parser_rule import parse_resume_rule
from scoring import score_resume

logger = logging.getLogger(__name__)


class ExtractionState(str, Enum):
    IDLE = "idle"
    EXTRACTING_AI = "extracting_ai"
    FALLBACK_TO_HEURISTIC = "fallback_to_heuristic"
    EXTRACTING_HEURISTIC = "extracting_heuristic"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class ParseResult:
    resume: Dict[str, Any]
    scores: Dict[str, int]
    method: str
    fallback_reason: Optional[str] = None
    path: Tuple[ExtractionState, ...] = ()

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None

    @property
    def state(self) -> ExtractionState:
        return self.path[-1] if self.path else ExtractionState.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Flat payload: résumé fields, score fields and parsingMethod."""
        return {**self.resume, **self.scores, "parsingMethod": self.method}


def _enter(path: List[ExtractionState], state: ExtractionState) -> None:
    current = path[-1] if path else ExtractionState.IDLE
    logger.info("Extraction state %s -> %s", current.value, state.value)
    path.append(state)


@dataclass
class ExtractionOrchestrator:
    """Shared across requests; every extract() call tracks its own state."""

    settings: Settings = field(default_factory=Settings.from_env)
    client: Optional[LLMClient] = None

    def __post_init__(self):
        if self.client is None and self.settings.ai_configured:
            try:
                self.client = get_llm_client(self.settings)
            except (ImportError, ValueError) as exc:
                logger.warning("AI provider unavailable, using rule-based parsing only: %s", exc)

    # ───────────────────────────────────── public ──
    def extract(self, text: str, cancel_event: Optional[threading.Event] = None) -> ParseResult:
        path: List[ExtractionState] = [ExtractionState.IDLE]

        if self.client is None:
            if self.settings.require_ai:
                _enter(path, ExtractionState.FAILURE)
                raise AiExtractionError("AI extraction is required but no provider is configured")
            logger.info("No AI provider configured, using rule-based parsing")
            return self._heuristic(text, path)

        _enter(path, ExtractionState.EXTRACTING_AI)
        try:
            resume = parse_resume_llm(text, self.client, self.settings, cancel_event)
        except ProcessingCancelled:
            _enter(path, ExtractionState.FAILURE)
            raise
        except Exception as exc:
            if isinstance(exc, AiExtractionError):
                reason = exc.message
                level = logging.ERROR if isinstance(exc, (Unauthorized, Forbidden)) else logging.WARNING
                logger.log(level, "AI extraction failed: %s", reason)
            else:
                reason = str(exc) or type(exc).__name__
                logger.exception("Unexpected error during AI extraction")
            if self.settings.require_ai:
                _enter(path, ExtractionState.FAILURE)
                raise
            _enter(path, ExtractionState.FALLBACK_TO_HEURISTIC)
            return self._heuristic(text, path, fallback_reason=reason)

        _enter(path, ExtractionState.SUCCESS)
        return ParseResult(resume, score_resume(resume), "ai", path=tuple(path))

    def _heuristic(self, text: str, path: List[ExtractionState],
                   fallback_reason: Optional[str] = None) -> ParseResult:
        _enter(path, ExtractionState.EXTRACTING_HEURISTIC)
        resume = parse_resume_rule(text)
        _enter(path, ExtractionState.SUCCESS)
        return ParseResult(resume, score_resume(resume), "heuristic", fallback_reason, tuple(path))

    def process_document(self, content: bytes, media_type: str,
                         cancel_event: Optional[threading.Event] = None) -> ParseResult:
        """Validate, extract text, parse and score one uploaded document."""
        document = validate_upload(content, media_type, self.settings.max_upload_bytes)
        text = extract_text(document)
        return self.extract(text, cancel_event)
