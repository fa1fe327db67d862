"""
Background processing of uploaded résumés.

A record moves pending → processing → completed | failed. The store is a
collaborator so the same runner can write to a database table or, for local
use and tests, to InMemoryResumeStore.
"""

from __future__ import annotations
import logging, threading, uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from errors import InvalidStatusTransition, ResumeError
from extractor import validate_upload
from orchestrator import ExtractionOrchestrator, ParseResult

logger = logging.getLogger(__name__)


class ProcessingStatus(str, Enum):
    """Status of a résumé processing job."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED = {
    ProcessingStatus.PENDING: {ProcessingStatus.PROCESSING},
    ProcessingStatus.PROCESSING: {ProcessingStatus.COMPLETED, ProcessingStatus.FAILED},
    ProcessingStatus.COMPLETED: set(),
    ProcessingStatus.FAILED: set(),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ResumeRecord:
    id: str
    filename: str
    mime_type: str
    file_size: int
    status: ProcessingStatus = ProcessingStatus.PENDING
    result: Optional[ParseResult] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def transition(self, target: ProcessingStatus, **changes) -> "ResumeRecord":
        if target not in _ALLOWED[self.status]:
            raise InvalidStatusTransition(self.status.value, target.value)
        return replace(self, status=target, updated_at=_now(), **changes)

    def to_row(self) -> Dict[str, Any]:
        """Storage columns of the resumes table."""
        row: Dict[str, Any] = {
            "id": self.id,
            "original_filename": self.filename,
            "mime_type": self.mime_type,
            "file_size": self.file_size,
            "processing_status": self.status.value,
            "processing_error": self.error,
        }
        if self.result is not None:
            resume, scores = self.result.resume, self.result.scores
            row.update({
                "personal_info": resume["personalInfo"],
                "summary": resume["summary"],
                "skills": resume["skills"],
                "experience": resume["experience"],
                "education": resume["education"],
                "certifications": resume["certifications"],
                "languages": resume["languages"],
                "overall_score": scores["overallScore"],
                "skills_score": scores["skillsScore"],
                "experience_score": scores["experienceScore"],
                "education_score": scores["educationScore"],
                "parsing_method": self.result.method,
            })
        return row


# ───────────────────────────────────────── storage ──
class ResumeStore(ABC):
    @abstractmethod
    def add(self, record: ResumeRecord) -> None: ...

    @abstractmethod
    def get(self, resume_id: str) -> ResumeRecord: ...

    @abstractmethod
    def save(self, record: ResumeRecord) -> None: ...


class InMemoryResumeStore(ResumeStore):
    def __init__(self):
        self._records: Dict[str, ResumeRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: ResumeRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise KeyError(f"Resume {record.id} already exists")
            self._records[record.id] = record

    def get(self, resume_id: str) -> ResumeRecord:
        with self._lock:
            try:
                return self._records[resume_id]
            except KeyError:
                raise KeyError(f"Resume {resume_id} not found") from None

    def save(self, record: ResumeRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


# ───────────────────────────────────────── runner ──
def submit_resume(store: ResumeStore, filename: str, content: bytes, media_type: str,
                  max_size: int) -> ResumeRecord:
    """Validate an upload and register it as a pending record."""
    validate_upload(content, media_type, max_size)
    record = ResumeRecord(
        id=str(uuid.uuid4()),
        filename=filename,
        mime_type=media_type,
        file_size=len(content),
    )
    store.add(record)
    logger.info("Registered resume %s (%s, %d bytes)", record.id, filename, len(content))
    return record


def process_resume(store: ResumeStore, orchestrator: ExtractionOrchestrator, resume_id: str,
                   content: bytes, cancel_event: Optional[threading.Event] = None) -> ResumeRecord:
    """Run the pipeline for a pending record; failures end in the failed state."""
    record = store.get(resume_id).transition(ProcessingStatus.PROCESSING)
    store.save(record)

    try:
        result = orchestrator.process_document(content, record.mime_type, cancel_event)
    except ResumeError as exc:
        logger.warning("Processing of resume %s failed: %s", resume_id, exc.message)
        record = record.transition(ProcessingStatus.FAILED, error=exc.message)
    except Exception as exc:
        logger.exception("Unexpected error while processing resume %s", resume_id)
        record = record.transition(ProcessingStatus.FAILED, error=f"Unexpected error: {exc}")
    else:
        record = record.transition(ProcessingStatus.COMPLETED, result=result)
        logger.info(
            "Resume %s processed with %s parsing (overall %d)",
            resume_id, result.method, result.scores["overallScore"],
        )
    store.save(record)
    return record
