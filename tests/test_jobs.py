"""Tests for the résumé processing job runner."""

from __future__ import annotations

import pytest  # type: ignore

from config import Settings
from errors import InvalidFileType, InvalidStatusTransition
from jobs import InMemoryResumeStore, ProcessingStatus, process_resume, submit_resume
from orchestrator import ExtractionOrchestrator
from schema_resume import MS_WORD

LIMIT = 10 * 1024 * 1024


@pytest.fixture
def store() -> InMemoryResumeStore:
    return InMemoryResumeStore()


@pytest.fixture
def orchestrator() -> ExtractionOrchestrator:
    return ExtractionOrchestrator(Settings())


def test_submit_creates_pending_record(store) -> None:
    record = submit_resume(store, "cv.doc", b"content", MS_WORD, LIMIT)
    assert record.status is ProcessingStatus.PENDING
    assert store.get(record.id) == record
    assert record.to_row()["processing_status"] == "pending"


def test_submit_rejects_invalid_upload(store) -> None:
    with pytest.raises(InvalidFileType):
        submit_resume(store, "cv.txt", b"content", "text/plain", LIMIT)
    assert len(store) == 0


def test_process_completes(store, orchestrator, sample_text) -> None:
    content = sample_text.encode("utf-8")
    record = submit_resume(store, "cv.doc", content, MS_WORD, LIMIT)

    done = process_resume(store, orchestrator, record.id, content)
    assert done.status is ProcessingStatus.COMPLETED
    assert store.get(record.id).status is ProcessingStatus.COMPLETED

    row = done.to_row()
    assert row["processing_status"] == "completed"
    assert row["processing_error"] is None
    assert row["personal_info"]["name"] == "Jane Doe"
    assert row["overall_score"] == done.result.scores["overallScore"]
    assert row["parsing_method"] == "heuristic"


def test_process_failure_is_recorded(store, orchestrator) -> None:
    record = submit_resume(store, "cv.doc", b"short", MS_WORD, LIMIT)

    failed = process_resume(store, orchestrator, record.id, b"short")
    assert failed.status is ProcessingStatus.FAILED
    assert "Unable to extract readable text" in failed.error
    assert failed.to_row()["processing_error"] == failed.error
    assert "overall_score" not in failed.to_row()


def test_finished_record_cannot_restart(store, orchestrator, sample_text) -> None:
    content = sample_text.encode("utf-8")
    record = submit_resume(store, "cv.doc", content, MS_WORD, LIMIT)
    process_resume(store, orchestrator, record.id, content)

    with pytest.raises(InvalidStatusTransition):
        process_resume(store, orchestrator, record.id, content)


def test_unknown_record(store, orchestrator) -> None:
    with pytest.raises(KeyError):
        process_resume(store, orchestrator, "missing", b"")
