"""
Error taxonomy for the resume pipeline.

Validation errors are raised before any extraction work, extraction errors
end the upload, and AI errors are recovered by the orchestrator unless the
deployment requires AI.
"""

from __future__ import annotations


class ResumeError(Exception):
    """Base class for every error raised by the pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ───────────────────────────────────────── upload validation ──
class UploadValidationError(ResumeError):
    pass


class InvalidFileType(UploadValidationError):
    def __init__(self, media_type: str):
        super().__init__(
            f"Invalid file type '{media_type or 'unknown'}'. "
            "Please upload a PDF, DOC, or DOCX file."
        )
        self.media_type = media_type


class FileTooLarge(UploadValidationError):
    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File size too large ({size / 1024 / 1024:.1f} MB). "
            f"Maximum size is {limit // (1024 * 1024)}MB."
        )
        self.size = size
        self.limit = limit


class ExtractionError(ResumeError):
    """No plausible text could be read from the uploaded document."""


# ───────────────────────────────────────── AI extraction ──
class AiExtractionError(ResumeError):
    status_code: int | None = None


class RateLimited(AiExtractionError):
    status_code = 429


class Unauthorized(AiExtractionError):
    status_code = 401


class Forbidden(AiExtractionError):
    status_code = 403


class InvalidResponse(AiExtractionError):
    pass


class NetworkError(AiExtractionError):
    pass


class ApiStatusError(AiExtractionError):
    def __init__(self, status_code: int, message: str = ""):
        super().__init__(f"LLM API error: {status_code} - {message or 'Unknown error'}")
        self.status_code = status_code


def error_for_status(status_code: int | None, message: str = "") -> AiExtractionError:
    """Map a provider HTTP status to the matching AiExtractionError."""
    if status_code == 429:
        return RateLimited(f"Rate limit hit: {message or 'too many requests'}")
    if status_code == 401:
        return Unauthorized("Invalid LLM API key. Please check your API key configuration.")
    if status_code == 403:
        return Forbidden(
            "LLM API access forbidden. Please check your API key permissions and billing status."
        )
    if status_code is None:
        return AiExtractionError(message or "LLM call failed")
    return ApiStatusError(status_code, message)


# ───────────────────────────────────────── processing ──
class ProcessingCancelled(ResumeError):
    def __init__(self, message: str = "Resume processing was cancelled"):
        super().__init__(message)


class InvalidStatusTransition(ResumeError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move resume from '{current}' to '{target}'")
        self.current = current
        self.target = target
