"""
Document bytes ➜ raw text
– no format-aware parsing: PDF bytes are decoded and filtered line by line
– drops structural PDF lines (objects, streams, xref tables, trailers)
– rejects results too short to be a résumé
"""
from __future__ import annotations
from pathlib import Path
from typing import NamedTuple
import logging, mimetypes, re

from errors import ExtractionError, FileTooLarge, InvalidFileType
from schema_resume import ALLOWED_MEDIA_TYPES, MS_WORD, OOXML_WORD, PDF

logger = logging.getLogger(__name__)

_PDF_STRUCTURE = re.compile(
    r"%PDF-|%%EOF|\b\d+\s+\d+\s+obj\b|\bendobj\b|\bendstream\b|^stream\b|\bstream$"
    r"|^xref\b|\bstartxref\b|^trailer\b|^<<|^/[A-Z]"
)
# literal strings shown by the Tj / TJ text operators of uncompressed pages
_SHOWN_TEXT = re.compile(r"\(((?:[^()\\]|\\.)*)\)")
_TEXT_OPERATOR = re.compile(r"\)\s*Tj|\]\s*TJ")
_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n]")
_SPACES = re.compile(r"[ \t\r\f\v]+")
_LETTER = re.compile(r"[A-Za-z]")

MIN_PDF_CHARS = 100
MIN_WORD_CHARS = 100
MIN_OTHER_CHARS = 10

mimetypes.add_type(OOXML_WORD, ".docx")
mimetypes.add_type(MS_WORD, ".doc")


class RawDocument(NamedTuple):
    content: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.content)


def validate_upload(content: bytes, media_type: str, max_size: int) -> RawDocument:
    """Reject unsupported or oversized uploads before any extraction work."""
    if media_type not in ALLOWED_MEDIA_TYPES:
        raise InvalidFileType(media_type)
    if len(content) > max_size:
        raise FileTooLarge(len(content), max_size)
    return RawDocument(content, media_type)


def clean_text(text: str) -> str:
    text = _NON_PRINTABLE.sub(" ", text or "")
    lines = (_SPACES.sub(" ", ln).strip() for ln in text.split("\n"))
    return "\n".join(ln for ln in lines if ln)


def _pdf_lines(raw: str):
    for ln in raw.splitlines():
        ln = ln.strip()
        if _TEXT_OPERATOR.search(ln):
            ln = "".join(_SHOWN_TEXT.findall(ln)).replace("\\(", "(").replace("\\)", ")")
        if len(ln) <= 2 or not _LETTER.search(ln):
            continue
        if _PDF_STRUCTURE.search(ln):
            continue
        yield ln


def bytes_to_text(content: bytes, media_type: str) -> str:
    if media_type == PDF:
        text = clean_text("\n".join(_pdf_lines(content.decode("latin-1"))))
        floor = MIN_PDF_CHARS
    elif media_type in (MS_WORD, OOXML_WORD) or "word" in (media_type or ""):
        text = clean_text(content.decode("utf-8", errors="ignore"))
        floor = MIN_WORD_CHARS
    else:
        text = content.decode("utf-8", errors="ignore").strip()
        floor = MIN_OTHER_CHARS

    if len(text) <= floor:
        logger.warning(
            "Low-quality extraction for %s: %d chars (need more than %d)",
            media_type, len(text), floor,
        )
        raise ExtractionError(
            "Unable to extract readable text from the uploaded file. "
            "Scanned or compressed documents are not supported."
        )
    logger.info("Extracted %d chars from %s (%d bytes)", len(text), media_type, len(content))
    return text


def extract_text(document: RawDocument) -> str:
    return bytes_to_text(document.content, document.media_type)


def guess_media_type(path: str | Path) -> str:
    media_type, _ = mimetypes.guess_type(str(path))
    return media_type or "application/octet-stream"


def file_to_text(path: str | Path, media_type: str | None = None,
                 max_size: int = 10 * 1024 * 1024) -> str:
    path = Path(path)
    media_type = media_type or guess_media_type(path)
    if media_type not in ALLOWED_MEDIA_TYPES:
        raise InvalidFileType(media_type)
    size = path.stat().st_size
    if size > max_size:
        raise FileTooLarge(size, max_size)
    with path.open("rb") as fh:
        content = fh.read()
    return extract_text(validate_upload(content, media_type, max_size))
