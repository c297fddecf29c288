from pathlib import PurePath
from typing import Optional

from resume_screener.models.models import ResumeUpload, ResumeDocument
from resume_screener.utils.exceptions import ExtractionFailure
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

TEXT_EXTENSIONS = {".txt", ".text", ".md"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}

# PDF/DOCX decoding is not supported; these degrade to the placeholder.
BINARY_EXTENSIONS = {".pdf", ".doc", ".docx"}
BINARY_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def placeholder_text(name: str) -> str:
    return f"[{name} - unable to extract text, please provide PDF text or TXT format]"


def _media_type(content_type: Optional[str]) -> str:
    # "text/plain; charset=utf-8" -> "text/plain"
    return (content_type or "").split(";")[0].strip().lower()


def is_plain_text(name: str, content_type: Optional[str]) -> bool:
    return _media_type(content_type) in TEXT_CONTENT_TYPES or PurePath(name).suffix.lower() in TEXT_EXTENSIONS


def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def read_unknown(name: str, content_type: Optional[str], data: bytes) -> str:
    if PurePath(name).suffix.lower() in BINARY_EXTENSIONS or _media_type(content_type) in BINARY_CONTENT_TYPES:
        raise ExtractionFailure("Binary document format is not supported", file_name=name, content_type=content_type)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionFailure("File is not valid UTF-8 text", file_name=name, content_type=content_type, cause=e) from e
    if not text.strip():
        raise ExtractionFailure("File contains no text", file_name=name, content_type=content_type)
    return text


def extract_text(name: str, content_type: Optional[str], data: bytes) -> str:
    """Plain text for one uploaded file; never raises for unreadable content."""
    if is_plain_text(name, content_type):
        return read_txt(data)
    try:
        return read_unknown(name, content_type, data)
    except ExtractionFailure as e:
        logger.warning(f"Text extraction failed for {name}: {e.message}", extra=e.details)
        return placeholder_text(name)


def extract_document(upload: ResumeUpload) -> ResumeDocument:
    text = extract_text(upload.name, upload.content_type, upload.data)
    return ResumeDocument(name=upload.name, extracted_text=text)
