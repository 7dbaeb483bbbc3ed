"""Exception hierarchy for resume parsing.

Format errors abort a single document. Model-path errors are caught by the
orchestrator and trigger the regex fallback. Persistence failures carry the
already computed extraction result so callers can still surface it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.schemas.extraction_result import ExtractionResult


class ResumeParsingError(Exception):
    """Base class for all resume parsing errors."""


class UnsupportedFormat(ResumeParsingError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Unsupported file type: {filename}. "
            "Only PDF and DOCX files are supported for resume parsing."
        )
        self.filename = filename


class LegacyFormatUnsupported(ResumeParsingError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            f"DOC files not supported: {filename}. Please convert to DOCX format."
        )
        self.filename = filename


class DocumentParseError(ResumeParsingError):
    """Wraps any failure of the document stage with the offending filename."""

    def __init__(self, filename: str, cause: Exception) -> None:
        super().__init__(f"Resume parsing failed for {filename}: {cause}")
        self.filename = filename
        self.cause = cause


class EmptyInput(ResumeParsingError):
    """Text too short for a meaningful model extraction."""


class ModelUnavailable(ResumeParsingError):
    """The model call could not be completed."""


class MalformedModelResponse(ResumeParsingError):
    """The model answered, but not with the expected JSON object."""


class PersistenceFailure(ResumeParsingError):
    def __init__(self, message: str, result: ExtractionResult | None = None) -> None:
        super().__init__(f"Failed to save resume data: {message}")
        self.result = result
