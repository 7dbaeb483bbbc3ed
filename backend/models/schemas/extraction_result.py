"""Per-document and per-batch pipeline outputs."""

from typing import Literal

from models.schemas.base import SchemaModel
from models.schemas.candidate_profile import CandidateProfile

ExtractionMethod = Literal["llm", "regex", "empty"]


class ExtractionResult(SchemaModel):
    """Outcome of parsing one resume. Never mutated after construction."""
    filename: str = ""
    raw_text: str = ""
    profile: CandidateProfile = CandidateProfile()
    confidence: int = 0  # 0-100
    processing_time_ms: int = 0
    extraction_method: ExtractionMethod = "empty"


class BatchResult(SchemaModel):
    """Successful results in input order plus one message per failed file."""
    results: list[ExtractionResult] = []
    errors: list[str] = []
