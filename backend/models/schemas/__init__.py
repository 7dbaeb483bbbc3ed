"""Pydantic contracts shared by the extraction pipeline and the API."""

from models.schemas.raw_extraction import Hyperlink, RawExtraction
from models.schemas.candidate_profile import (
    Achievement,
    CandidateProfile,
    Certification,
    Education,
    Experience,
    OriginalData,
    Project,
)
from models.schemas.extraction_result import BatchResult, ExtractionResult
from models.schemas.linkedin_enrichment import LinkedInEnrichment

__all__ = [
    "Hyperlink",
    "RawExtraction",
    "Achievement",
    "CandidateProfile",
    "Certification",
    "Education",
    "Experience",
    "OriginalData",
    "Project",
    "ExtractionResult",
    "BatchResult",
    "LinkedInEnrichment",
]
