"""Candidate persistence: upsert extracted profiles and apply LinkedIn enrichment."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Protocol

from pydantic import BaseModel, Field

from models.schemas.candidate_profile import UNKNOWN_NAME, CandidateProfile
from models.schemas.linkedin_enrichment import EnrichmentSource, LinkedInEnrichment

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CandidateRecord(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = UNKNOWN_NAME
    email: str | None = None
    phone: str | None = None
    title: str | None = None
    company: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    location: str | None = None
    skills: list[str] = []
    open_to_work: bool | None = None
    source: str = "resume"
    extracted_data: CandidateProfile | None = None
    confidence: int = 0
    processing_time_ms: int = 0
    linkedin_last_active: datetime | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Activity(BaseModel):
    type: str
    message: str
    details: str
    created_at: datetime = Field(default_factory=_now)


class CandidateStore(Protocol):
    async def save_profile(
        self,
        profile: CandidateProfile,
        filename: str,
        processing_time_ms: int,
        confidence: int,
    ) -> str: ...

    async def apply_linkedin_enrichment(
        self,
        candidate_id: str,
        enrichment: LinkedInEnrichment,
        source: EnrichmentSource = "harvestapi",
    ) -> CandidateRecord | None: ...


def record_fields(profile: CandidateProfile, processing_time_ms: int, confidence: int) -> dict:
    """Candidate columns derived from a profile; company comes from the first job."""
    return {
        "name": profile.name or UNKNOWN_NAME,
        "email": profile.email or None,
        "phone": profile.phone or None,
        "title": profile.title or None,
        "company": (profile.experience[0].company or None) if profile.experience else None,
        "linkedin_url": profile.linkedin_url,
        "github_url": profile.github_url,
        "portfolio_url": profile.portfolio_url,
        "location": profile.location,
        "skills": list(profile.skills),
        "source": "resume",
        "extracted_data": profile,
        "confidence": confidence,
        "processing_time_ms": processing_time_ms,
    }


def enrichment_fields(enrichment: LinkedInEnrichment, source: EnrichmentSource) -> dict:
    """Only the fields the lookup actually supplied."""
    now = _now()
    update: dict = {"updated_at": now, "linkedin_last_active": now, "source": source}
    if enrichment.name:
        update["name"] = enrichment.name
    if enrichment.effective_title:
        update["title"] = enrichment.effective_title
    if enrichment.company:
        update["company"] = enrichment.company
    if enrichment.location:
        update["location"] = enrichment.location
    if enrichment.skills is not None:
        update["skills"] = list(enrichment.skills)
    if enrichment.open_to_work is not None:
        update["open_to_work"] = enrichment.open_to_work
    if enrichment.profile_url:
        update["linkedin_url"] = enrichment.profile_url
    return update


class InMemoryCandidateStore:
    """Process-local store; candidates are matched by email, then by exact name."""

    def __init__(self) -> None:
        self.candidates: dict[str, CandidateRecord] = {}
        self.activities: list[Activity] = []
        self._lock = asyncio.Lock()

    def get(self, candidate_id: str) -> CandidateRecord | None:
        return self.candidates.get(candidate_id)

    def _find_existing(self, email: str | None, name: str | None) -> CandidateRecord | None:
        if email:
            for record in self.candidates.values():
                if record.email == email:
                    return record
        if name and name != UNKNOWN_NAME:
            for record in self.candidates.values():
                if record.name == name:
                    return record
        return None

    async def save_profile(
        self,
        profile: CandidateProfile,
        filename: str,
        processing_time_ms: int,
        confidence: int,
    ) -> str:
        fields = record_fields(profile, processing_time_ms, confidence)
        async with self._lock:
            existing = self._find_existing(fields["email"], fields["name"])
            if existing:
                record = existing.model_copy(update={**fields, "updated_at": _now()})
                logger.info("Updated existing candidate: %s", record.id)
            else:
                record = CandidateRecord(**fields)
                logger.info("Created new candidate: %s", record.id)
            self.candidates[record.id] = record
            self.activities.append(Activity(
                type="resume_upload",
                message=f"Resume processed for {fields['name']}",
                details=f"File: {filename}, Confidence: {confidence}%, Processing Time: {processing_time_ms}ms",
            ))
        return record.id

    async def apply_linkedin_enrichment(
        self,
        candidate_id: str,
        enrichment: LinkedInEnrichment,
        source: EnrichmentSource = "harvestapi",
    ) -> CandidateRecord | None:
        async with self._lock:
            record = self.candidates.get(candidate_id)
            if record is None:
                logger.warning("LinkedIn enrichment for unknown candidate %s", candidate_id)
                return None
            record = record.model_copy(update=enrichment_fields(enrichment, source))
            self.candidates[candidate_id] = record
            self.activities.append(Activity(
                type="linkedin_update",
                message=f"Candidate updated with LinkedIn data from {source}",
                details=f"Candidate ID: {candidate_id}, Source: {source}",
            ))
        logger.info("Updated candidate %s with LinkedIn data from %s", candidate_id, source)
        return record
