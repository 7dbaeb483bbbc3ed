"""Canonical candidate schema produced by both extraction paths."""

from models.schemas.base import SchemaModel

UNKNOWN_NAME = "Unknown"


class Experience(SchemaModel):
    """A single work experience entry.

    ``duration`` is the raw string as it appeared; ``start_date``/``end_date``
    are ``YYYY-MM`` or ``"Present"`` and stay ``None`` when no date was found.
    """
    job_title: str = ""
    company: str = ""
    duration: str = ""
    start_date: str | None = None
    end_date: str | None = None
    tech_used: list[str] = []
    description: str = ""
    achievements: list[str] = []


class Education(SchemaModel):
    degree: str = ""
    field: str = ""
    university: str = ""
    year: str = ""
    percentage: str | None = None
    gpa: str | None = None
    location: str | None = None


class Project(SchemaModel):
    name: str = ""
    description: str = ""
    tech_used: list[str] = []
    duration: str | None = None
    url: str | None = None
    achievements: list[str] = []


class Achievement(SchemaModel):
    title: str = ""
    description: str = ""
    year: str | None = None
    organization: str | None = None


class Certification(SchemaModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiry_date: str | None = None
    credential_id: str | None = None
    url: str | None = None


class OriginalData(SchemaModel):
    filename: str = ""
    raw_text: str = ""  # bounded prefix of the source text


class CandidateProfile(SchemaModel):
    """Structured candidate data extracted from one resume."""
    # Basic info
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    location: str | None = None

    # Professional info
    title: str | None = None
    summary: str | None = None
    experience: list[Experience] = []
    education: list[Education] = []
    projects: list[Project] = []
    achievements: list[Achievement] = []
    certifications: list[Certification] = []
    skills: list[str] = []
    interests: list[str] = []
    languages: list[str] = []

    # Preferences (only the LLM path fills these)
    salary: str | None = None
    availability: str | None = None
    remote_preference: str | None = None
    visa_status: str | None = None

    # Metadata
    original_data: OriginalData = OriginalData()
    source: str = "resume"
    confidence: int = 0

    @property
    def has_link(self) -> bool:
        return bool(self.linkedin_url or self.github_url or self.portfolio_url)
