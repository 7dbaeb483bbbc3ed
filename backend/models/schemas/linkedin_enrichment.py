"""LinkedIn enrichment payload applied to a stored candidate."""

from typing import Literal

from models.schemas.base import SchemaModel

EnrichmentSource = Literal["dev_fusion", "harvestapi"]


class LinkedInEnrichment(SchemaModel):
    """Fields a LinkedIn lookup may contribute. Every field is optional."""
    name: str | None = None
    title: str | None = None
    headline: str | None = None
    company: str | None = None
    location: str | None = None
    skills: list[str] | None = None
    open_to_work: bool | None = None
    profile_url: str | None = None

    @property
    def effective_title(self) -> str | None:
        return self.title or self.headline
