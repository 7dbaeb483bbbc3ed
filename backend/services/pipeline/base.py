"""Abstract base class for the profile extraction strategies."""

from abc import ABC, abstractmethod

from models.schemas.candidate_profile import CandidateProfile
from models.schemas.raw_extraction import Hyperlink


class BaseExtractor(ABC):
    """Turns resume text plus discovered hyperlinks into a CandidateProfile.

    Subclasses must implement:
        - name: identifier used in logs and ExtractionResult.extraction_method
        - extract(): build the profile
    """

    name: str = ""

    @abstractmethod
    async def extract(
        self,
        text: str,
        hyperlinks: list[Hyperlink],
        filename: str = "",
    ) -> CandidateProfile:
        """Extract a profile. Failure semantics are defined per strategy."""
