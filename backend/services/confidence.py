"""Confidence scoring for the two extraction paths.

The rubrics are deliberately different: the regex score measures textual
evidence of resume structure, the LLM score measures field-level
completeness of an already structured profile.
"""

import re

from models.schemas.candidate_profile import UNKNOWN_NAME, CandidateProfile
from services.vocabulary import Vocabulary, get_vocabulary

# LLM rubric: essential contact info, professional info, skills/education
LLM_FIELD_WEIGHTS: dict[str, int] = {
    "name": 15,
    "email": 15,
    "phone": 10,
    "title": 10,
    "summary": 10,
    "experience": 10,
    "skills": 10,
    "education": 10,
}
# Bonus tier, capped at LLM_BONUS_CAP
LLM_BONUS_WEIGHTS: dict[str, int] = {
    "projects": 3,
    "certifications": 3,
    "achievements": 2,
}
LLM_BONUS_CAP = 10
LLM_MAX_SCORE = sum(LLM_FIELD_WEIGHTS.values()) + LLM_BONUS_CAP

# Regex rubric
REGEX_SECTION_POINTS = 15
REGEX_EMAIL_POINTS = 10
REGEX_PHONE_POINTS = 10
REGEX_LINKEDIN_POINTS = 5
_DIGIT_RUN_RE = re.compile(r"\d{10,}")


def _present(profile: CandidateProfile, field: str) -> bool:
    value = getattr(profile, field)
    if field == "name":
        return bool(value) and value != UNKNOWN_NAME
    return bool(value)


def llm_confidence(profile: CandidateProfile) -> int:
    """Field-completeness score (0-100) for a structured profile."""
    score = sum(w for field, w in LLM_FIELD_WEIGHTS.items() if _present(profile, field))

    if profile.has_link:
        # A grounded profile link earns the whole bonus tier
        bonus = LLM_BONUS_CAP
    else:
        bonus = sum(w for field, w in LLM_BONUS_WEIGHTS.items() if _present(profile, field))
    score += min(bonus, LLM_BONUS_CAP)

    return round(score / LLM_MAX_SCORE * 100)


def regex_confidence(text: str, vocabulary: Vocabulary | None = None) -> int:
    """Structural-evidence score (0-100) computed from the raw text."""
    vocab = vocabulary or get_vocabulary()
    lower = text.lower()

    score = sum(REGEX_SECTION_POINTS for kw in vocab.section_keywords if kw in lower)
    if "@" in text:
        score += REGEX_EMAIL_POINTS
    if _DIGIT_RUN_RE.search(text):
        score += REGEX_PHONE_POINTS
    if "linkedin" in lower:
        score += REGEX_LINKEDIN_POINTS
    return min(score, 100)
