"""Regex fallback extractor: deterministic, pattern-based profile recovery.

Runs when the LLM path is unavailable or fails. It is total (never raises)
and pure: the same (text, hyperlinks) always gives the same profile. Recall
is traded for that guarantee; record-level fields use one keyword per line.
"""

import logging
import re

from config import settings
from models.schemas.candidate_profile import (
    UNKNOWN_NAME,
    Achievement,
    CandidateProfile,
    Certification,
    Education,
    Experience,
    OriginalData,
    Project,
)
from models.schemas.raw_extraction import Hyperlink
from services.confidence import regex_confidence
from services.hyperlinks import (
    find_github,
    find_linkedin,
    find_portfolio,
    is_github_url,
    is_linkedin_url,
    is_portfolio_url,
    normalize_url,
)
from services.pipeline.base import BaseExtractor
from services.section_parser import find_date_range, section_header, strip_bullet
from services.vocabulary import Vocabulary, get_vocabulary

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# ---------------------------------------------------------------------------
# Contact patterns
# ---------------------------------------------------------------------------

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# North-American, India, then generic international; first match wins
PHONE_PATTERNS: list[re.Pattern] = [
    re.compile(r"(?<![\d+])(?:\+1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"),
    re.compile(r"(?<![\d+])(?:\+91[-.\s]?)?\d{10}(?!\d)"),
    re.compile(r"(?<![\d+])(?:\+\d{1,3}[-.\s]?)?\d{8,15}(?!\d)"),
]

NAME_PATTERNS: list[re.Pattern] = [
    # A line holding only capitalised words
    re.compile(r"^[ \t]*([A-Z][a-z]+(?: [A-Z][a-z]+){1,3})[ \t\r]*$", re.MULTILINE),
    # Explicit label
    re.compile(r"(?:Full Name|Name)\s*:\s*([A-Z][a-z]+(?: [A-Z][a-z]+){1,3})", re.IGNORECASE),
    # First and last name leading a headline ("Jane Smith Senior Engineer", "Jane Smith | Engineer")
    re.compile(r"^[ \t]*([A-Z][a-z]+ [A-Z][a-z]+)[ \t]+(?=[A-Z|•·,-])", re.MULTILINE),
    # Looser leading line
    re.compile(r"^[ \t]*([A-Z][a-zA-Z ]{2,40})", re.MULTILINE),
]
NAME_VALID_RE = re.compile(r"^[A-Z][a-z]+(?: [A-Z][a-z]+){1,3}$")

# ---------------------------------------------------------------------------
# Link patterns (text fallback, only consulted when no hyperlink matched)
# ---------------------------------------------------------------------------

LINKEDIN_URL_RE = re.compile(
    r"(?:https?://)?(?:[a-z]{2,3}\.)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_%-]+", re.IGNORECASE
)
LINKEDIN_LABEL_RE = re.compile(r"\blinkedin\s*:\s*([A-Za-z0-9-]{3,100})\b(?![./])", re.IGNORECASE)
GITHUB_URL_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[A-Za-z0-9-]+", re.IGNORECASE)
GITHUB_LABEL_RE = re.compile(r"\bgithub\s*:\s*([A-Za-z0-9-]{2,39})\b(?![./])", re.IGNORECASE)

PORTFOLIO_PATTERNS: list[re.Pattern] = [
    re.compile(
        r"\b(?:portfolio|website|personal site|blog)\s*:?\s*"
        r"((?:https?://)?[A-Za-z0-9.-]+\.[A-Za-z]{2,}(?:/[^\s,;|)]*)?)",
        re.IGNORECASE,
    ),
    re.compile(r"https?://[^\s,;|<>()\"']+"),
    re.compile(
        r"(?<![@\w.])(?:www\.)?[a-zA-Z0-9-]+\.(?:com|net|org|io|dev|me|co|uk|ca|au)\b"
        r"(?:/[A-Za-z0-9_./-]*)?"
    ),
]

# ---------------------------------------------------------------------------
# Single-field patterns, each bounded in length
# ---------------------------------------------------------------------------

LOCATION_LABEL_RE = re.compile(r"(?:Location|Address|Based in)\s*:\s*([A-Za-z .,'-]{3,48})", re.IGNORECASE)
LOCATION_CITY_RE = re.compile(
    r"(?:^|[|•·])[ \t]*([A-Z][A-Za-z .'-]{1,30},[ \t]*(?:[A-Z]{2}|[A-Z][a-z]+(?: [A-Z][a-z]+)?))[ \t]*(?=$|[|•·])",
    re.MULTILINE,
)
TITLE_SPAN_RE = re.compile(r"[A-Za-z ]{10,50}")
TITLE_SEARCH_LINES = 10
SUMMARY_RE = re.compile(r"\b(?:professional summary|career objective|summary|objective|profile|about)\b[:\s]*([^\n\r]{50,500})", re.IGNORECASE)
SKILLS_LINE_RE = re.compile(r"(?:Technical Skills?|Skills?|Technologies?)\s*:\s*([^\n\r]{1,200})", re.IGNORECASE)
INTERESTS_RE = re.compile(r"\b(?:interests?|hobbies?)[:\s]*([^\n\r]{10,200})", re.IGNORECASE)
LANGUAGES_RE = re.compile(r"(?<!programming )\b(?:spoken\s+)?languages?[:\s]*([^\n\r]{10,100})", re.IGNORECASE)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_LIST_SPLIT_RE = re.compile(r"[,;|]")


# An empty keyword table matches nothing
_NO_MATCH_RE = re.compile(r"(?!)")


def _keyword_re(keywords: list[str]) -> re.Pattern:
    if not keywords:
        return _NO_MATCH_RE
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})(?:s|es)?\b", re.IGNORECASE)


def _skill_re(skill: str) -> re.Pattern:
    # Lookarounds instead of \b so "C++" and "C#" match, and "Java" skips "JavaScript"
    return re.compile(rf"(?<![A-Za-z0-9.#]){re.escape(skill)}(?![A-Za-z0-9])", re.IGNORECASE)


def _split_list(raw: str, min_len: int, max_len: int) -> list[str]:
    items = (s.strip() for s in _LIST_SPLIT_RE.split(raw))
    return [s for s in items if min_len <= len(s) <= max_len]


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------

def extract_name(text: str) -> str:
    """Best name candidate, or the "Unknown" sentinel."""
    for pattern in NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            name = " ".join(match.group(1).split())
            if NAME_VALID_RE.match(name):
                return name
    return UNKNOWN_NAME


def extract_email(text: str) -> str | None:
    match = EMAIL_RE.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> str | None:
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


def extract_linkedin(text: str) -> str | None:
    match = LINKEDIN_URL_RE.search(text)
    if match:
        return normalize_url(match.group(0).rstrip("/"))
    match = LINKEDIN_LABEL_RE.search(text)
    if match:
        return f"https://linkedin.com/in/{match.group(1)}"
    return None


def extract_github(text: str) -> str | None:
    match = GITHUB_URL_RE.search(text)
    if match:
        return normalize_url(match.group(0).rstrip("/"))
    match = GITHUB_LABEL_RE.search(text)
    if match:
        return f"https://github.com/{match.group(1)}"
    return None


def extract_portfolio(text: str) -> str | None:
    for pattern in PORTFOLIO_PATTERNS:
        for match in pattern.finditer(text):
            url = (match.group(1) if match.groups() else match.group(0)).rstrip(".,/")
            if is_portfolio_url(url):
                return normalize_url(url)
    return None


def extract_location(text: str, vocab: Vocabulary) -> str | None:
    match = LOCATION_LABEL_RE.search(text)
    if match:
        location = match.group(1).strip(" ,.-")
        if 3 < len(location) < 50:
            return location

    title_re = _keyword_re(vocab.title_keywords + vocab.experience_keywords)
    for match in LOCATION_CITY_RE.finditer(text):
        location = match.group(1).strip()
        if 3 < len(location) < 50 and not title_re.search(location):
            return location
    return None


def extract_title(text: str, vocab: Vocabulary) -> str | None:
    """Current title from the first lines of the resume."""
    if not vocab.title_keywords:
        return None
    title_re = re.compile("|".join(re.escape(k) for k in vocab.title_keywords), re.IGNORECASE)
    for line in text.split("\n")[:TITLE_SEARCH_LINES]:
        if title_re.search(line):
            match = TITLE_SPAN_RE.search(line)
            if match:
                return match.group(0).strip()
    return None


def extract_summary(text: str) -> str | None:
    match = SUMMARY_RE.search(text)
    return match.group(1).strip() if match else None


def extract_skills(text: str, vocab: Vocabulary) -> list[str]:
    """Vocabulary matches plus items from an explicit "Skills:" line."""
    found = [skill for skill in vocab.skills if _skill_re(skill).search(text)]
    match = SKILLS_LINE_RE.search(text)
    if match:
        found.extend(_split_list(match.group(1), 2, 24))
    return list(dict.fromkeys(found))


def extract_interests(text: str) -> list[str]:
    match = INTERESTS_RE.search(text)
    return _split_list(match.group(1), 3, 29) if match else []


def extract_languages(text: str) -> list[str]:
    match = LANGUAGES_RE.search(text)
    return _split_list(match.group(1), 3, 19) if match else []


# ---------------------------------------------------------------------------
# Record extractors: one keyword match per line
# ---------------------------------------------------------------------------

def _candidate_lines(lines: list[str], keyword_re: re.Pattern):
    """(index, stripped line) for non-header, non-bullet lines matching the keywords."""
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or section_header(stripped) or strip_bullet(stripped):
            continue
        if keyword_re.search(stripped):
            yield i, stripped


def _next_line(lines: list[str], i: int) -> str:
    return lines[i + 1].strip() if i + 1 < len(lines) else ""


def _bullets_after(lines: list[str], i: int, lookahead: int = 2) -> list[str]:
    """Bullet lines under a record line, allowing a few plain lines in between."""
    bullets: list[str] = []
    skipped = 0
    for line in lines[i + 1:]:
        bullet = strip_bullet(line)
        if bullet:
            bullets.append(bullet)
            continue
        if bullets or skipped >= lookahead:
            break
        if line.strip():
            skipped += 1
    return bullets


def extract_experience(text: str, vocab: Vocabulary) -> list[Experience]:
    lines = text.split("\n")
    keyword_re = _keyword_re(vocab.experience_keywords)
    experiences: list[Experience] = []
    for i, line in _candidate_lines(lines, keyword_re):
        window = " ".join(lines[i:i + 3])
        date_range = find_date_range(window)
        duration, start, end = date_range if date_range else (UNKNOWN, None, None)
        achievements = _bullets_after(lines, i)
        context = " ".join([line] + achievements)
        experiences.append(Experience(
            job_title=line,
            company=_next_line(lines, i) or UNKNOWN,
            duration=duration,
            start_date=start,
            end_date=end,
            tech_used=[s for s in vocab.skills if _skill_re(s).search(context)],
            description=line,
            achievements=achievements,
        ))
    return experiences


def extract_education(text: str, vocab: Vocabulary) -> list[Education]:
    lines = text.split("\n")
    education: list[Education] = []
    for i, line in _candidate_lines(lines, _keyword_re(vocab.education_keywords)):
        following = _next_line(lines, i)
        year = YEAR_RE.search(f"{line} {following}")
        education.append(Education(
            degree=line,
            field=UNKNOWN,
            university=following or UNKNOWN,
            year=year.group(0) if year else UNKNOWN,
        ))
    return education


def extract_projects(text: str, vocab: Vocabulary) -> list[Project]:
    lines = text.split("\n")
    return [
        Project(name=line, description=line)
        for _, line in _candidate_lines(lines, _keyword_re(vocab.project_keywords))
    ]


def extract_achievements(text: str, vocab: Vocabulary) -> list[Achievement]:
    lines = text.split("\n")
    return [
        Achievement(title=line, description=line)
        for _, line in _candidate_lines(lines, _keyword_re(vocab.achievement_keywords))
    ]


def extract_certifications(text: str, vocab: Vocabulary) -> list[Certification]:
    lines = text.split("\n")
    return [
        Certification(name=line, issuer=UNKNOWN, date=UNKNOWN)
        for _, line in _candidate_lines(lines, _keyword_re(vocab.certification_keywords))
    ]


def extract_profile(
    text: str,
    hyperlinks: list[Hyperlink] | None = None,
    filename: str = "",
    vocabulary: Vocabulary | None = None,
) -> CandidateProfile:
    """Build a full profile from text; discovered hyperlinks win over text patterns."""
    vocab = vocabulary or get_vocabulary()
    hyperlinks = hyperlinks or []

    linkedin = find_linkedin(hyperlinks) or extract_linkedin(text)
    github = find_github(hyperlinks) or extract_github(text)
    portfolio = find_portfolio(hyperlinks) or extract_portfolio(text)

    return CandidateProfile(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone(text),
        linkedin_url=linkedin if linkedin and is_linkedin_url(linkedin) else None,
        github_url=github if github and is_github_url(github) else None,
        portfolio_url=portfolio,
        location=extract_location(text, vocab),
        title=extract_title(text, vocab),
        summary=extract_summary(text),
        experience=extract_experience(text, vocab),
        education=extract_education(text, vocab),
        projects=extract_projects(text, vocab),
        achievements=extract_achievements(text, vocab),
        certifications=extract_certifications(text, vocab),
        skills=extract_skills(text, vocab),
        interests=extract_interests(text),
        languages=extract_languages(text),
        original_data=OriginalData(filename=filename, raw_text=text[:settings.raw_text_prefix_chars]),
        source="resume",
        confidence=regex_confidence(text, vocab),
    )


class RegexExtractor(BaseExtractor):
    name = "regex"

    def __init__(self, vocabulary: Vocabulary | None = None) -> None:
        self._vocabulary = vocabulary

    async def extract(
        self,
        text: str,
        hyperlinks: list[Hyperlink],
        filename: str = "",
    ) -> CandidateProfile:
        logger.info("Running regex extraction for %s", filename or "<text>")
        return extract_profile(text, hyperlinks, filename, self._vocabulary)
