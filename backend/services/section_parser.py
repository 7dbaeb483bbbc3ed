"""Line-level resume structure: section headers, bullets, and date ranges."""

import re

# Section header patterns and their canonical names
SECTION_PATTERNS: dict[str, list[str]] = {
    "experience": [
        r"(?:work|professional|employment)\s*(?:experience|history)",
        r"experience",
        r"career\s*(?:history|summary|path)",
    ],
    "education": [
        r"education(?:al)?\s*(?:background|qualifications|history)?",
        r"academic\s*(?:background|qualifications)",
    ],
    "skills": [
        r"(?:technical|core|key|professional)?\s*skills",
        r"(?:technical|core)?\s*(?:competencies|proficiencies|expertise)",
        r"technologies",
    ],
    "summary": [
        r"(?:professional|executive|career)?\s*summary",
        r"(?:career|professional)?\s*objective",
        r"profile",
        r"about\s*me",
    ],
    "projects": [
        r"(?:key|notable|selected|personal|academic)?\s*projects",
    ],
    "certifications": [
        r"certific(?:ations?|ates?)",
        r"licen[sc]es?\s*(?:&|and)?\s*certific(?:ations?|ates?)",
    ],
    "achievements": [
        r"(?:key\s+)?achievements?",
        r"(?:awards?|honors?|accomplishments)(?:\s*(?:&|and)\s*(?:awards?|honors?))?",
    ],
    "interests": [r"interests|hobbies"],
    "languages": [r"(?:spoken\s+)?languages"],
}

_COMPILED: dict[str, re.Pattern] = {}
for section, patterns in SECTION_PATTERNS.items():
    combined = "|".join(patterns)
    _COMPILED[section] = re.compile(rf"^\s*(?:{combined})\s*:?\s*$", re.IGNORECASE)


def section_header(line: str) -> str | None:
    """Canonical section name if the line is a bare section header, else None."""
    stripped = line.strip()
    if not stripped:
        return None
    for section_name, pattern in _COMPILED.items():
        if pattern.match(stripped):
            return section_name
    return None


# ---------------------------------------------------------------------------
# Bullets
# ---------------------------------------------------------------------------

BULLET_MARKERS = frozenset("•-–—►▪✓*○◆⚫→▸▹◇■□●")
_NUMBERED_RE = re.compile(r"^\d{1,2}[.)]\s")


def strip_bullet(line: str) -> str | None:
    """Return the bullet's text if the line is a bullet point, else None."""
    stripped = line.strip()
    if not stripped:
        return None
    if stripped[0] in BULLET_MARKERS:
        cleaned = stripped.lstrip("".join(BULLET_MARKERS) + " ").strip()
        return cleaned or None
    if _NUMBERED_RE.match(stripped):
        cleaned = re.sub(r"^\d{1,2}[.)]\s*", "", stripped).strip()
        return cleaned or None
    return None


# ---------------------------------------------------------------------------
# Date ranges: "Dec 2023 - Feb 2025", "03/2019 to Present", "2017 – 2019"
# ---------------------------------------------------------------------------

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_DATE = rf"(?:{_MONTHS}\.?,?\s*\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}})"
_OPEN_END = r"(?:present|current|now|today)"

DATE_RANGE_RE = re.compile(
    rf"(?<![\w/])({_DATE})\s*(?:-|–|—|to)\s*({_DATE}|{_OPEN_END})\b",
    re.IGNORECASE,
)

MONTH_MAP = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9,
    "september": 9, "oct": 10, "october": 10, "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

PRESENT = "Present"
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_MONTH_YEAR_NUMERIC_RE = re.compile(r"^(\d{1,2})/(\d{4})$")


def _format(year: int, month: int) -> str | None:
    if 1950 <= year <= 2100 and 1 <= month <= 12:
        return f"{year:04d}-{month:02d}"
    return None


def normalize_date(date_str: str | None) -> str | None:
    """Normalize a date to ``YYYY-MM`` or ``"Present"``; None if unparseable.

    A bare year maps to January of that year.
    """
    if not date_str:
        return None
    value = date_str.strip().rstrip(".").replace(",", " ")
    if re.fullmatch(_OPEN_END, value, re.IGNORECASE):
        return PRESENT

    m = _YEAR_MONTH_RE.match(value)
    if m:
        return _format(int(m.group(1)), int(m.group(2)))

    m = _MONTH_YEAR_NUMERIC_RE.match(value)
    if m:
        return _format(int(m.group(2)), int(m.group(1)))

    parts = value.split()
    if len(parts) == 2:
        month = MONTH_MAP.get(parts[0].lower().rstrip("."))
        if month and parts[1].isdigit():
            return _format(int(parts[1]), month)

    if value.isdigit() and len(value) == 4:
        return _format(int(value), 1)
    return None


def find_date_range(text: str) -> tuple[str, str | None, str | None] | None:
    """First date range in text as (raw duration, start, end), or None."""
    match = DATE_RANGE_RE.search(text)
    if not match:
        return None
    return match.group(0).strip(), normalize_date(match.group(1)), normalize_date(match.group(2))
