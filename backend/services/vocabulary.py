"""Keyword tables used by the regex fallback extractor.

The tables are plain data: the defaults below can be replaced wholesale by a
JSON file (``VOCABULARY_PATH``) without touching extractor code.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from config import settings

logger = logging.getLogger(__name__)

DEFAULT_SKILLS: list[str] = [
    # Programming languages
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "PHP", "Ruby",
    "Go", "Rust", "Swift", "Kotlin",
    # Frontend
    "React", "Angular", "Vue", "HTML", "CSS", "Sass", "Bootstrap", "Tailwind",
    "Next.js", "Nuxt.js",
    # Backend
    "Node.js", "Express", "Django", "Flask", "Spring", "Laravel", "Rails", "ASP.NET",
    # Databases
    "PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "Oracle", "SQL Server",
    # Cloud & DevOps
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Jenkins", "GitLab", "GitHub Actions",
    # Tools & others
    "Git", "Linux", "Windows", "macOS", "Figma", "Photoshop", "Excel", "PowerBI", "Tableau",
]


class Vocabulary(BaseModel):
    """Keyword tables for the pattern-based extractor."""
    skills: list[str] = DEFAULT_SKILLS
    # Line keywords that start a record of each kind
    experience_keywords: list[str] = ["software engineer", "developer", "analyst", "manager", "director"]
    education_keywords: list[str] = ["bachelor", "master", "phd", "degree", "university", "college"]
    project_keywords: list[str] = ["project", "application", "system", "website", "app"]
    achievement_keywords: list[str] = ["award", "achievement", "recognition", "honor"]
    certification_keywords: list[str] = ["certification", "certificate", "license", "credential"]
    # Headline keywords searched in the first lines for the current title
    title_keywords: list[str] = [
        "Software Engineer", "Developer", "Programmer", "Analyst", "Manager",
        "Director", "Lead", "Senior", "Junior", "Full Stack", "Frontend",
        "Backend", "DevOps", "Data Scientist", "Product Manager",
    ]
    # Section words that count as structural evidence for regex confidence
    section_keywords: list[str] = ["experience", "education", "skills", "projects", "certifications"]


def load_vocabulary(path: str | Path) -> Vocabulary:
    """Load a vocabulary from JSON; missing tables keep their defaults."""
    return Vocabulary.model_validate_json(Path(path).read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def get_vocabulary() -> Vocabulary:
    if settings.vocabulary_path:
        logger.info("Loading extraction vocabulary from %s", settings.vocabulary_path)
        return load_vocabulary(settings.vocabulary_path)
    return Vocabulary()
