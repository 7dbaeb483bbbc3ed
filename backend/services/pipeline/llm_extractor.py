"""LLM extractor: one model call that returns the whole candidate profile as JSON.

The model only proposes values. Discovered hyperlinks always win over model
links, and a model link survives only when it can be found in the source.
"""

import json
import logging

from pydantic import ValidationError

from config import settings
from models.schemas.candidate_profile import CandidateProfile, Experience, OriginalData
from models.schemas.raw_extraction import Hyperlink
from services.confidence import llm_confidence
from services.debug_sink import DebugSink, NullDebugSink, write_safely
from services.errors import EmptyInput, MalformedModelResponse, ModelUnavailable, ResumeParsingError
from services.gemini_client import ModelClient, parse_json_object
from services.hyperlinks import (
    canonical_url,
    find_github,
    find_linkedin,
    find_portfolio,
    is_github_url,
    is_grounded,
    is_linkedin_url,
    is_portfolio_url,
    normalize_url,
)
from services.pipeline.base import BaseExtractor
from services.pipeline.regex_extractor import extract_github, extract_linkedin
from services.prompt_builder import SYSTEM_PROMPT, build_extraction_prompt
from services.section_parser import find_date_range, normalize_date

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 10

RECORD_LIST_FIELDS = ("experience", "education", "projects", "achievements", "certifications")
STRING_LIST_FIELDS = ("skills", "interests", "languages")
# Metadata the pipeline owns; never taken from the model
PIPELINE_FIELDS = ("confidence", "source", "originalData", "original_data", "processingTime")


def _string_list(value) -> list[str]:
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _clean_record(record: dict) -> dict:
    return {
        key: _string_list(value) if isinstance(value, list) else value
        for key, value in record.items()
    }


def clean_payload(data: dict) -> dict:
    """Drop pipeline-owned keys and list entries of the wrong shape."""
    cleaned = {k: v for k, v in data.items() if k not in PIPELINE_FIELDS}
    for field in RECORD_LIST_FIELDS:
        if field in cleaned:
            value = cleaned[field]
            records = value if isinstance(value, list) else []
            cleaned[field] = [_clean_record(r) for r in records if isinstance(r, dict)]
    for field in STRING_LIST_FIELDS:
        if field in cleaned:
            cleaned[field] = _string_list(cleaned[field])
    return cleaned


def backfill_dates(exp: Experience) -> Experience:
    """Normalize start/end dates, filling gaps from the raw duration string."""
    start = normalize_date(exp.start_date)
    end = normalize_date(exp.end_date)
    if (start is None or end is None) and exp.duration:
        date_range = find_date_range(exp.duration)
        if date_range:
            start = start or date_range[1]
            end = end or date_range[2]
    if start == exp.start_date and end == exp.end_date:
        return exp
    return exp.model_copy(update={"start_date": start, "end_date": end})


def _grounded_link(url: str | None, text: str, hyperlinks: list[Hyperlink], host_check, text_lookup) -> str | None:
    if not url:
        return None
    url = normalize_url(url)
    if not host_check(url):
        return None
    if is_grounded(url, text, hyperlinks):
        return url
    # "LinkedIn: handle" style mentions expand to the same URL the text patterns build
    expanded = text_lookup(text) if text_lookup else None
    if expanded and canonical_url(expanded) == canonical_url(url):
        return url
    return None


def finalize_profile(
    profile: CandidateProfile,
    text: str,
    hyperlinks: list[Hyperlink],
    filename: str,
) -> CandidateProfile:
    """Apply link, date and metadata rules to a model-produced profile."""
    linkedin = find_linkedin(hyperlinks) or _grounded_link(
        profile.linkedin_url, text, hyperlinks, is_linkedin_url, extract_linkedin)
    github = find_github(hyperlinks) or _grounded_link(
        profile.github_url, text, hyperlinks, is_github_url, extract_github)
    portfolio = find_portfolio(hyperlinks) or _grounded_link(
        profile.portfolio_url, text, hyperlinks, is_portfolio_url, None)

    dropped = [
        url for url, kept in (
            (profile.linkedin_url, linkedin),
            (profile.github_url, github),
            (profile.portfolio_url, portfolio),
        )
        if url and not kept
    ]
    if dropped:
        logger.info("Discarded ungrounded LLM links for %s: %s", filename, dropped)

    profile = profile.model_copy(update={
        "linkedin_url": linkedin,
        "github_url": github,
        "portfolio_url": portfolio,
        "experience": [backfill_dates(exp) for exp in profile.experience],
        "original_data": OriginalData(filename=filename, raw_text=text[:settings.raw_text_prefix_chars]),
        "source": "resume",
    })
    return profile.model_copy(update={"confidence": llm_confidence(profile)})


class LLMExtractor(BaseExtractor):
    name = "llm"

    def __init__(
        self,
        client: ModelClient | None,
        debug_sink: DebugSink | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._debug_sink = debug_sink or NullDebugSink()
        self._max_tokens = max_tokens or settings.llm_max_output_tokens

    async def extract(
        self,
        text: str,
        hyperlinks: list[Hyperlink],
        filename: str = "",
    ) -> CandidateProfile:
        """Extract a profile with the model.

        Raises EmptyInput, ModelUnavailable or MalformedModelResponse; the
        orchestrator treats all three as a signal to fall back.
        """
        collapsed = " ".join(text.split())
        if len(collapsed) < MIN_TEXT_CHARS:
            raise EmptyInput("Text is too short or empty for meaningful extraction")
        if self._client is None:
            raise ModelUnavailable("No model client configured")

        prompt = build_extraction_prompt(collapsed, hyperlinks)
        try:
            raw = await self._client.complete(SYSTEM_PROMPT, prompt, self._max_tokens)
        except ResumeParsingError:
            raise
        except Exception as e:
            raise ModelUnavailable(f"Model call failed: {e}") from e
        if not raw or not raw.strip():
            raise ModelUnavailable("No response from model")

        try:
            data = parse_json_object(raw)
            profile = CandidateProfile.model_validate(clean_payload(data))
        except (json.JSONDecodeError, MalformedModelResponse, ValidationError) as e:
            logger.error("Failed to parse LLM response for %s: %s", filename, e)
            write_safely(self._debug_sink.write_failed_response, filename, raw, e)
            raise MalformedModelResponse(f"Failed to parse LLM extraction result: {e}") from e

        return finalize_profile(profile, text, hyperlinks, filename)
