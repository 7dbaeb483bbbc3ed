"""Pipeline orchestrator: document stage, extraction strategy, scoring.

Flow per document:
    bytes + filename
      ├─ extract_document()          → RawExtraction (text + native hyperlinks)
      ├─ < 10 meaningful chars?      → empty profile, confidence 0 (no model call)
      ├─ LLMExtractor.extract()      → CandidateProfile          (extraction_method="llm")
      │     └─ EmptyInput / ModelUnavailable / MalformedModelResponse
      │           ↓
      └─ RegexExtractor.extract()    → CandidateProfile          (extraction_method="regex")
                       ↓
               ExtractionResult (confidence, processing time)
"""

import asyncio
import logging
import time

from config import settings
from models.schemas.candidate_profile import CandidateProfile, OriginalData
from models.schemas.extraction_result import BatchResult, ExtractionMethod, ExtractionResult
from models.schemas.raw_extraction import Hyperlink
from services.candidate_store import CandidateStore
from services.debug_sink import DebugSink, NullDebugSink, write_safely
from services.document_parser import MIN_MEANINGFUL_CHARS, extract_document
from services.errors import (
    DocumentParseError,
    EmptyInput,
    MalformedModelResponse,
    ModelUnavailable,
    PersistenceFailure,
    ResumeParsingError,
)
from services.gemini_client import ModelClient
from services.pipeline.base import BaseExtractor
from services.pipeline.llm_extractor import LLMExtractor
from services.pipeline.regex_extractor import RegexExtractor
from services.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

# Errors that move a document from the LLM path to the regex path
FALLBACK_ERRORS = (EmptyInput, ModelUnavailable, MalformedModelResponse)


def _meaningful_chars(text: str) -> int:
    return sum(1 for ch in text if not ch.isspace())


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class ResumeParser:
    """Parses resumes into candidate profiles.

    All collaborators are injected; the defaults give a parser with no model
    (regex only), no debug output and no persistence.
    """

    def __init__(
        self,
        model_client: ModelClient | None = None,
        debug_sink: DebugSink | None = None,
        store: CandidateStore | None = None,
        vocabulary: Vocabulary | None = None,
        llm_extractor: BaseExtractor | None = None,
        fallback_extractor: BaseExtractor | None = None,
    ) -> None:
        self.debug_sink = debug_sink or NullDebugSink()
        self.store = store
        self.llm_extractor = llm_extractor or LLMExtractor(model_client, self.debug_sink)
        self.fallback_extractor = fallback_extractor or RegexExtractor(vocabulary)

    async def _run_strategies(
        self,
        text: str,
        hyperlinks: list[Hyperlink],
        filename: str,
    ) -> tuple[CandidateProfile, ExtractionMethod]:
        if _meaningful_chars(text) < MIN_MEANINGFUL_CHARS:
            logger.warning("No meaningful text in %s, returning empty profile", filename)
            profile = CandidateProfile(
                original_data=OriginalData(filename=filename, raw_text=text[:settings.raw_text_prefix_chars]),
            )
            return profile, "empty"

        try:
            profile = await self.llm_extractor.extract(text, hyperlinks, filename)
            return profile, self.llm_extractor.name
        except FALLBACK_ERRORS as e:
            logger.warning("LLM extraction failed for %s, falling back to regex: %s", filename, e)

        profile = await self.fallback_extractor.extract(text, hyperlinks, filename)
        return profile, self.fallback_extractor.name

    async def extract_profile(
        self,
        text: str,
        hyperlinks: list[Hyperlink] | None = None,
        filename: str = "",
    ) -> ExtractionResult:
        """Run the strategy step on already extracted text."""
        start = time.perf_counter()
        profile, method = await self._run_strategies(text, hyperlinks or [], filename)
        result = ExtractionResult(
            filename=filename,
            raw_text=text,
            profile=profile,
            confidence=profile.confidence,
            processing_time_ms=_elapsed_ms(start),
            extraction_method=method,
        )
        logger.info(
            "Parsed %s via %s: confidence=%d%% in %dms",
            filename or "<text>", method, result.confidence, result.processing_time_ms,
        )
        return result

    async def parse_resume(self, content: bytes, filename: str) -> ExtractionResult:
        """Parse one PDF/DOCX resume.

        Raises DocumentParseError (with the original error as ``cause``) when
        the document cannot be read. Model failures never escape.
        """
        start = time.perf_counter()
        logger.info("Parsing resume %s (%d bytes)", filename, len(content))
        try:
            raw = await extract_document(content, filename)
        except Exception as e:
            logger.error("Document extraction failed for %s: %s", filename, e)
            raise DocumentParseError(filename, e) from e

        write_safely(self.debug_sink.append_extraction_log, filename, raw.text, raw.hyperlinks)
        logger.debug("Extracted %d chars and %d hyperlinks from %s", len(raw.text), len(raw.hyperlinks), filename)

        try:
            profile, method = await self._run_strategies(raw.text, raw.hyperlinks, filename)
        except Exception as e:
            logger.exception("Profile extraction failed for %s", filename)
            raise DocumentParseError(filename, e) from e

        result = ExtractionResult(
            filename=filename,
            raw_text=raw.text,
            profile=profile,
            confidence=profile.confidence,
            processing_time_ms=_elapsed_ms(start),
            extraction_method=method,
        )
        logger.info(
            "Parsed %s via %s: confidence=%d%% in %dms",
            filename, method, result.confidence, result.processing_time_ms,
        )
        write_safely(self.debug_sink.write_result, result)
        return result

    async def _parse_with_timeout(self, content: bytes, filename: str, timeout: float | None) -> ExtractionResult:
        if timeout is None:
            return await self.parse_resume(content, filename)
        return await asyncio.wait_for(self.parse_resume(content, filename), timeout)

    async def parse_resumes(
        self,
        files: list[tuple[str, bytes]],
        concurrency: int | None = None,
        timeout: float | None = None,
    ) -> BatchResult:
        """Parse (filename, content) pairs. One file's failure never aborts the rest.

        Results and errors keep input order. With ``concurrency`` > 1 at most that
        many documents are in flight at once.
        """
        concurrency = max(1, concurrency or settings.batch_concurrency)
        timeout = timeout if timeout is not None else settings.parse_timeout_seconds
        slots: list[ExtractionResult | str | None] = [None] * len(files)

        async def run(index: int, filename: str, content: bytes) -> None:
            try:
                slots[index] = await self._parse_with_timeout(content, filename, timeout)
            except asyncio.TimeoutError:
                logger.error("Timed out parsing %s after %ss", filename, timeout)
                slots[index] = f"{filename}: Timed out after {timeout}s"
            except ResumeParsingError as e:
                logger.error("Error processing %s: %s", filename, e)
                slots[index] = f"{filename}: {e}"

        if concurrency == 1:
            for i, (filename, content) in enumerate(files):
                await run(i, filename, content)
        else:
            semaphore = asyncio.Semaphore(concurrency)

            async def bounded(i: int, filename: str, content: bytes) -> None:
                async with semaphore:
                    await run(i, filename, content)

            await asyncio.gather(*(bounded(i, name, data) for i, (name, data) in enumerate(files)))

        results = [s for s in slots if isinstance(s, ExtractionResult)]
        errors = [s for s in slots if isinstance(s, str)]
        logger.info("Batch complete: %d parsed, %d failed", len(results), len(errors))
        return BatchResult(results=results, errors=errors)

    async def save_result(self, result: ExtractionResult) -> str:
        """Persist a result; failures raise PersistenceFailure carrying the result."""
        if self.store is None:
            raise PersistenceFailure("no candidate store configured", result)
        try:
            return await self.store.save_profile(
                result.profile, result.filename, result.processing_time_ms, result.confidence,
            )
        except Exception as e:
            logger.error("Error saving resume data for %s: %s", result.filename, e)
            raise PersistenceFailure(str(e), result) from e

    async def parse_and_save(self, content: bytes, filename: str) -> tuple[ExtractionResult, str]:
        result = await self.parse_resume(content, filename)
        candidate_id = await self.save_result(result)
        logger.info("Saved %s as candidate %s", filename, candidate_id)
        return result, candidate_id
