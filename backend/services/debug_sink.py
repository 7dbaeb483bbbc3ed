"""Diagnostic side outputs: extraction log, result dumps, failed model responses.

Sinks are best-effort. Every write is open-append/write-close and any failure
is logged and swallowed, so a sink can never change a parsing outcome.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from config import settings
from models.schemas.extraction_result import ExtractionResult
from models.schemas.raw_extraction import Hyperlink

logger = logging.getLogger(__name__)

EXTRACTION_LOG_NAME = "resume-text-extraction.log"
LOG_PREVIEW_CHARS = 500
FAILED_RESPONSE_NOTE = (
    "This LLM response failed to parse as JSON. "
    "Check for markdown formatting or invalid JSON structure."
)
# Profile fields copied into the short summary dump
SUMMARY_FIELDS = (
    "name", "email", "phone", "title", "location", "summary",
    "experience", "education", "skills", "projects", "certifications",
)


class DebugSink(Protocol):
    def append_extraction_log(self, filename: str, text: str, hyperlinks: list[Hyperlink]) -> None: ...

    def write_result(self, result: ExtractionResult) -> None: ...

    def write_failed_response(self, filename: str, raw_response: str, error: Exception) -> None: ...


class NullDebugSink:
    """Discards everything."""

    def append_extraction_log(self, filename: str, text: str, hyperlinks: list[Hyperlink]) -> None:
        pass

    def write_result(self, result: ExtractionResult) -> None:
        pass

    def write_failed_response(self, filename: str, raw_response: str, error: Exception) -> None:
        pass


def write_safely(write, *args) -> None:
    """Call a sink method, logging instead of raising if it fails."""
    try:
        write(*args)
    except Exception as e:
        logger.warning("Debug sink %s failed: %s", getattr(write, "__name__", "write"), e)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _file_stamp(now: str) -> str:
    return now.replace(":", "-").replace(".", "-")


class FileDebugSink:
    """Writes the extraction log under ``log_dir`` and JSON dumps under ``output_dir``."""

    def __init__(self, output_dir: str | Path | None = None, log_dir: str | Path | None = None) -> None:
        self.output_dir = Path(output_dir or settings.output_dir)
        self.log_dir = Path(log_dir or settings.log_dir)

    def _write_json(self, name: str, data: dict) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / name
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return path

    def append_extraction_log(self, filename: str, text: str, hyperlinks: list[Hyperlink]) -> None:
        preview = text if len(text) <= LOG_PREVIEW_CHARS else text[:LOG_PREVIEW_CHARS] + "…"
        entry = "\n".join([
            f"\n[{_timestamp()}] {filename}",
            f"Characters Extracted: {len(text)}",
            f"Hyperlinks Found: {len(hyperlinks)}",
            f"Preview:\n{preview}",
        ])
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.log_dir / EXTRACTION_LOG_NAME, "a", encoding="utf-8") as f:
                f.write(entry + "\n")
        except Exception as e:
            logger.warning("Failed to append resume extraction log: %s", e)

    def write_result(self, result: ExtractionResult) -> None:
        now = _timestamp()
        base = f"{Path(result.filename).stem or 'resume'}_{_file_stamp(now)}"
        profile = result.profile.model_dump(by_alias=True)
        header = {
            "filename": result.filename,
            "timestamp": now,
            "processingTime": result.processing_time_ms,
            "confidence": result.confidence,
        }
        try:
            path = self._write_json(f"{base}.json", {
                **header,
                "extractionMethod": result.extraction_method,
                "rawText": result.raw_text,
                "extractedData": profile,
            })
            logger.debug("Extracted resume data saved to %s", path)
            path = self._write_json(f"{base}_summary.json", {
                **header,
                "extractedData": {field: profile.get(field) for field in SUMMARY_FIELDS},
            })
            logger.debug("Resume summary saved to %s", path)
        except Exception as e:
            logger.warning("Failed to save extracted data for %s: %s", result.filename, e)

    def write_failed_response(self, filename: str, raw_response: str, error: Exception) -> None:
        now = _timestamp()
        base = f"{Path(filename).stem or 'resume'}_{_file_stamp(now)}"
        try:
            path = self._write_json(f"{base}_failed_llm.json", {
                "filename": filename,
                "timestamp": now,
                "error": str(error),
                "rawLLMResponse": raw_response,
                "note": FAILED_RESPONSE_NOTE,
            })
            logger.info("Failed LLM response saved to %s", path)
        except Exception as e:
            logger.warning("Failed to save failed LLM response for %s: %s", filename, e)


def get_debug_sink() -> DebugSink:
    if settings.debug_sinks_enabled:
        return FileDebugSink()
    return NullDebugSink()
