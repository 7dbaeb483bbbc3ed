"""Shared dependencies for API routes."""

from fastapi import Depends

from services.candidate_store import CandidateStore, InMemoryCandidateStore
from services.debug_sink import DebugSink
from services.debug_sink import get_debug_sink as _default_debug_sink
from services.gemini_client import ModelClient, get_client
from services.pipeline.orchestrator import ResumeParser

_store = InMemoryCandidateStore()


def get_model_client() -> ModelClient | None:
    return get_client()


def get_debug_sink() -> DebugSink:
    return _default_debug_sink()


def get_candidate_store() -> CandidateStore:
    return _store


def get_resume_parser(
    model_client: ModelClient | None = Depends(get_model_client),
    debug_sink: DebugSink = Depends(get_debug_sink),
    store: CandidateStore = Depends(get_candidate_store),
) -> ResumeParser:
    return ResumeParser(model_client=model_client, debug_sink=debug_sink, store=store)
