"""Google Gemini API wrapper with error handling."""

import json
import logging
from typing import Protocol

from google import genai
from google.genai import types

from config import settings
from services.errors import MalformedModelResponse, ModelUnavailable

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that can complete a (system, prompt) pair into raw text."""

    async def complete(self, system: str, prompt: str, max_tokens: int) -> str: ...


class GeminiModelClient:
    def __init__(self, client: genai.Client, model: str | None = None) -> None:
        self._client = client
        self._model = model or settings.gemini_model

    async def complete(self, system: str, prompt: str, max_tokens: int) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system,
                    temperature=settings.llm_temperature,
                    max_output_tokens=max_tokens,
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise ModelUnavailable(f"Gemini API error: {e}") from e

        text = response.text
        if not text or not text.strip():
            raise ModelUnavailable("Empty response from Gemini")
        return text


_client: GeminiModelClient | None = None


def get_client() -> GeminiModelClient | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - LLM extraction disabled")
        return None
    if _client is None:
        _client = GeminiModelClient(genai.Client(api_key=settings.gemini_api_key))
    return _client


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json or ``` and a trailing ```, each independently."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_json_object(text: str) -> dict:
    """Parse a model response into a JSON object.

    Raises json.JSONDecodeError on invalid JSON and MalformedModelResponse
    when the JSON is valid but not an object.
    """
    data = json.loads(strip_code_fences(text))
    if not isinstance(data, dict):
        raise MalformedModelResponse(f"Expected a JSON object, got {type(data).__name__}")
    return data
