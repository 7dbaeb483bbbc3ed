import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.1  # bias toward literal extraction
    llm_max_output_tokens: int = 4000

    max_upload_size_mb: int = 5
    max_batch_files: int = 20
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Debug/diagnostic sinks (extraction log, result dumps, failed LLM responses)
    debug_sinks_enabled: bool = True
    output_dir: str = "output_resume_extract"
    log_dir: str = "logs"

    raw_text_prefix_chars: int = 2000
    vocabulary_path: str | None = None  # JSON file overriding the keyword tables

    # Batch processing
    batch_concurrency: int = 1  # 1 = strictly sequential
    parse_timeout_seconds: float | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
