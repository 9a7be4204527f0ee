from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_ALLOWED_ORIGINS = (
    "https://f16532ea-7934-49ea-98e0-8f3562d2b8ce.lovableproject.com",
    "https://preview--polisee-ai-multiple-prompts-test.lovable.app",
    "https://tarnglobal.com",
)


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None:
        return default
    parsed = int(value)
    return max(minimum, parsed)


def _to_float(value: str | None, *, default: float, minimum: float) -> float:
    if value is None:
        return default
    parsed = float(value)
    return max(minimum, parsed)


def _to_origins(value: str | None) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_ALLOWED_ORIGINS
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


@dataclass(frozen=True)
class Settings:
    project_id: str
    location: str
    model_name: str
    max_output_tokens: int
    llm_provider: str
    ollama_base_url: str
    ollama_model: str
    llm_timeout_seconds: float
    fetch_timeout_seconds: float
    allowed_origins: tuple[str, ...]
    port: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    return Settings(
        project_id=os.getenv("PROJECT_ID", "general-testing-450104"),
        location=os.getenv("LOCATION", "us-central1"),
        model_name=os.getenv("MODEL_NAME", "gemini-2.0-flash-001"),
        max_output_tokens=_to_int(os.getenv("MAX_OUTPUT_TOKENS"), default=2048, minimum=1),
        llm_provider=os.getenv("LLM_PROVIDER", "vertex").strip().lower(),
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
        ollama_model=os.getenv("OLLAMA_MODEL", "qwen2.5:7b-instruct-q4_K_M"),
        llm_timeout_seconds=_to_float(
            os.getenv("LLM_TIMEOUT_SECONDS"), default=120.0, minimum=1.0
        ),
        fetch_timeout_seconds=_to_float(
            os.getenv("DOCUMENT_FETCH_TIMEOUT_SECONDS"), default=30.0, minimum=1.0
        ),
        allowed_origins=_to_origins(os.getenv("ALLOWED_ORIGINS")),
        port=_to_int(os.getenv("PORT"), default=8080, minimum=1),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )
