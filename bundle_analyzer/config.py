import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# --- Model ---
MODEL_NAME: str = "gemini-2.5-flash"
GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

# --- Defaults ---
DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3000
DEFAULT_REPORT_LANGUAGE: str = "Korean"


class ConfigurationError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = MODEL_NAME
    base_url: str = GEMINI_BASE_URL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    report_language: str = DEFAULT_REPORT_LANGUAGE
    max_retries: int = 0
    retry_backoff: float = 1.0
    strict_report_schema: bool = False
    cors_allow_origins: tuple[str, ...] = ("*",)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """Build Settings from the environment. Raises ConfigurationError if AI_API_KEY is unset."""
    api_key = os.getenv("AI_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("AI_API_KEY environment variable is not set")

    max_retries = _env_int("LLM_MAX_RETRIES", 0)
    if max_retries < 0:
        raise ConfigurationError("LLM_MAX_RETRIES must not be negative")

    origins = tuple(
        o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
    )

    return Settings(
        api_key=api_key,
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_env_int("PORT", DEFAULT_PORT),
        log_level=os.getenv("LOG_LEVEL", "info").upper(),
        report_language=os.getenv("REPORT_LANGUAGE", DEFAULT_REPORT_LANGUAGE),
        max_retries=max_retries,
        retry_backoff=_env_float("LLM_RETRY_BACKOFF", 1.0),
        strict_report_schema=_env_bool("STRICT_REPORT_SCHEMA", False),
        cors_allow_origins=origins or ("*",),
    )


def configure_logging(log_level: str | None = None) -> None:
    level_name = (log_level or os.getenv("LOG_LEVEL", "info")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
