from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    ai_model: str | None
    gemini_api_key: str | None
    openai_api_key: str | None
    analysis_timeout_s: float
    max_upload_bytes: int
    ocr_enabled: bool
    ocr_language: str
    ocr_scale: float
    tesseract_cmd: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    view_session_limit: int


settings = Settings(
    ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
    ai_model=_get_env("AI_MODEL"),
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    analysis_timeout_s=_get_env_float("ANALYSIS_TIMEOUT_S", 25.0),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    ocr_enabled=_get_env_bool("OCR_ENABLED", True),
    ocr_language=_get_env("OCR_LANGUAGE", "eng") or "eng",
    ocr_scale=_get_env_float("OCR_SCALE", 2.0),
    tesseract_cmd=_get_env("TESSERACT_CMD"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    view_session_limit=_get_env_int("VIEW_SESSION_LIMIT", 1000),
)

if settings.ai_provider not in {"gemini", "openai"}:
    raise RuntimeError("AI_PROVIDER must be either 'gemini' or 'openai'.")

__all__ = ["Settings", "settings"]
