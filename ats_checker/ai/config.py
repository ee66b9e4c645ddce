from dataclasses import dataclass

from ats_checker.core.config import settings

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None


def load_ai_config() -> AIConfig:
    provider = settings.ai_provider
    model = (settings.ai_model or DEFAULT_MODELS.get(provider, "")).strip()
    api_key = settings.openai_api_key if provider == "openai" else settings.gemini_api_key
    return AIConfig(provider=provider, model=model, api_key=(api_key or "").strip() or None)
