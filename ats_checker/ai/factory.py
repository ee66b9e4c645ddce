from ats_checker.ai.config import AIConfig, load_ai_config
from ats_checker.ai.types import GenerativeClient

from ats_checker.ai.providers.gemini_provider import GeminiProvider
from ats_checker.ai.providers.openai_provider import OpenAIProvider


def get_ai_client(cfg: AIConfig | None = None) -> GenerativeClient:
    cfg = cfg or load_ai_config()

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, api_key=cfg.api_key)

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, api_key=cfg.api_key)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
