from __future__ import annotations

import os
from typing import Optional

from google import genai
from google.genai import types

from ats_checker.services.errors import ConfigurationError


class GeminiProvider:
    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv("GEMINI_API_KEY") or "").strip()
        if not key:
            raise ConfigurationError("GEMINI_API_KEY is missing")

        self._client = genai.Client(api_key=key)

    async def generate(self, prompt: str) -> str:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=self._temperature),
        )
        return response.text or ""
