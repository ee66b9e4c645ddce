from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from ats_checker.ai.config import AIConfig, load_ai_config
from ats_checker.ai.factory import get_ai_client
from ats_checker.ai.types import GenerativeClient
from ats_checker.core.config import settings
from ats_checker.core.config.analysis import get_analysis_value
from ats_checker.parsing.artifacts import looks_like_binary_artifact
from ats_checker.parsing.extract import TextExtractor, is_placeholder_text
from ats_checker.parsing.models import UploadedDocument
from ats_checker.schemas.analysis import AnalysisResult
from ats_checker.services.errors import (
    AnalysisTimeout,
    ArtifactContaminated,
    ConfigurationError,
    InsufficientText,
    ModelCallFailed,
    PlaceholderText,
    ResumeAnalysisError,
)
from ats_checker.services.fallback import build_fallback
from ats_checker.services.prompt import build_analysis_prompt
from ats_checker.services.response_parser import parse_model_reply

logger = logging.getLogger(__name__)

ClientFactory = Callable[[AIConfig], GenerativeClient]


def resume_preview(text: str, limit: int | None = None) -> str:
    size = limit or int(get_analysis_value("analysis.preview_chars", 500))
    if len(text) > size:
        return text[: max(0, size - 3)] + "..."
    return text


class ResumeAnalyzer:
    """Runs extraction, validation, the model call and reply parsing for one resume."""

    def __init__(
        self,
        *,
        extractor: TextExtractor | None = None,
        ai_config: AIConfig | None = None,
        client_factory: ClientFactory = get_ai_client,
        timeout_s: float | None = None,
    ):
        self._extractor = extractor or TextExtractor()
        self._ai_config = ai_config
        self._client_factory = client_factory
        self._timeout_s = settings.analysis_timeout_s if timeout_s is None else timeout_s

    def _config(self) -> AIConfig:
        return self._ai_config or load_ai_config()

    def _validate_text(self, text: str, *, placeholder: bool) -> None:
        min_chars = int(get_analysis_value("analysis.min_chars", 100))
        if len(text) < min_chars:
            raise InsufficientText("Insufficient text extracted for analysis")
        if looks_like_binary_artifact(text):
            raise ArtifactContaminated(
                "PDF contains encoded content that cannot be properly extracted. "
                "Please ensure the PDF contains selectable text."
            )
        if placeholder or is_placeholder_text(text):
            raise PlaceholderText("Unable to extract readable text from the uploaded file")

    async def _request(self, prompt: str) -> str:
        cfg = self._config()
        if not cfg.api_key:
            raise ConfigurationError("API configuration error. Please check your environment variables.")
        started = time.perf_counter()
        try:
            client = self._client_factory(cfg)
            reply = await asyncio.wait_for(client.generate(prompt), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise AnalysisTimeout(f"Request timeout after {self._timeout_s:g}s") from exc
        except ResumeAnalysisError:
            raise
        except Exception as exc:  # noqa: BLE001 - provider errors become a fallback result
            raise ModelCallFailed(f"Model request failed: {exc}") from exc
        logger.info(
            "analysis_model_reply provider=%s model=%s latency_ms=%s reply_len=%s",
            cfg.provider,
            cfg.model,
            int((time.perf_counter() - started) * 1000),
            len(reply or ""),
        )
        return reply or ""

    async def _analyze(
        self,
        text: str,
        file_name: str,
        job_description: str | None,
        *,
        placeholder: bool = False,
    ) -> AnalysisResult:
        self._validate_text(text, placeholder=placeholder)
        reply = await self._request(build_analysis_prompt(text, job_description))
        parsed = parse_model_reply(reply, file_name)
        return parsed.model_copy(update={"resume_text": resume_preview(text)})

    async def analyze_text(
        self,
        text: str,
        file_name: str,
        job_description: str | None = None,
    ) -> AnalysisResult:
        try:
            return await self._analyze(text, file_name, job_description)
        except ResumeAnalysisError as exc:
            logger.warning("analysis_fallback file=%s code=%s: %s", file_name, exc.code, exc)
            return build_fallback(file_name, str(exc))
        except Exception as exc:  # noqa: BLE001 - callers always receive a result
            logger.exception("analysis_unexpected_failure file=%s", file_name)
            return build_fallback(file_name, str(exc) or type(exc).__name__)

    async def analyze_document(
        self,
        document: UploadedDocument,
        job_description: str | None = None,
    ) -> AnalysisResult:
        try:
            extracted = await self._extractor.extract(document)
            return await self._analyze(
                extracted.text,
                document.filename,
                job_description,
                placeholder=extracted.is_placeholder,
            )
        except ResumeAnalysisError as exc:
            logger.warning("analysis_fallback file=%s code=%s: %s", document.filename, exc.code, exc)
            return build_fallback(document.filename, str(exc))
        except Exception as exc:  # noqa: BLE001 - callers always receive a result
            logger.exception("analysis_unexpected_failure file=%s", document.filename)
            return build_fallback(document.filename, str(exc) or type(exc).__name__)


def get_resume_analyzer() -> ResumeAnalyzer:
    return ResumeAnalyzer()
