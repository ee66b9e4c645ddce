from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from ats_checker.schemas.analysis import (
    SECTION_KEYS,
    AnalysisResult,
    KeywordAnalysis,
    SectionScore,
    SectionScores,
    status_for_score,
)
from ats_checker.services.errors import MalformedModelReply
from ats_checker.services.fallback import build_malformed_reply_result, zero_sections

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_STATUSES = {"poor", "fair", "good", "excellent"}


def extract_json_payload(reply: str) -> dict[str, Any]:
    match = JSON_OBJECT_RE.search(reply or "")
    if not match:
        raise MalformedModelReply("Invalid response format")
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise MalformedModelReply("Model reply JSON is not an object")
    return parsed


def _coerce_score(value: Any, field: str = "score") -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        logger.info("model_reply_field_defaulted field=%s reason=boolean", field)
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.info("model_reply_field_defaulted field=%s value=%r", field, value)
        return 0
    if math.isnan(number):
        return 0
    return int(round(max(0.0, min(100.0, number))))


def _coerce_section(value: Any, key: str) -> SectionScore:
    if not value:
        return SectionScore()
    if not isinstance(value, dict):
        logger.info("model_reply_field_defaulted field=sections.%s reason=not-an-object", key)
        return SectionScore()
    score = _coerce_score(value.get("score"), f"sections.{key}.score")
    status = str(value.get("status") or "").strip().lower()
    if status not in _STATUSES:
        status = status_for_score(score)
    return SectionScore(score=score, status=status)


def _coerce_sections(value: Any) -> SectionScores:
    if not value:
        return zero_sections()
    if not isinstance(value, dict):
        logger.info("model_reply_field_defaulted field=sections reason=not-an-object")
        return zero_sections()
    return SectionScores(**{key: _coerce_section(value.get(key), key) for key in SECTION_KEYS})


def _coerce_strings(value: Any, field: str) -> list[str]:
    if not value:
        return []
    if not isinstance(value, list):
        logger.info("model_reply_field_defaulted field=%s reason=not-a-list", field)
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _coerce_density(value: Any) -> float:
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    try:
        density = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.info("model_reply_field_defaulted field=keywordAnalysis.density value=%r", value)
        return 0.0
    if math.isnan(density) or math.isinf(density):
        return 0.0
    return max(0.0, density)


def _coerce_keywords(value: Any) -> KeywordAnalysis:
    if not value:
        return KeywordAnalysis()
    if not isinstance(value, dict):
        logger.info("model_reply_field_defaulted field=keywordAnalysis reason=not-an-object")
        return KeywordAnalysis()
    return KeywordAnalysis(
        matched=_coerce_strings(value.get("matched"), "keywordAnalysis.matched"),
        missing=_coerce_strings(value.get("missing"), "keywordAnalysis.missing"),
        density=_coerce_density(value.get("density")),
    )


def parse_model_reply(reply: str, file_name: str) -> AnalysisResult:
    """Recover an :class:`AnalysisResult` from free-form model output.

    Once the embedded JSON object decodes, the result counts as a model
    result: mistyped or missing fields fall back to zero/empty defaults one
    by one. Only a reply with no decodable object produces the zero-score
    result flagged as not coming from the model. This function never raises.
    """
    try:
        parsed = extract_json_payload(reply)
    except (MalformedModelReply, ValueError) as exc:
        logger.warning("model_reply_unparseable file=%s reply_len=%s: %s", file_name, len(reply or ""), exc)
        return build_malformed_reply_result(file_name)

    return AnalysisResult(
        overall_score=_coerce_score(parsed.get("overallScore"), "overallScore"),
        file_name=file_name,
        is_from_gemini=True,
        sections=_coerce_sections(parsed.get("sections")),
        keyword_analysis=_coerce_keywords(parsed.get("keywordAnalysis")),
        suggestions=_coerce_strings(parsed.get("suggestions"), "suggestions"),
    )
