from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

from ats_checker.core.config.analysis import get_analysis_value

SectionStatus = Literal["poor", "fair", "good", "excellent"]
SectionKey = Literal["keywords", "formatting", "structure", "length"]
ViewName = Literal["landing", "upload", "results"]

SECTION_KEYS: tuple[SectionKey, ...] = get_args(SectionKey)

_DEFAULT_BANDS = {"excellent": 86, "good": 76, "fair": 61, "poor": 0}


def status_for_score(score: int) -> SectionStatus:
    bands = get_analysis_value("status_bands", _DEFAULT_BANDS) or _DEFAULT_BANDS
    for status in ("excellent", "good", "fair"):
        if score >= int(bands.get(status, _DEFAULT_BANDS[status])):
            return status  # type: ignore[return-value]
    return "poor"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SectionScore(_FrozenModel):
    score: int = Field(default=0, ge=0, le=100)
    status: SectionStatus = "poor"


class SectionScores(_FrozenModel):
    keywords: SectionScore = Field(default_factory=SectionScore)
    formatting: SectionScore = Field(default_factory=SectionScore)
    structure: SectionScore = Field(default_factory=SectionScore)
    length: SectionScore = Field(default_factory=SectionScore)


class KeywordAnalysis(_FrozenModel):
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    density: float = Field(default=0.0, ge=0.0)


class AnalysisResult(_FrozenModel):
    overall_score: int = Field(default=0, ge=0, le=100, alias="overallScore")
    file_name: str = Field(alias="fileName")
    analysis_date: datetime = Field(default_factory=_utcnow, alias="analysisDate")
    is_from_gemini: bool = Field(default=False, alias="isFromGemini")
    sections: SectionScores = Field(default_factory=SectionScores)
    keyword_analysis: KeywordAnalysis = Field(default_factory=KeywordAnalysis, alias="keywordAnalysis")
    suggestions: list[str] = Field(default_factory=list)
    resume_text: str | None = Field(default=None, alias="resumeText")


class ExtractTextResponse(BaseModel):
    filename: str
    source_type: str
    strategy: str
    is_placeholder: bool
    characters: int
    looks_like_artifact: bool
    preview: str


class ViewStateResponse(BaseModel):
    session_id: str
    view: ViewName
    result: AnalysisResult | None = None


class NavigateRequest(BaseModel):
    view: ViewName
