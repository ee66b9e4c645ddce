from __future__ import annotations

from ats_checker.schemas.analysis import AnalysisResult, KeywordAnalysis, SectionScore, SectionScores, status_for_score

FALLBACK_SUGGESTIONS: tuple[str, ...] = (
    "Text extraction failed: the file appears to contain scanned images or encoded text",
    "Try converting to DOCX format (Word document)",
    "Copy your resume content to a plain text (.txt) file",
    "Ensure the PDF contains selectable text, not just images",
    "If scanned, use OCR software to convert to text first",
    "Recreate the resume in a text-based format",
)

MALFORMED_REPLY_SUGGESTION = "Unable to analyze resume. Please try again."

DEFAULT_FAILURE_REASON = "Unable to extract readable text from file"


def zero_sections() -> SectionScores:
    section = SectionScore(score=0, status=status_for_score(0))
    return SectionScores(keywords=section, formatting=section, structure=section, length=section)


def build_fallback(file_name: str, reason: str | None = None) -> AnalysisResult:
    return AnalysisResult(
        overall_score=0,
        file_name=file_name,
        is_from_gemini=False,
        sections=zero_sections(),
        keyword_analysis=KeywordAnalysis(matched=[], missing=[], density=0.0),
        suggestions=list(FALLBACK_SUGGESTIONS),
        resume_text=f"Analysis failed: {reason or DEFAULT_FAILURE_REASON}",
    )


def build_malformed_reply_result(file_name: str) -> AnalysisResult:
    return AnalysisResult(
        overall_score=0,
        file_name=file_name,
        is_from_gemini=False,
        sections=zero_sections(),
        keyword_analysis=KeywordAnalysis(),
        suggestions=[MALFORMED_REPLY_SUGGESTION],
    )
