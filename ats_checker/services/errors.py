from __future__ import annotations


class ResumeAnalysisError(RuntimeError):
    code = "analysis_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class UnsupportedFormat(ResumeAnalysisError):
    code = "unsupported_format"


class TooShort(ResumeAnalysisError):
    code = "too_short"


class ExtractionFailed(ResumeAnalysisError):
    code = "extraction_failed"


class InsufficientText(ResumeAnalysisError):
    code = "insufficient_text"


class ArtifactContaminated(ResumeAnalysisError):
    code = "artifact_contaminated"


class PlaceholderText(ResumeAnalysisError):
    code = "placeholder_text"


class ConfigurationError(ResumeAnalysisError):
    code = "configuration_error"


class AnalysisTimeout(ResumeAnalysisError):
    code = "timeout"


class ModelCallFailed(ResumeAnalysisError):
    code = "model_call_failed"


class MalformedModelReply(ResumeAnalysisError):
    code = "malformed_model_reply"
