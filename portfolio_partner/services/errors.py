"""Error taxonomy surfaced by the analysis workflow."""

from __future__ import annotations


class AnalysisError(Exception):
    status_code = 500
    code = "INTERNAL"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(AnalysisError):
    status_code = 400
    code = "INVALID_REQUEST"


class PayloadTooLargeError(AnalysisError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"


class AdmissionDenied(AnalysisError):
    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, message: str, retry_after_seconds: int) -> None:
        super().__init__(message)
        self.retry_after_seconds = max(1, retry_after_seconds)


class ConfigurationMissing(AnalysisError):
    code = "NOT_CONFIGURED"


class AnalysisFailed(AnalysisError):
    code = "UPSTREAM_FAILED"
