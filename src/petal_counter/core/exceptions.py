"""Custom exceptions for petal analysis."""

from petal_counter.core.config import (
    ANALYSIS_FAILED_MESSAGE,
    ANALYSIS_IN_PROGRESS_MESSAGE,
    FILE_TOO_LARGE_MESSAGE,
    INVALID_FILE_TYPE_MESSAGE,
)


class PetalAnalysisError(Exception):
    """Base exception for petal analysis errors."""

    code: str = "ANALYSIS_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        self.suggestions: list[str] = []
        super().__init__(message)


class InvalidFileTypeError(PetalAnalysisError):
    """Uploaded file is not an accepted image type."""

    code = "INVALID_FILE_TYPE"
    status_code = 415

    def __init__(self, message: str = INVALID_FILE_TYPE_MESSAGE, details: dict | None = None):
        super().__init__(message, details)


class FileTooLargeError(PetalAnalysisError):
    """Uploaded file exceeds the size limit."""

    code = "FILE_TOO_LARGE"
    status_code = 413

    def __init__(self, message: str = FILE_TOO_LARGE_MESSAGE, details: dict | None = None):
        super().__init__(message, details)


class AnalysisFailureError(PetalAnalysisError):
    """Image could not be decoded or analyzed."""

    code = "ANALYSIS_FAILED"
    status_code = 422

    def __init__(self, message: str = ANALYSIS_FAILED_MESSAGE, details: dict | None = None):
        super().__init__(message, details)
        self.suggestions = [
            "Check that the file is a valid, uncorrupted image",
            "Try exporting the image again as JPG or PNG",
        ]


class AnalysisInProgressError(PetalAnalysisError):
    """A new upload arrived while an analysis was still running."""

    code = "ANALYSIS_IN_PROGRESS"
    status_code = 409

    def __init__(self, message: str = ANALYSIS_IN_PROGRESS_MESSAGE):
        super().__init__(message)
        self.suggestions = ["Wait for the current analysis to finish, or reset the session"]
