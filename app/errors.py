"""Service-level error taxonomy mapped to HTTP responses in ``app.main``."""

from __future__ import annotations

from typing import Sequence


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class SubmissionValidationError(ServiceError):
    """Client input violated one or more submission rules."""

    status_code = 400
    error = "Invalid input"

    def __init__(self, details: Sequence[str]) -> None:
        super().__init__("; ".join(details))
        self.details = list(details)


class SubmissionNotFoundError(ServiceError):
    """No submission exists for the requested identifier."""

    status_code = 404
    error = "Response not found"

    def __init__(self, response_id: str) -> None:
        super().__init__(f"No record found with the provided responseId: {response_id}")
        self.response_id = response_id


class SubmissionConflictError(ServiceError):
    """The submission already reached a terminal state."""

    status_code = 409
    error = "Response already processed"

    def __init__(self, response_id: str, status: str) -> None:
        super().__init__(
            f"Submission {response_id} is already {status}; create a new submission to retry."
        )
        self.response_id = response_id
        self.status = status


class UpstreamFailure(ServiceError):
    """Audio storage or an external model failed after exhausting retries."""

    error = "Processing failed"

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage


class InternalError(ServiceError):
    """Unexpected store or logic fault."""

    error = "Processing failed"


__all__ = [
    "ServiceError",
    "SubmissionValidationError",
    "SubmissionNotFoundError",
    "SubmissionConflictError",
    "UpstreamFailure",
    "InternalError",
]
