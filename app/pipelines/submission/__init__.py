"""Submission intake package: validate, then authorize the audio upload."""

from .authorization import UploadAuthorization, UploadAuthorizationIssuer
from .validation import (
    ALLOWED_AUDIO_FORMATS,
    MAX_AUDIO_SIZE,
    MAX_NAME_LENGTH,
    MIN_NAME_LENGTH,
    ValidatedSubmission,
    collect_violations,
    validate_submission,
)

__all__ = [
    "ALLOWED_AUDIO_FORMATS",
    "MAX_AUDIO_SIZE",
    "MAX_NAME_LENGTH",
    "MIN_NAME_LENGTH",
    "UploadAuthorization",
    "UploadAuthorizationIssuer",
    "ValidatedSubmission",
    "collect_violations",
    "validate_submission",
]
