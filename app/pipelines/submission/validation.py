"""Submission intake validation (Stage 01 of the submission flow)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Final

from app.domain.models import AudioFormat
from app.errors import SubmissionValidationError

MIN_NAME_LENGTH: Final[int] = 1
MAX_NAME_LENGTH: Final[int] = 50
MAX_AUDIO_SIZE: Final[int] = 5 * 1024 * 1024
ALLOWED_AUDIO_FORMATS: Final[tuple[str, ...]] = tuple(fmt.value for fmt in AudioFormat)


@dataclass(frozen=True)
class ValidatedSubmission:
    """Normalized intake tuple ready for record creation."""

    name: str
    audio_format: AudioFormat
    audio_size: int


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def collect_violations(name: Any, audio_format: Any, audio_size: Any) -> list[str]:
    """Return one message per violated rule; every field is checked."""

    errors: list[str] = []

    if not name or not isinstance(name, str):
        errors.append("Name is required and must be a string")
    elif len(name.strip()) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} character")
    elif len(name.strip()) > MAX_NAME_LENGTH:
        errors.append(f"Name must not exceed {MAX_NAME_LENGTH} characters")

    if not audio_format or not isinstance(audio_format, str):
        errors.append("Audio format is required")
    elif audio_format.strip().lower() not in ALLOWED_AUDIO_FORMATS:
        errors.append(f"Audio format must be one of: {', '.join(ALLOWED_AUDIO_FORMATS)}")

    if audio_size is None or not _is_number(audio_size):
        errors.append("Audio size is required and must be a number")
    elif audio_size <= 0:
        errors.append("Audio size must be greater than 0")
    elif audio_size != int(audio_size):
        errors.append("Audio size must be a whole number of bytes")
    elif audio_size > MAX_AUDIO_SIZE:
        errors.append(f"Audio size must not exceed {MAX_AUDIO_SIZE // 1024 // 1024}MB")

    return errors


def validate_submission(name: Any, audio_format: Any, audio_size: Any) -> ValidatedSubmission:
    """Accept and normalize the intake tuple or raise with every violation."""

    errors = collect_violations(name, audio_format, audio_size)
    if errors:
        raise SubmissionValidationError(errors)

    return ValidatedSubmission(
        name=name.strip(),
        audio_format=AudioFormat(audio_format.strip().lower()),
        audio_size=int(audio_size),
    )


__all__ = [
    "ALLOWED_AUDIO_FORMATS",
    "MAX_AUDIO_SIZE",
    "MAX_NAME_LENGTH",
    "MIN_NAME_LENGTH",
    "ValidatedSubmission",
    "collect_violations",
    "validate_submission",
]
