from __future__ import annotations

import pytest

from app.domain.models import AudioFormat
from app.errors import SubmissionValidationError
from app.pipelines.submission import MAX_AUDIO_SIZE, collect_violations, validate_submission


def test_valid_submission_is_normalized():
    validated = validate_submission("  Grace Hopper  ", "WAV", 2048)

    assert validated.name == "Grace Hopper"
    assert validated.audio_format is AudioFormat.WAV
    assert validated.audio_size == 2048


@pytest.mark.parametrize("fmt", ["mp4", "webm", "wav", "m4a", "aac", "M4A", "Aac"])
def test_every_allowed_format_is_accepted(fmt):
    assert validate_submission("Ada", fmt, 1).audio_format.value == fmt.lower()


def test_name_and_size_boundaries_are_inclusive():
    assert validate_submission("x" * 50, "mp4", MAX_AUDIO_SIZE).audio_size == MAX_AUDIO_SIZE
    assert validate_submission("x", "mp4", 1).name == "x"


@pytest.mark.parametrize(
    ("name", "fmt", "size", "expected"),
    [
        (None, "wav", 10, "Name is required and must be a string"),
        (42, "wav", 10, "Name is required and must be a string"),
        ("   ", "wav", 10, "Name must be at least 1 character"),
        ("x" * 51, "wav", 10, "Name must not exceed 50 characters"),
        ("Ada", None, 10, "Audio format is required"),
        ("Ada", "flac", 10, "Audio format must be one of: mp4, webm, wav, m4a, aac"),
        ("Ada", "wav", None, "Audio size is required and must be a number"),
        ("Ada", "wav", "10", "Audio size is required and must be a number"),
        ("Ada", "wav", True, "Audio size is required and must be a number"),
        ("Ada", "wav", 0, "Audio size must be greater than 0"),
        ("Ada", "wav", -3, "Audio size must be greater than 0"),
        ("Ada", "wav", float("nan"), "Audio size is required and must be a number"),
        ("Ada", "wav", float("inf"), "Audio size is required and must be a number"),
        ("Ada", "wav", 0.5, "Audio size must be a whole number of bytes"),
        ("Ada", "wav", 1024.5, "Audio size must be a whole number of bytes"),
        ("Ada", "wav", MAX_AUDIO_SIZE + 1, "Audio size must not exceed 5MB"),
    ],
)
def test_each_rule_reports_its_own_violation(name, fmt, size, expected):
    with pytest.raises(SubmissionValidationError) as exc_info:
        validate_submission(name, fmt, size)

    assert exc_info.value.details == [expected]
    assert exc_info.value.status_code == 400


def test_all_violations_are_reported_together():
    violations = collect_violations("", "ogg", 10 * MAX_AUDIO_SIZE)

    assert violations == [
        "Name is required and must be a string",
        "Audio format must be one of: mp4, webm, wav, m4a, aac",
        "Audio size must not exceed 5MB",
    ]


def test_collect_violations_is_empty_for_valid_input():
    assert collect_violations("Ada", "webm", 512) == []


def test_whole_float_size_is_stored_as_int():
    validated = validate_submission("Ada", "wav", 2048.0)

    assert validated.audio_size == 2048
    assert isinstance(validated.audio_size, int)
