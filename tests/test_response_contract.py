from __future__ import annotations

import pytest

from app.domain.models import (
    AudioFormat,
    SubmissionStatus,
    audio_object_key,
    clamp_score,
    is_prize_eligible,
)
from app.pipelines.scoring import GRADING_SYSTEM_PROMPT, RUBRIC_WEIGHTS
from app.services.response_contract import GradingResponse, ResponseContractError


def test_parses_fenced_json():
    parsed = GradingResponse.from_json('```json\n{"score": 77, "roast": " Nice slides. "}\n```')

    assert parsed.score == 77
    assert parsed.roast == "Nice slides."


def test_ignores_prose_around_the_object():
    parsed = GradingResponse.from_json('Sure! {"score": 64.5, "roast": "Snack bar MVP"} Enjoy.')

    assert parsed.score == 64.5


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        "[1, 2, 3]",
        '{"score": "85", "roast": "stringly typed"}',
        '{"score": true, "roast": "boolean"}',
        '{"score": 85, "roast": "   "}',
        '{"score": 85}',
        '{"roast": "no score"}',
        '{"score": NaN, "roast": "nan"}',
        "",
    ],
)
def test_rejects_malformed_replies(payload):
    with pytest.raises(ResponseContractError):
        GradingResponse.from_json(payload)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(-5, 0), (142, 100), (0, 0), (100, 100), (79, 79), (88.4, 88)],
)
def test_clamp_score(raw, expected):
    assert clamp_score(raw) == expected


def test_prize_threshold():
    assert is_prize_eligible(79) is False
    assert is_prize_eligible(80) is True


def test_rubric_weights_cover_one_hundred_points():
    assert sum(RUBRIC_WEIGHTS.values()) == 100
    for weight in ("(30 pts)", "(25 pts)", "(20 pts)", "(15 pts)", "(10 pts)"):
        assert weight in GRADING_SYSTEM_PROMPT


def test_lifecycle_transitions_are_one_directional():
    assert SubmissionStatus.PENDING.can_transition_to(SubmissionStatus.PROCESSING)
    assert SubmissionStatus.PROCESSING.can_transition_to(SubmissionStatus.COMPLETED)
    assert SubmissionStatus.PENDING.can_transition_to(SubmissionStatus.FAILED)
    assert not SubmissionStatus.COMPLETED.can_transition_to(SubmissionStatus.FAILED)
    assert not SubmissionStatus.FAILED.can_transition_to(SubmissionStatus.PROCESSING)
    assert not SubmissionStatus.PROCESSING.can_transition_to(SubmissionStatus.PENDING)
    assert not SubmissionStatus.PENDING.can_transition_to(SubmissionStatus.COMPLETED)


def test_content_types_and_object_key():
    assert AudioFormat.M4A.content_type == "audio/mp4"
    assert AudioFormat.WEBM.content_type == "audio/webm"
    assert audio_object_key("2025-03-14", "abc", "wav") == "2025-03-14/abc.wav"
