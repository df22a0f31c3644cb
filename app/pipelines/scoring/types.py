"""Typed containers shared across the scoring pipeline.

These dataclasses live in their own module so the stages (`transcription`,
`grading`, `flow`) can import them without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GradingOutcome:
    """Validated grading reply, before clamping."""

    raw_score: float
    roast: str
    raw_response: str


@dataclass(frozen=True)
class ScoringResult:
    """Terminal, persisted outcome of a successful pipeline run."""

    response_id: str
    transcription: str
    score: int
    roast: str
    prize_eligible: bool
