"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SCORE_HISTOGRAM,
    SCORING_RUNS,
    STAGE_RETRIES,
    SUBMISSION_COUNTER,
    increment_stage_retry,
    increment_submission,
    observe_request,
    record_scoring_outcome,
)

__all__ = [
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SCORE_HISTOGRAM",
    "SCORING_RUNS",
    "STAGE_RETRIES",
    "SUBMISSION_COUNTER",
    "increment_stage_retry",
    "increment_submission",
    "observe_request",
    "record_scoring_outcome",
]
