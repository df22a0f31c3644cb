"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

SUBMISSION_COUNTER = Counter(
    "submissions_created_total",
    "Number of submissions created in pending state",
)

SCORING_RUNS = Counter(
    "scoring_runs_total",
    "Scoring pipeline runs by terminal outcome",
    ("outcome",),
)

STAGE_RETRIES = Counter(
    "scoring_stage_retries_total",
    "Retried external calls within the scoring pipeline",
    ("stage",),
)

SCORE_HISTOGRAM = Histogram(
    "scoring_score",
    "Distribution of persisted submission scores",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def increment_submission() -> None:
    """Increment the created submissions counter."""

    SUBMISSION_COUNTER.inc()


def record_scoring_outcome(outcome: str, score: int | None = None) -> None:
    """Count a finished pipeline run and, on success, its score."""

    SCORING_RUNS.labels(outcome=outcome).inc()
    if score is not None:
        SCORE_HISTOGRAM.observe(score)


def increment_stage_retry(stage: str) -> None:
    STAGE_RETRIES.labels(stage=stage).inc()
