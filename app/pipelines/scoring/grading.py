"""Grading stage (Stage 04) of the scoring pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from app.errors import UpstreamFailure
from app.services.response_contract import GradingResponse
from app.telemetry import increment_stage_retry

from .prompts import GRADING_SYSTEM_PROMPT, build_grading_user_prompt
from .retry import RetryExhaustedError, RetryPolicy, Sleeper, retry_async
from .types import GradingOutcome

logger = logging.getLogger("app.pipelines.scoring")


class GradingModel(Protocol):
    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str:
        ...


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


async def grade_transcript(
    model: GradingModel,
    transcript: str,
    policy: RetryPolicy,
    *,
    sleep: Sleeper = asyncio.sleep,
) -> GradingOutcome:
    """Invoke the model and validate its reply; malformed replies consume an attempt."""

    user_prompt = build_grading_user_prompt(transcript)

    async def _attempt() -> GradingOutcome:
        raw_response = await model.invoke(
            system_prompt=GRADING_SYSTEM_PROMPT,
            user_prompt=user_prompt,
        )
        logger.info("Raw grading response: %s", _truncate(raw_response or ""))
        parsed = GradingResponse.from_json(raw_response)
        return GradingOutcome(
            raw_score=parsed.score,
            roast=parsed.roast,
            raw_response=raw_response,
        )

    try:
        return await retry_async(
            _attempt,
            policy,
            label="Grading",
            sleep=sleep,
            on_retry=lambda _attempt_no, _exc: increment_stage_retry("grading"),
        )
    except RetryExhaustedError as exc:
        logger.error("Grading exhausted retries: %s", exc.last_error)
        raise UpstreamFailure("grading", str(exc)) from exc


__all__ = ["GradingModel", "grade_transcript"]
