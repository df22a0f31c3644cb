"""Transcription stage (Stage 03) of the scoring pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from app.errors import UpstreamFailure
from app.services.transcribe import TranscriptionResult
from app.telemetry import increment_stage_retry

from .retry import RetryExhaustedError, RetryPolicy, Sleeper, retry_async

logger = logging.getLogger("app.pipelines.scoring")


class Transcriber(Protocol):
    async def transcribe(self, audio_bytes: bytes, audio_format: str) -> TranscriptionResult:
        ...


async def transcribe_audio(
    transcriber: Transcriber,
    audio_bytes: bytes,
    audio_format: str,
    policy: RetryPolicy,
    *,
    sleep: Sleeper = asyncio.sleep,
) -> str:
    """Transcribe with its own retry budget and surface exhaustion as ``UpstreamFailure``."""

    async def _attempt() -> str:
        result = await transcriber.transcribe(audio_bytes, audio_format)
        return result.transcript

    try:
        return await retry_async(
            _attempt,
            policy,
            label="Transcription",
            sleep=sleep,
            on_retry=lambda _attempt_no, _exc: increment_stage_retry("transcription"),
        )
    except RetryExhaustedError as exc:
        logger.error("Transcription exhausted retries: %s", exc.last_error)
        raise UpstreamFailure("transcription", str(exc)) from exc


__all__ = ["Transcriber", "transcribe_audio"]
