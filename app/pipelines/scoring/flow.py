"""Orchestration of the scoring pipeline.

``ScoringPipeline.run`` drives one submission through its lifecycle:

1. ``lookup`` – load the record by id (and creation millis when known).
2. ``claim`` – move it to ``processing`` before any external work.
3. ``download`` – read the uploaded recording from S3.
4. ``transcription`` – speech-to-text with its own retry budget.
5. ``grading`` – rubric prompt to the conversational model, separate budget.
6. ``finalize`` – clamp, derive prize eligibility, write ``completed``.

Any failure after the lookup leaves the record ``failed`` with the cause.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from app.config.settings import settings
from app.domain.models import Submission, clamp_score, is_prize_eligible
from app.errors import (
    InternalError,
    ServiceError,
    SubmissionConflictError,
    SubmissionNotFoundError,
    UpstreamFailure,
)
from app.services.storage import AudioStore, StorageError
from app.services.submission_store import SubmissionStore
from app.telemetry import record_scoring_outcome

from .grading import GradingModel, grade_transcript
from .retry import RetryPolicy, Sleeper
from .transcription import Transcriber, transcribe_audio
from .types import ScoringResult

logger = logging.getLogger("app.pipelines.scoring")
transcript_logger = logging.getLogger("app.logs.transcript")


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the scoring pipeline."""

    order: int
    name: str
    module: str
    summary: str


class ScoringPipeline:
    """Transcribe, grade and finalize one submission."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(1, "Lookup", "app.services.submission_store", "Load the submission record."),
        PipelineStage(2, "Claim", "app.services.submission_store", "Best-effort move to processing."),
        PipelineStage(3, "Download", "app.services.storage", "Read the uploaded audio from S3."),
        PipelineStage(4, "Transcription", "app.pipelines.scoring.transcription", "Amazon Transcribe with bounded retry."),
        PipelineStage(5, "Grading", "app.pipelines.scoring.grading", "Bedrock rubric grading with bounded retry."),
        PipelineStage(6, "Finalize", "app.services.submission_store", "Clamp score, derive prize flag, mark completed."),
    ]

    def __init__(
        self,
        store: SubmissionStore,
        audio_store: AudioStore,
        transcriber: Transcriber,
        grader: GradingModel,
        *,
        retry_policy: RetryPolicy | None = None,
        prize_threshold: int | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._store = store
        self._audio_store = audio_store
        self._transcriber = transcriber
        self._grader = grader
        self._retry_policy = retry_policy or RetryPolicy.from_config(settings.scoring)
        self._prize_threshold = (
            prize_threshold if prize_threshold is not None else settings.scoring.prize_threshold
        )
        self._sleep = sleep

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    async def run(
        self,
        response_id: str,
        created_at_millis: Optional[int] = None,
    ) -> ScoringResult:
        submission = await self._store.get(response_id, created_at_millis)
        if submission is None:
            raise SubmissionNotFoundError(response_id)
        if submission.status.is_terminal:
            raise SubmissionConflictError(response_id, submission.status.value)

        try:
            result = await self._process(submission)
        except SubmissionConflictError:
            raise
        except ServiceError as exc:
            await self._record_failure(submission, exc.message)
            record_scoring_outcome("failed")
            raise
        except Exception as exc:
            logger.exception("Unexpected scoring failure id=%s", response_id)
            await self._record_failure(submission, str(exc) or exc.__class__.__name__)
            record_scoring_outcome("failed")
            raise InternalError(str(exc) or exc.__class__.__name__) from exc

        record_scoring_outcome("completed", result.score)
        return result

    async def _process(self, submission: Submission) -> ScoringResult:
        key = (submission.id, submission.created_at_millis)

        if not await self._store.mark_processing(*key):
            raise SubmissionConflictError(submission.id, "finalized")

        object_key = submission.object_key
        logger.info("Processing audio file id=%s key=%s", submission.id, object_key)
        try:
            audio_bytes = await self._audio_store.download_audio(object_key)
        except StorageError as exc:
            raise UpstreamFailure("download", str(exc)) from exc

        transcript = await transcribe_audio(
            self._transcriber,
            audio_bytes,
            submission.audio_format.value,
            self._retry_policy,
            sleep=self._sleep,
        )
        del audio_bytes
        transcript_logger.info("participant | id=%s | text=%s", submission.id, transcript)

        grading = await grade_transcript(
            self._grader,
            transcript,
            self._retry_policy,
            sleep=self._sleep,
        )
        score = clamp_score(grading.raw_score)
        prize_eligible = is_prize_eligible(score, self._prize_threshold)
        if score != grading.raw_score:
            logger.info(
                "Clamped grading score id=%s raw=%s score=%s",
                submission.id,
                grading.raw_score,
                score,
            )

        completed = await self._store.mark_completed(
            *key,
            transcript=transcript,
            score=score,
            commentary=grading.roast,
            prize_eligible=prize_eligible,
            audio_key=object_key,
        )
        if not completed:
            raise SubmissionConflictError(submission.id, "finalized")

        logger.info(
            "Scored submission id=%s score=%s prize_eligible=%s",
            submission.id,
            score,
            prize_eligible,
        )
        return ScoringResult(
            response_id=submission.id,
            transcription=transcript,
            score=score,
            roast=grading.roast,
            prize_eligible=prize_eligible,
        )

    async def _record_failure(self, submission: Submission, error_detail: str) -> None:
        """Best-effort terminal write; a failure here never masks the error being reported."""

        try:
            await self._store.mark_failed(
                submission.id,
                submission.created_at_millis,
                error_detail,
            )
        except Exception:
            logger.exception("Failed to update error status id=%s", submission.id)


__all__ = ["PipelineStage", "ScoringPipeline"]
