from __future__ import annotations

import json

import pytest

from app.domain.models import SubmissionStatus
from app.errors import (
    InternalError,
    SubmissionConflictError,
    SubmissionNotFoundError,
    UpstreamFailure,
)
from app.pipelines.scoring import RetryPolicy, ScoringPipeline
from app.services.submission_store import SubmissionStore

from conftest import FakeAudioStore, ScriptedGrader, ScriptedTranscriber

TRANSCRIPT = "I met three vendors and we are piloting their tool next quarter"


def _reply(score, roast="Your boss is already booking next year's ticket."):
    return json.dumps({"score": score, "roast": roast})


def _pipeline(store, audio_store, transcriber, grader, sleep):
    return ScoringPipeline(
        store,
        audio_store,
        transcriber,
        grader,
        retry_policy=RetryPolicy(),
        prize_threshold=80,
        sleep=sleep,
    )


@pytest.mark.asyncio
async def test_happy_path_completes_the_record(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    transcriber = ScriptedTranscriber([TRANSCRIPT])
    grader = ScriptedGrader([f"```json\n{_reply(86)}\n```"])

    result = await _pipeline(store, audio_store, transcriber, grader, recording_sleep).run(
        submission.id, submission.created_at_millis
    )

    assert result.response_id == submission.id
    assert result.transcription == TRANSCRIPT
    assert result.score == 86
    assert result.prize_eligible is True
    assert audio_store.downloads == [f"2025-03-14/{submission.id}.wav"]
    assert grader.prompts == [f'Response to evaluate: "{TRANSCRIPT}"']
    assert recording_sleep.delays == []

    record = await store.get(submission.id)
    assert record.status is SubmissionStatus.COMPLETED
    assert record.transcript == TRANSCRIPT
    assert record.score == 86
    assert record.commentary == "Your boss is already booking next year's ticket."
    assert record.audio_key == f"2025-03-14/{submission.id}.wav"


@pytest.mark.asyncio
async def test_lookup_by_id_alone_uses_newest_record(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)

    result = await _pipeline(
        store, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(60)]), recording_sleep
    ).run(submission.id)

    assert result.score == 60
    assert result.prize_eligible is False


@pytest.mark.asyncio
@pytest.mark.parametrize(("raw", "score", "eligible"), [(142, 100, True), (-5, 0, False), (79.6, 80, True)])
async def test_scores_are_clamped_before_prize_check(
    store, seed, audio_store, recording_sleep, raw, score, eligible
):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)

    result = await _pipeline(
        store, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(raw)]), recording_sleep
    ).run(submission.id)

    assert result.score == score
    assert result.prize_eligible is eligible
    assert (await store.get(submission.id)).score == score


@pytest.mark.asyncio
async def test_unknown_submission_is_not_found(store, audio_store, recording_sleep):
    pipeline = _pipeline(
        store, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(50)]), recording_sleep
    )

    with pytest.raises(SubmissionNotFoundError):
        await pipeline.run("does-not-exist")

    assert audio_store.downloads == []


@pytest.mark.asyncio
async def test_transcription_exhaustion_marks_failed(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    transcriber = ScriptedTranscriber([ConnectionError("stream reset")])
    grader = ScriptedGrader([_reply(90)])

    with pytest.raises(UpstreamFailure) as exc_info:
        await _pipeline(store, audio_store, transcriber, grader, recording_sleep).run(submission.id)

    assert exc_info.value.stage == "transcription"
    assert exc_info.value.error == "Processing failed"
    assert transcriber.calls == 3
    assert grader.calls == 0
    assert recording_sleep.delays == [1.0, 2.0]

    record = await store.get(submission.id)
    assert record.status is SubmissionStatus.FAILED
    assert "stream reset" in record.error_detail


@pytest.mark.asyncio
async def test_transient_transcription_failure_recovers(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    transcriber = ScriptedTranscriber([TimeoutError("slow"), TRANSCRIPT])

    result = await _pipeline(
        store, audio_store, transcriber, ScriptedGrader([_reply(70)]), recording_sleep
    ).run(submission.id)

    assert result.score == 70
    assert transcriber.calls == 2
    assert recording_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_malformed_grading_replies_consume_the_budget(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    grader = ScriptedGrader(["not json", '{"score": "high", "roast": "x"}', '{"score": 90, "roast": ""}'])

    with pytest.raises(UpstreamFailure) as exc_info:
        await _pipeline(
            store, audio_store, ScriptedTranscriber([TRANSCRIPT]), grader, recording_sleep
        ).run(submission.id)

    assert exc_info.value.stage == "grading"
    assert grader.calls == 3
    record = await store.get(submission.id)
    assert record.status is SubmissionStatus.FAILED
    assert record.score is None


@pytest.mark.asyncio
async def test_stages_have_independent_retry_budgets(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    transcriber = ScriptedTranscriber([RuntimeError("t1"), RuntimeError("t2"), TRANSCRIPT])
    grader = ScriptedGrader([RuntimeError("g1"), "garbage", _reply(81)])

    result = await _pipeline(store, audio_store, transcriber, grader, recording_sleep).run(submission.id)

    assert result.score == 81
    assert transcriber.calls == 3
    assert grader.calls == 3
    assert recording_sleep.delays == [1.0, 2.0, 1.0, 2.0]


@pytest.mark.asyncio
async def test_missing_audio_marks_failed(store, seed, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    transcriber = ScriptedTranscriber([TRANSCRIPT])

    with pytest.raises(UpstreamFailure) as exc_info:
        await _pipeline(
            store, FakeAudioStore(audio=None), transcriber, ScriptedGrader([_reply(50)]), recording_sleep
        ).run(submission.id)

    assert exc_info.value.stage == "download"
    assert transcriber.calls == 0
    assert (await store.get(submission.id)).status is SubmissionStatus.FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize("terminal", [SubmissionStatus.COMPLETED, SubmissionStatus.FAILED])
async def test_terminal_records_are_not_reprocessed(store, seed, audio_store, recording_sleep, terminal):
    submission = await seed("Ada", score=77, status=terminal)
    before = await store.get(submission.id)

    with pytest.raises(SubmissionConflictError):
        await _pipeline(
            store, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(10)]), recording_sleep
        ).run(submission.id)

    after = await store.get(submission.id)
    assert audio_store.downloads == []
    assert after.status is terminal
    assert after.score == before.score
    assert after.error_detail == before.error_detail


@pytest.mark.asyncio
async def test_processing_record_can_be_claimed_again(store, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PROCESSING)

    result = await _pipeline(
        store, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(65)]), recording_sleep
    ).run(submission.id)

    assert result.score == 65
    assert (await store.get(submission.id)).status is SubmissionStatus.COMPLETED


class _BrokenFailureStore(SubmissionStore):
    async def mark_failed(self, response_id, created_at_millis, error_detail):
        raise RuntimeError("database unavailable")


@pytest.mark.asyncio
async def test_failure_write_errors_do_not_mask_the_cause(session_factory, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    broken = _BrokenFailureStore(session_factory)

    with pytest.raises(UpstreamFailure) as exc_info:
        await _pipeline(
            broken, audio_store, ScriptedTranscriber([ValueError("bad audio")]), ScriptedGrader([_reply(1)]), recording_sleep
        ).run(submission.id)

    assert exc_info.value.stage == "transcription"
    assert (await broken.get(submission.id)).status is SubmissionStatus.PROCESSING


class _ExplodingCompletionStore(SubmissionStore):
    async def mark_completed(self, *args, **kwargs):
        raise RuntimeError("disk full")


@pytest.mark.asyncio
async def test_unexpected_errors_become_internal_errors(session_factory, seed, audio_store, recording_sleep):
    submission = await seed("Ada", status=SubmissionStatus.PENDING)
    exploding = _ExplodingCompletionStore(session_factory)

    with pytest.raises(InternalError) as exc_info:
        await _pipeline(
            exploding, audio_store, ScriptedTranscriber([TRANSCRIPT]), ScriptedGrader([_reply(90)]), recording_sleep
        ).run(submission.id)

    assert exc_info.value.status_code == 500
    record = await exploding.get(submission.id)
    assert record.status is SubmissionStatus.FAILED
    assert record.error_detail == "disk full"


def test_describe_lists_stages_in_order():
    names = [stage.name for stage in ScoringPipeline.describe()]

    assert names == ["Lookup", "Claim", "Download", "Transcription", "Grading", "Finalize"]
