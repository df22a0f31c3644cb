"""Shared fixtures: a file-backed SQLite store and fakes for the external capabilities."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Awaitable, Callable, Iterable
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# The module-level engine in app.database must not need a PostgreSQL driver/server.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from app.domain.models import AudioFormat, Submission, SubmissionStatus  # noqa: E402
from app.models import Base  # noqa: E402
from app.services.storage import StorageError  # noqa: E402
from app.services.submission_store import SubmissionStore  # noqa: E402
from app.services.transcribe import TranscriptionResult  # noqa: E402


class FakeAudioStore:
    """Records presign requests and serves canned audio."""

    def __init__(self, audio: bytes | None = b"fake-audio") -> None:
        self.audio = audio
        self.presigned: list[dict[str, Any]] = []
        self.downloads: list[str] = []

    async def create_upload_url(self, object_key: str, *, content_type: str, expires_in: int) -> str:
        self.presigned.append(
            {"key": object_key, "content_type": content_type, "expires_in": expires_in}
        )
        return f"https://uploads.example.com/{object_key}?X-Amz-Expires={expires_in}"

    async def download_audio(self, object_key: str) -> bytes:
        self.downloads.append(object_key)
        if self.audio is None:
            raise StorageError(f"Failed to download audio {object_key}: NoSuchKey")
        return self.audio


class ScriptedTranscriber:
    """Returns (or raises) the next scripted outcome on every call."""

    def __init__(self, outcomes: Iterable[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    async def transcribe(self, audio_bytes: bytes, audio_format: str) -> TranscriptionResult:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return TranscriptionResult(transcript=outcome, language_code="en-US")


class ScriptedGrader:
    """Returns (or raises) the next scripted raw model reply on every call."""

    def __init__(self, outcomes: Iterable[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0
        self.prompts: list[str] = []

    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append(user_prompt)
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that only records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    path = tmp_path / "submissions.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(database_path: Path) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_path}", poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> SubmissionStore:
    return SubmissionStore(session_factory)


@pytest.fixture
def audio_store() -> FakeAudioStore:
    return FakeAudioStore()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


def make_submission(
    *,
    name: str = "Ada",
    created_at: datetime | None = None,
    audio_format: AudioFormat = AudioFormat.WAV,
    session: date | None = None,
) -> Submission:
    created_at = created_at or datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc)
    return Submission(
        id=str(uuid4()),
        created_at_millis=round(created_at.timestamp() * 1000),
        created_at=created_at,
        session_date=session or created_at.date(),
        participant_name=name,
        audio_format=audio_format,
        audio_size_bytes=1024,
        status=SubmissionStatus.PENDING,
        expires_at=int((created_at + timedelta(days=90)).timestamp()),
    )


@pytest.fixture
def seed(store: SubmissionStore) -> Callable[..., Awaitable[Submission]]:
    """Create a submission and walk it to the requested status through the store."""

    counter = {"millis": 0}

    async def _seed(
        name: str = "Ada",
        *,
        score: int | None = None,
        status: SubmissionStatus = SubmissionStatus.COMPLETED,
        session: date = date(2025, 3, 14),
    ) -> Submission:
        counter["millis"] += 1
        created_at = datetime.combine(session, time(12, 0), tzinfo=timezone.utc) + timedelta(
            milliseconds=counter["millis"]
        )
        submission = make_submission(name=name, created_at=created_at, session=session)
        await store.create(submission)
        key = (submission.id, submission.created_at_millis)
        if status in (SubmissionStatus.PROCESSING, SubmissionStatus.COMPLETED):
            await store.mark_processing(*key)
        if status == SubmissionStatus.COMPLETED:
            await store.mark_completed(
                *key,
                transcript=f"{name} loved the keynote",
                score=score if score is not None else 50,
                commentary=f"roast for {name}",
                prize_eligible=(score or 0) >= 80,
                audio_key=submission.object_key,
            )
        if status == SubmissionStatus.FAILED:
            await store.mark_failed(*key, "Transcription failed")
        return submission

    return _seed


@pytest.fixture
def submission_factory() -> Callable[..., Submission]:
    return make_submission
