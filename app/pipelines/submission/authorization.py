"""Upload authorization (Stage 02 of the submission flow).

Creates the ``pending`` record and presigns a single-object PUT for the
client to upload its recording directly to S3.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

from app.config.settings import settings
from app.domain.models import Submission, SubmissionStatus, audio_object_key, session_date_for
from app.services.storage import AudioStore
from app.services.submission_store import SubmissionStore
from app.telemetry import increment_submission

from .validation import ValidatedSubmission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadAuthorization:
    """Everything the client needs to upload its recording."""

    response_id: str
    upload_url: str
    expires_in: int
    s3_key: str
    created_at_millis: int


class UploadAuthorizationIssuer:
    """Allocate a submission id, persist it as pending and presign its upload."""

    def __init__(
        self,
        store: SubmissionStore,
        audio_store: AudioStore,
        *,
        expires_in: int | None = None,
        retention_days: int | None = None,
        session_timezone: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._audio_store = audio_store
        self._expires_in = expires_in or settings.s3.upload_url_expiration
        self._retention = timedelta(days=retention_days or settings.submission.retention_days)
        self._session_timezone = session_timezone or settings.leaderboard.session_timezone
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def issue(self, validated: ValidatedSubmission) -> UploadAuthorization:
        now = self._clock()
        created_at_millis = round(now.timestamp() * 1000)
        session_date = session_date_for(now, self._session_timezone)

        submission = Submission(
            id=str(uuid4()),
            created_at_millis=created_at_millis,
            created_at=now,
            session_date=session_date,
            participant_name=validated.name,
            audio_format=validated.audio_format,
            audio_size_bytes=validated.audio_size,
            status=SubmissionStatus.PENDING,
            expires_at=int((now + self._retention).timestamp()),
        )
        await self._store.create(submission)
        increment_submission()

        s3_key = audio_object_key(
            session_date.isoformat(), submission.id, validated.audio_format.value
        )
        upload_url = await self._audio_store.create_upload_url(
            s3_key,
            content_type=validated.audio_format.content_type,
            expires_in=self._expires_in,
        )
        logger.info("Issued upload authorization id=%s key=%s", submission.id, s3_key)

        return UploadAuthorization(
            response_id=submission.id,
            upload_url=upload_url,
            expires_in=self._expires_in,
            s3_key=s3_key,
            created_at_millis=created_at_millis,
        )


__all__ = ["UploadAuthorization", "UploadAuthorizationIssuer"]
