"""SQLAlchemy-backed repository for submission records.

The store is the only place lifecycle transitions hit the database. Every
status write is a conditional ``UPDATE ... WHERE status IN (...)`` built from
``SubmissionStatus.can_transition_to`` so terminal records are never rewritten.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.models import Submission, SubmissionStatus, statuses_allowing
from app.models.submission import SubmissionRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionStore:
    """Persist and query submissions through an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, submission: Submission) -> Submission:
        """Insert a new record in a single transaction."""

        record = SubmissionRecord(
            id=submission.id,
            created_at_millis=submission.created_at_millis,
            created_at=submission.created_at,
            session_date=submission.session_date,
            participant_name=submission.participant_name,
            audio_format=submission.audio_format.value,
            audio_size_bytes=submission.audio_size_bytes,
            status=submission.status.value,
            expires_at=submission.expires_at,
        )
        async with self._session_factory() as session:
            session.add(record)
            await session.commit()

        logger.info("Created submission record id=%s", submission.id)
        return submission

    async def get(
        self,
        response_id: str,
        created_at_millis: Optional[int] = None,
    ) -> Submission | None:
        """Fetch by composite key, or the newest record for ``response_id``."""

        query = select(SubmissionRecord).where(SubmissionRecord.id == response_id)
        if created_at_millis is not None:
            query = query.where(SubmissionRecord.created_at_millis == created_at_millis)
        query = query.order_by(SubmissionRecord.created_at_millis.desc()).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(query)
            record = result.scalar_one_or_none()

        return Submission.model_validate(record) if record is not None else None

    async def mark_processing(self, response_id: str, created_at_millis: int) -> bool:
        """Claim the submission. Not exclusive: a second concurrent claim also succeeds."""

        return await self._transition(
            response_id,
            created_at_millis,
            SubmissionStatus.PROCESSING,
        )

    async def mark_completed(
        self,
        response_id: str,
        created_at_millis: int,
        *,
        transcript: str,
        score: int,
        commentary: str,
        prize_eligible: bool,
        audio_key: str,
    ) -> bool:
        """Write every derived field and the ``completed`` status in one update."""

        now = _utcnow()
        return await self._transition(
            response_id,
            created_at_millis,
            SubmissionStatus.COMPLETED,
            transcript=transcript,
            score=score,
            commentary=commentary,
            prize_eligible=prize_eligible,
            audio_key=audio_key,
            completed_at=now,
        )

    async def mark_failed(
        self,
        response_id: str,
        created_at_millis: int,
        error_detail: str,
    ) -> bool:
        return await self._transition(
            response_id,
            created_at_millis,
            SubmissionStatus.FAILED,
            error_detail=error_detail,
        )

    async def list_for_session(self, session_date: date) -> list[Submission]:
        """Return every submission for a day, highest score first.

        Ties (and unscored rows) fall back to creation order. Callers must not
        rely on this ordering for ranking.
        """

        query = (
            select(SubmissionRecord)
            .where(SubmissionRecord.session_date == session_date)
            .order_by(
                SubmissionRecord.score.desc().nulls_last(),
                SubmissionRecord.created_at_millis.asc(),
            )
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            records: Sequence[SubmissionRecord] = result.scalars().all()

        return [Submission.model_validate(record) for record in records]

    async def _transition(
        self,
        response_id: str,
        created_at_millis: int,
        target: SubmissionStatus,
        **fields: object,
    ) -> bool:
        allowed = [status.value for status in statuses_allowing(target)]
        statement = (
            update(SubmissionRecord)
            .where(SubmissionRecord.id == response_id)
            .where(SubmissionRecord.created_at_millis == created_at_millis)
            .where(SubmissionRecord.status.in_(allowed))
            .values(status=target.value, updated_at=_utcnow(), **fields)
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        applied = result.rowcount > 0
        if not applied:
            logger.warning(
                "Skipped %s transition for submission id=%s (not in %s)",
                target.value,
                response_id,
                ", ".join(allowed),
            )
        return applied


__all__ = ["SubmissionStore"]
