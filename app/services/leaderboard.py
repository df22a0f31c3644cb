"""Leaderboard aggregation over completed submissions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Sequence

from app.config.settings import settings
from app.domain.models import Submission, SubmissionStatus, session_date_for
from app.services.submission_store import SubmissionStore

logger = logging.getLogger(__name__)

TOP_COUNT = 3


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    name: str
    score: int
    roast: str
    timestamp: str
    prize_eligible: bool


@dataclass(frozen=True)
class Leaderboard:
    leaderboard: list[LeaderboardEntry]
    top3: list[LeaderboardEntry]
    total_participants: int
    average_score: int
    session_date: str
    last_updated: str


def _isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.isoformat()


def rank_submissions(submissions: Iterable[Submission]) -> list[LeaderboardEntry]:
    """Keep completed entries and rank them by score, highest first.

    ``sorted`` is stable, so equal scores keep their incoming order.
    """

    completed = [s for s in submissions if s.status == SubmissionStatus.COMPLETED]
    ordered = sorted(completed, key=lambda s: s.score or 0, reverse=True)
    return [
        LeaderboardEntry(
            rank=index,
            name=submission.participant_name,
            score=submission.score or 0,
            roast=submission.commentary or "",
            timestamp=_isoformat(submission.created_at),
            prize_eligible=bool(submission.prize_eligible),
        )
        for index, submission in enumerate(ordered, start=1)
    ]


def average_score(scores: Sequence[int]) -> int:
    """Mean rounded half-up to an integer; 0 for an empty set."""

    if not scores:
        return 0
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class LeaderboardAggregator:
    """Read-only ranked view of one session day."""

    def __init__(
        self,
        store: SubmissionStore,
        *,
        default_limit: int | None = None,
        session_timezone: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._default_limit = default_limit or settings.leaderboard.default_limit
        self._session_timezone = session_timezone or settings.leaderboard.session_timezone
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def today(self) -> date:
        return session_date_for(self._clock(), self._session_timezone)

    async def build(
        self,
        session_date: date | None = None,
        limit: int | None = None,
    ) -> Leaderboard:
        target_date = session_date or self.today()
        max_items = limit if limit is not None else self._default_limit

        submissions = await self._store.list_for_session(target_date)
        ranked = rank_submissions(submissions)
        logger.debug(
            "Leaderboard session=%s fetched=%s completed=%s",
            target_date,
            len(submissions),
            len(ranked),
        )

        return Leaderboard(
            leaderboard=ranked[:max_items],
            top3=ranked[:TOP_COUNT],
            total_participants=len(ranked),
            average_score=average_score([entry.score for entry in ranked]),
            session_date=target_date.isoformat(),
            last_updated=self._clock().isoformat(),
        )


__all__ = [
    "Leaderboard",
    "LeaderboardAggregator",
    "LeaderboardEntry",
    "TOP_COUNT",
    "average_score",
    "rank_submissions",
]
