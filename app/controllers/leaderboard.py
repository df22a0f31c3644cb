"""Leaderboard query endpoint."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, Response
from sqlalchemy.exc import SQLAlchemyError

from app.config.settings import settings
from app.controllers.dependencies import LeaderboardDep
from app.errors import InternalError
from app.services.leaderboard import LeaderboardEntry
from app.views.leaderboard import LeaderboardEntryView, LeaderboardResponse

router = APIRouter(tags=["leaderboard"])

logger = logging.getLogger(__name__)


def _entry_view(entry: LeaderboardEntry) -> LeaderboardEntryView:
    return LeaderboardEntryView(
        rank=entry.rank,
        name=entry.name,
        score=entry.score,
        roast=entry.roast,
        timestamp=entry.timestamp,
        prize_eligible=entry.prize_eligible,
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    response: Response,
    aggregator: LeaderboardDep,
    session_date: Optional[date] = Query(
        None,
        alias="sessionDate",
        description="Session day as YYYY-MM-DD; defaults to today",
    ),
    limit: Optional[int] = Query(None, ge=1, description="Maximum leaderboard rows"),
) -> LeaderboardResponse:
    """Return the ranked completed submissions for a session day."""

    logger.info("Fetching leaderboard for session_date=%s limit=%s", session_date, limit)
    try:
        board = await aggregator.build(session_date, limit)
    except SQLAlchemyError as exc:
        logger.exception("Error in leaderboard handler")
        raise InternalError(str(exc), error="Failed to retrieve leaderboard") from exc

    response.headers["Cache-Control"] = f"max-age={settings.leaderboard.cache_max_age_seconds}"
    return LeaderboardResponse(
        leaderboard=[_entry_view(entry) for entry in board.leaderboard],
        top3=[_entry_view(entry) for entry in board.top3],
        total_participants=board.total_participants,
        average_score=board.average_score,
        session_date=board.session_date,
        last_updated=board.last_updated,
    )
