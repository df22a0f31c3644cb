"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .leaderboard import LeaderboardEntryView, LeaderboardResponse
from .submissions import ProcessRequest, ProcessResponse, SubmitRequest, SubmitResponse

__all__ = [
    "ErrorResponse",
    "LeaderboardEntryView",
    "LeaderboardResponse",
    "ProcessRequest",
    "ProcessResponse",
    "SubmitRequest",
    "SubmitResponse",
]
