"""Pydantic schemas for the leaderboard endpoint."""

from pydantic import BaseModel, Field


class LeaderboardEntryView(BaseModel):
    rank: int = Field(..., ge=1)
    name: str
    score: int
    roast: str
    timestamp: str = Field(..., description="ISO 8601 creation timestamp")
    prize_eligible: bool = Field(..., alias="prizeEligible")

    model_config = {"populate_by_name": True, "from_attributes": True}


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardEntryView]
    top3: list[LeaderboardEntryView]
    total_participants: int = Field(..., alias="totalParticipants")
    average_score: int = Field(..., alias="averageScore")
    session_date: str = Field(..., alias="sessionDate")
    last_updated: str = Field(..., alias="lastUpdated")

    model_config = {"populate_by_name": True, "from_attributes": True}
