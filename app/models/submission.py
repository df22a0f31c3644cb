"""SQLAlchemy model for participant submissions."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)

from app.models.base import Base


class SubmissionRecord(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, nullable=False)
    created_at_millis = Column(BigInteger, primary_key=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    session_date = Column(Date, nullable=False)
    participant_name = Column(String(50), nullable=False)
    audio_format = Column(String(8), nullable=False)
    audio_size_bytes = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="pending", index=True)
    transcript = Column(Text, nullable=True)
    score = Column(Integer, nullable=True)
    commentary = Column(Text, nullable=True)
    prize_eligible = Column(Boolean, nullable=True)
    audio_key = Column(String(256), nullable=True)
    error_detail = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index("ix_submissions_session_date_score", "session_date", "score"),
    )


__all__ = ["SubmissionRecord"]
