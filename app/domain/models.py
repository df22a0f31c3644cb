from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SubmissionStatus.COMPLETED, SubmissionStatus.FAILED)

    def can_transition_to(self, target: "SubmissionStatus") -> bool:
        """Return True when ``self -> target`` is an allowed lifecycle step."""
        return target in _TRANSITIONS[self]


# processing -> processing is the accepted concurrent-claim race.
_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset(
        {SubmissionStatus.PROCESSING, SubmissionStatus.FAILED}
    ),
    SubmissionStatus.PROCESSING: frozenset(
        {
            SubmissionStatus.PROCESSING,
            SubmissionStatus.COMPLETED,
            SubmissionStatus.FAILED,
        }
    ),
    SubmissionStatus.COMPLETED: frozenset(),
    SubmissionStatus.FAILED: frozenset(),
}


def statuses_allowing(target: SubmissionStatus) -> tuple[SubmissionStatus, ...]:
    """Statuses from which ``target`` may be entered."""
    return tuple(status for status in SubmissionStatus if status.can_transition_to(target))


class AudioFormat(str, Enum):
    MP4 = "mp4"
    WEBM = "webm"
    WAV = "wav"
    M4A = "m4a"
    AAC = "aac"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES.get(self, "application/octet-stream")


_CONTENT_TYPES = {
    AudioFormat.MP4: "audio/mp4",
    AudioFormat.M4A: "audio/mp4",
    AudioFormat.WEBM: "audio/webm",
    AudioFormat.WAV: "audio/wav",
    AudioFormat.AAC: "audio/aac",
}


def session_date_for(moment: datetime, timezone_name: str = "UTC") -> date:
    """Calendar day that partitions the leaderboard for ``moment``."""
    tz = timezone.utc if timezone_name.upper() == "UTC" else ZoneInfo(timezone_name)
    return moment.astimezone(tz).date()


def audio_object_key(session_date: str, response_id: str, audio_format: str) -> str:
    """Object key convention for uploaded audio: ``{date}/{id}.{format}``."""
    return f"{session_date}/{response_id}.{audio_format}"


def is_prize_eligible(score: int, threshold: int = 80) -> bool:
    return score >= threshold


def clamp_score(raw_score: float) -> int:
    """Clamp a model-provided score into [0, 100] and round to an integer."""
    return int(round(max(0.0, min(100.0, float(raw_score)))))


class Submission(BaseModel):
    """Domain model for a single participant submission."""
    id: str
    created_at_millis: int
    created_at: datetime
    session_date: date
    participant_name: str
    audio_format: AudioFormat
    audio_size_bytes: int
    status: SubmissionStatus = SubmissionStatus.PENDING
    transcript: Optional[str] = None
    score: Optional[int] = None
    commentary: Optional[str] = None
    prize_eligible: Optional[bool] = None
    audio_key: Optional[str] = None
    error_detail: Optional[str] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    expires_at: int

    class Config:
        from_attributes = True

    @property
    def object_key(self) -> str:
        return audio_object_key(
            self.session_date.isoformat(), self.id, self.audio_format.value
        )
