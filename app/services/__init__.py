"""Service layer helpers for persistence and external integrations."""

from .leaderboard import Leaderboard, LeaderboardAggregator, LeaderboardEntry
from .llm_client import BedrockLlmClient, LlmInvocationError
from .response_contract import GradingResponse, ResponseContractError
from .storage import AudioStore, StorageError
from .submission_store import SubmissionStore
from .transcribe import (
    TranscribeService,
    TranscriptionError,
    TranscriptionResult,
    build_transcribe_service,
)

__all__ = [
    "AudioStore",
    "BedrockLlmClient",
    "GradingResponse",
    "Leaderboard",
    "LeaderboardAggregator",
    "LeaderboardEntry",
    "LlmInvocationError",
    "ResponseContractError",
    "StorageError",
    "SubmissionStore",
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "build_transcribe_service",
]
