"""Common FastAPI dependencies reused across controllers.

External clients are created once per process on first use and injected into
the components; tests replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config.settings import settings
from app.database import SessionFactory
from app.pipelines.scoring import RetryPolicy, ScoringPipeline
from app.pipelines.submission import UploadAuthorizationIssuer
from app.services import (
    AudioStore,
    BedrockLlmClient,
    LeaderboardAggregator,
    SubmissionStore,
    TranscribeService,
    build_transcribe_service,
)


@lru_cache(maxsize=1)
def get_submission_store() -> SubmissionStore:
    return SubmissionStore(SessionFactory)


@lru_cache(maxsize=1)
def get_audio_store() -> AudioStore:
    return AudioStore()


@lru_cache(maxsize=1)
def get_transcribe_service() -> TranscribeService:
    return build_transcribe_service()


@lru_cache(maxsize=1)
def get_llm_client() -> BedrockLlmClient:
    return BedrockLlmClient()


StoreDep = Annotated[SubmissionStore, Depends(get_submission_store)]
AudioStoreDep = Annotated[AudioStore, Depends(get_audio_store)]


def get_upload_issuer(store: StoreDep, audio_store: AudioStoreDep) -> UploadAuthorizationIssuer:
    return UploadAuthorizationIssuer(store, audio_store)


def get_scoring_pipeline(
    store: StoreDep,
    audio_store: AudioStoreDep,
    transcriber: Annotated[TranscribeService, Depends(get_transcribe_service)],
    grader: Annotated[BedrockLlmClient, Depends(get_llm_client)],
) -> ScoringPipeline:
    return ScoringPipeline(
        store,
        audio_store,
        transcriber,
        grader,
        retry_policy=RetryPolicy.from_config(settings.scoring),
    )


def get_leaderboard_aggregator(store: StoreDep) -> LeaderboardAggregator:
    return LeaderboardAggregator(store)


UploadIssuerDep = Annotated[UploadAuthorizationIssuer, Depends(get_upload_issuer)]
ScoringPipelineDep = Annotated[ScoringPipeline, Depends(get_scoring_pipeline)]
LeaderboardDep = Annotated[LeaderboardAggregator, Depends(get_leaderboard_aggregator)]


__all__ = [
    "AudioStoreDep",
    "LeaderboardDep",
    "ScoringPipelineDep",
    "StoreDep",
    "UploadIssuerDep",
    "get_audio_store",
    "get_leaderboard_aggregator",
    "get_llm_client",
    "get_scoring_pipeline",
    "get_submission_store",
    "get_transcribe_service",
    "get_upload_issuer",
]
