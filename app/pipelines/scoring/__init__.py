"""Scoring pipeline package.

Modules are organised by the order in which `/process` executes:

1. `transcription` – speech-to-text under a bounded retry budget.
2. `prompts` – the fixed grading rubric.
3. `grading` – call the conversational model and validate its reply.
4. `flow` – the lifecycle orchestration tying the stages to the store.

`retry` holds the backoff combinator shared by stages 1 and 3.
"""

from .flow import PipelineStage, ScoringPipeline
from .grading import GradingModel, grade_transcript
from .prompts import GRADING_SYSTEM_PROMPT, RUBRIC_WEIGHTS, build_grading_user_prompt
from .retry import RetryExhaustedError, RetryPolicy, retry_async
from .transcription import Transcriber, transcribe_audio
from .types import GradingOutcome, ScoringResult

__all__ = [
    "GRADING_SYSTEM_PROMPT",
    "RUBRIC_WEIGHTS",
    "GradingModel",
    "GradingOutcome",
    "PipelineStage",
    "RetryExhaustedError",
    "RetryPolicy",
    "ScoringPipeline",
    "ScoringResult",
    "Transcriber",
    "build_grading_user_prompt",
    "grade_transcript",
    "retry_async",
    "transcribe_audio",
]
