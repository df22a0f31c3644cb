"""Scoring trigger endpoint.

For a stage-by-stage map see `app.pipelines.scoring.flow.ScoringPipeline`.
The POST `/process` call runs the whole pipeline synchronously and returns
the graded result, or the failure cause once the record is marked failed.
"""

import logging

from fastapi import APIRouter

from app.controllers.dependencies import ScoringPipelineDep
from app.errors import SubmissionValidationError
from app.views.submissions import ProcessRequest, ProcessResponse

router = APIRouter(tags=["processing"])

logger = logging.getLogger(__name__)


@router.post("/process", response_model=ProcessResponse)
async def process(payload: ProcessRequest, pipeline: ScoringPipelineDep) -> ProcessResponse:
    """Transcribe and grade an uploaded submission."""

    response_id = (payload.response_id or "").strip()
    if not response_id:
        raise SubmissionValidationError(["responseId is required"])

    result = await pipeline.run(response_id, payload.timestamp)

    return ProcessResponse(
        response_id=result.response_id,
        transcription=result.transcription,
        score=result.score,
        roast=result.roast,
        prize_eligible=result.prize_eligible,
    )
