"""Submission intake endpoint."""

import logging

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from app.controllers.dependencies import UploadIssuerDep
from app.errors import InternalError
from app.pipelines.submission import validate_submission
from app.services.storage import StorageError
from app.views.submissions import SubmitRequest, SubmitResponse

router = APIRouter(tags=["submissions"])

logger = logging.getLogger(__name__)


@router.post("/submit", response_model=SubmitResponse)
async def submit(payload: SubmitRequest, issuer: UploadIssuerDep) -> SubmitResponse:
    """Validate a submission and return a presigned upload URL for its audio."""

    validated = validate_submission(payload.name, payload.audio_format, payload.audio_size)

    try:
        authorization = await issuer.issue(validated)
    except (StorageError, SQLAlchemyError) as exc:
        logger.exception("Error in submit handler")
        raise InternalError(str(exc)) from exc

    return SubmitResponse(
        response_id=authorization.response_id,
        upload_url=authorization.upload_url,
        expires_in=authorization.expires_in,
        s3_key=authorization.s3_key,
        timestamp=authorization.created_at_millis,
    )
