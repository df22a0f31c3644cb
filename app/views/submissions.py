"""Pydantic schemas for the submission and processing endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SubmitRequest(BaseModel):
    """Raw intake payload; types are checked by the submission validator."""

    name: Any = None
    audio_format: Any = Field(default=None, alias="audioFormat")
    audio_size: Any = Field(default=None, alias="audioSize")

    model_config = {"populate_by_name": True}


class SubmitResponse(BaseModel):
    response_id: str = Field(..., alias="responseId", description="Submission identifier")
    upload_url: str = Field(..., alias="uploadUrl", description="Presigned S3 PUT URL")
    expires_in: int = Field(..., alias="expiresIn", description="Upload URL lifetime in seconds")
    s3_key: str = Field(..., alias="s3Key", description="Object key the upload must target")
    timestamp: int = Field(..., description="Creation time in epoch milliseconds")

    model_config = {"populate_by_name": True}


class ProcessRequest(BaseModel):
    response_id: Optional[str] = Field(default=None, alias="responseId")
    timestamp: Optional[int] = Field(
        default=None,
        description="Creation time in epoch milliseconds returned by /submit",
    )

    model_config = {"populate_by_name": True}


class ProcessResponse(BaseModel):
    response_id: str = Field(..., alias="responseId")
    transcription: str
    score: int = Field(..., ge=0, le=100)
    roast: str
    prize_eligible: bool = Field(..., alias="prizeEligible")

    model_config = {"populate_by_name": True}
