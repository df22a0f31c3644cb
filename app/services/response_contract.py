"""Pydantic models for validating LLM JSON responses.

The grading stage runs every raw model reply through these schemas so that
downstream code receives normalized, type-safe objects.
"""

from __future__ import annotations

import json
import math
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator


class ResponseContractError(RuntimeError):
    """Raised when the LLM response contract cannot be validated."""


class GradingResponse(BaseModel):
    score: float
    roast: str

    model_config = {"extra": "ignore"}

    @field_validator("score", mode="before")
    @classmethod
    def require_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a number")
        if not math.isfinite(value):
            raise ValueError("score must be finite")
        return value

    @field_validator("roast", mode="before")
    @classmethod
    def require_text(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("roast must be a non-empty string")
        return value.strip()

    @classmethod
    def from_json(cls, payload: str) -> "GradingResponse":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ResponseContractError(f"Grading response is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ResponseContractError("Grading response must be a JSON object.")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ResponseContractError(f"Invalid grading response format: {exc}") from exc


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "GradingResponse",
    "ResponseContractError",
]
