"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .submission import SubmissionRecord  # noqa: F401

__all__ = [
    "Base",
    "SubmissionRecord",
]
