"""FastAPI routers acting as controllers in the MVC architecture."""

from . import leaderboard, processing, submissions

__all__ = ["leaderboard", "processing", "submissions"]
