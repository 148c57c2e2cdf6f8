"""Domain interfaces for the party game."""

from .content_repository import ContentRepository
from .session_repository import SessionRepository

__all__ = ["ContentRepository", "SessionRepository"]
