"""Local in-memory implementation of Session Repository."""

from typing import Dict, Optional

from ..domain.entities.game_session import GameSession
from ..domain.interfaces.session_repository import SessionRepository


class LocalSessionRepository(SessionRepository):
    """Local in-memory implementation of the Session Repository.

    Stores copies of sessions in a dictionary for testing and development
    purposes, so callers never share a live object with the store.
    """

    def __init__(self):
        """Initialize the local session repository with an empty dictionary."""
        self._sessions: Dict[str, GameSession] = {}

    async def save_session(self, session: GameSession) -> None:
        """Save a session to the in-memory dictionary.

        Args:
            session: The session entity to save.
        """
        self._sessions[str(session.id)] = session.model_copy(deep=True)

    async def load_session(self, session_id: str) -> Optional[GameSession]:
        """Retrieve a session by ID, or None when it does not exist."""
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    async def get_session(self, session_id: str) -> GameSession:
        """Retrieve a session by ID from the in-memory dictionary.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            GameSession: The session entity.

        Raises:
            ValueError: If the session is not found.
        """
        session = await self.load_session(session_id)
        if session is None:
            raise ValueError(f"Session with id {session_id} not found")
        return session

    async def delete_session(self, session_id: str) -> None:
        """Delete a session from the in-memory dictionary.

        Args:
            session_id: The unique identifier of the session to delete.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Session with id {session_id} not found")

        del self._sessions[session_id]
