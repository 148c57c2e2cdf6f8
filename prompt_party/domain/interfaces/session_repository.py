"""Session Repository interface."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.game_session import GameSession


@runtime_checkable
class SessionRepository(Protocol):
    """Protocol defining the interface for session repositories.
    
    This interface can be implemented by different storage backends
    (in-memory, DynamoDB, etc.) to provide session persistence.
    """
    
    async def save_session(self, session: GameSession) -> None:
        """Save (insert or replace) a session in the repository.
        
        Args:
            session: The session entity to save.
        """
        ...
    
    async def load_session(self, session_id: str) -> Optional[GameSession]:
        """Retrieve a session by ID, or None when it does not exist.
        
        Args:
            session_id: The unique identifier of the session.
        """
        ...
    
    async def get_session(self, session_id: str) -> GameSession:
        """Retrieve a session by ID from the repository.
        
        Args:
            session_id: The unique identifier of the session.
            
        Returns:
            GameSession: The session entity.
            
        Raises:
            ValueError: If the session is not found.
        """
        ...
    
    async def delete_session(self, session_id: str) -> None:
        """Delete a session from the repository.
        
        Args:
            session_id: The unique identifier of the session to delete.
            
        Raises:
            ValueError: If the session is not found.
        """
        ...
