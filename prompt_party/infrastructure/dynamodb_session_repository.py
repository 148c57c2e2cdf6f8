"""DynamoDB implementation of Session Repository."""

from typing import Any, Dict, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from ..domain.entities.game_session import GameSession
from ..domain.errors import RepositoryUnavailable
from ..domain.interfaces.session_repository import SessionRepository


class DynamoDBSessionRepository(SessionRepository):
    """DynamoDB repository for managing session persistence.

    The full session is stored as a JSON document in a ``state`` attribute,
    next to a few top-level attributes useful for querying.
    """

    def __init__(self, table_name: str, region_name: str = "us-east-1"):
        """Initialize the DynamoDB session repository.

        Args:
            table_name: The name of the DynamoDB table.
            region_name: AWS region name (default: us-east-1).
        """
        self.table_name = table_name
        self.region_name = region_name
        self._session = aioboto3.Session()

    async def save_session(self, session: GameSession) -> None:
        """Save a session to DynamoDB.

        Args:
            session: The session entity to save.

        Raises:
            RepositoryUnavailable: If the save operation fails.
        """
        try:
            async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
                table = await dynamodb.Table(self.table_name)
                await table.put_item(Item=self._session_to_item(session))
        except (BotoCoreError, ClientError) as e:
            raise RepositoryUnavailable(f"Could not save session {session.id}: {e}") from e

    async def load_session(self, session_id: str) -> Optional[GameSession]:
        """Retrieve a session by ID from DynamoDB.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            The session entity, or None if it does not exist.
        """
        try:
            async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
                table = await dynamodb.Table(self.table_name)
                response = await table.get_item(Key={"id": session_id})
        except (BotoCoreError, ClientError) as e:
            raise RepositoryUnavailable(f"Could not load session {session_id}: {e}") from e

        if "Item" not in response:
            return None
        return self._item_to_session(response["Item"])

    async def get_session(self, session_id: str) -> GameSession:
        """Retrieve a session by ID from DynamoDB.

        Raises:
            ValueError: If the session is not found.
        """
        session = await self.load_session(session_id)
        if session is None:
            raise ValueError(f"Session with id {session_id} not found")
        return session

    async def delete_session(self, session_id: str) -> None:
        """Delete a session from DynamoDB.

        Args:
            session_id: The unique identifier of the session to delete.

        Raises:
            ValueError: If the session is not found.
            RepositoryUnavailable: If the delete operation fails.
        """
        try:
            async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
                table = await dynamodb.Table(self.table_name)
                response = await table.delete_item(Key={"id": session_id}, ReturnValues="ALL_OLD")
        except (BotoCoreError, ClientError) as e:
            raise RepositoryUnavailable(f"Could not delete session {session_id}: {e}") from e

        if "Attributes" not in response:
            raise ValueError(f"Session with id {session_id} not found")

    def _session_to_item(self, session: GameSession) -> Dict[str, Any]:
        """Convert a GameSession entity to a DynamoDB item.

        Args:
            session: The session entity.

        Returns:
            Dict: The DynamoDB item representation.
        """
        return {
            "id": str(session.id),
            "status": session.status.value,
            "prompts_answered": session.prompts_answered,
            "last_activity_at": session.last_activity_at.isoformat(),
            "state": session.model_dump_json(),
        }

    def _item_to_session(self, item: Dict[str, Any]) -> GameSession:
        """Convert a DynamoDB item to a GameSession entity.

        Args:
            item: The DynamoDB item.

        Returns:
            GameSession: The session entity.
        """
        return GameSession.model_validate_json(item["state"])
