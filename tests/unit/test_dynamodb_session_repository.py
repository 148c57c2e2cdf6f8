"""Tests for DynamoDB session repository."""

import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch
import uuid

import pytest
from botocore.exceptions import ClientError

from prompt_party.domain.entities import (
    Challenge,
    ContentKind,
    ContentType,
    Deck,
    GameSession,
    Prompt,
    ReflectionAnswer,
    SessionStatus,
)
from prompt_party.domain.errors import RepositoryUnavailable
from prompt_party.infrastructure.dynamodb_session_repository import DynamoDBSessionRepository


@pytest.fixture
def mock_dynamodb_table():
    """Create a mock DynamoDB table."""
    mock_table = AsyncMock()
    return mock_table


@pytest.fixture
def mock_dynamodb_resource(mock_dynamodb_table):
    """Create a mock DynamoDB resource."""
    mock_resource = MagicMock()
    mock_resource.Table = AsyncMock(return_value=mock_dynamodb_table)
    return mock_resource


@pytest.fixture
def mock_aioboto3_session(mock_dynamodb_resource):
    """Create a mock aioboto3 session."""
    with patch("prompt_party.infrastructure.dynamodb_session_repository.aioboto3.Session") as mock_session_class:
        mock_session_instance = MagicMock()
        mock_session_class.return_value = mock_session_instance

        # Setup async context manager for resource
        mock_session_instance.resource.return_value.__aenter__ = AsyncMock(return_value=mock_dynamodb_resource)
        mock_session_instance.resource.return_value.__aexit__ = AsyncMock(return_value=None)

        yield mock_session_instance


@pytest.fixture
def repository(mock_aioboto3_session):
    """Create a DynamoDB session repository instance."""
    return DynamoDBSessionRepository(table_name="test-sessions", region_name="us-east-1")


@pytest.fixture
def sample_session():
    """Create a sample session entity."""
    test_uuid = uuid.UUID('12345678-1234-5678-1234-567812345678')
    return GameSession(
        id=test_uuid,
        status=SessionStatus.ACTIVE,
        level=2,
        intensity=1,
        content_type=ContentType.PROMPT,
        current_item=Prompt(id=8, text="Who makes you laugh?", level=2, intensity=1),
        used_content_ids={ContentKind.PROMPT: {8}},
        prompts_answered=3,
        unlocked_pack_ids={1},
        created_at=datetime(2026, 1, 13, 10, 0, 0),
        last_activity_at=datetime(2026, 1, 13, 10, 30, 0),
    )


@pytest.fixture
def sample_dynamodb_item(sample_session):
    """Create a sample DynamoDB item."""
    return {
        "id": "12345678-1234-5678-1234-567812345678",
        "status": "active",
        "prompts_answered": 3,
        "last_activity_at": "2026-01-13T10:30:00",
        "state": sample_session.model_dump_json(),
    }


def client_error(operation):
    return ClientError(
        {"Error": {"Code": "ResourceNotFoundException", "Message": "Table not found"}},
        operation,
    )


class TestDynamoDBSessionRepository:
    """Test cases for DynamoDBSessionRepository."""

    @pytest.mark.asyncio
    async def test_save_session(self, repository, mock_dynamodb_table, sample_session, sample_dynamodb_item):
        """Test saving a session."""
        await repository.save_session(sample_session)

        mock_dynamodb_table.put_item.assert_called_once()
        item = mock_dynamodb_table.put_item.call_args.kwargs["Item"]
        assert item["id"] == sample_dynamodb_item["id"]
        assert item["status"] == "active"
        assert item["prompts_answered"] == 3
        assert item["last_activity_at"] == "2026-01-13T10:30:00"
        assert json.loads(item["state"])["level"] == 2

    @pytest.mark.asyncio
    async def test_get_session_success(self, repository, mock_dynamodb_table, sample_session, sample_dynamodb_item):
        """Test successful session retrieval."""
        mock_dynamodb_table.get_item.return_value = {"Item": sample_dynamodb_item}

        result = await repository.get_session("12345678-1234-5678-1234-567812345678")

        assert result.id == sample_session.id
        assert result.level == 2
        assert result.current_item == sample_session.current_item
        assert result.used_content_ids == {ContentKind.PROMPT: {8}}
        assert result.unlocked_pack_ids == {1}
        mock_dynamodb_table.get_item.assert_called_once_with(
            Key={"id": "12345678-1234-5678-1234-567812345678"}
        )

    @pytest.mark.asyncio
    async def test_party_options_round_trip(self, repository, mock_dynamodb_table, sample_session):
        """Deck, answers, custom challenges and last used ids survive the JSON state."""
        sample_session.deck = Deck.BFFS
        sample_session.is_drinking_game = True
        sample_session.last_used_ids = {ContentKind.PROMPT: 8}
        sample_session.reflection_answers.append(ReflectionAnswer(pause_id=2, answer="Grateful"))
        sample_session.custom_challenges.append(
            Challenge(id=-1000, text="Sing", intensity=1, is_custom=True)
        )
        await repository.save_session(sample_session)
        item = mock_dynamodb_table.put_item.call_args.kwargs["Item"]
        mock_dynamodb_table.get_item.return_value = {"Item": item}

        result = await repository.load_session(str(sample_session.id))

        assert result == sample_session

    @pytest.mark.asyncio
    async def test_get_session_not_found(self, repository, mock_dynamodb_table):
        """Test getting a session that doesn't exist."""
        mock_dynamodb_table.get_item.return_value = {}

        with pytest.raises(ValueError, match="Session with id missing not found"):
            await repository.get_session("missing")

    @pytest.mark.asyncio
    async def test_load_session_not_found(self, repository, mock_dynamodb_table):
        mock_dynamodb_table.get_item.return_value = {}

        assert await repository.load_session("missing") is None

    @pytest.mark.asyncio
    async def test_delete_session(self, repository, mock_dynamodb_table):
        """Test deleting a session."""
        mock_dynamodb_table.delete_item.return_value = {
            "Attributes": {"id": "12345678-1234-5678-1234-567812345678"}
        }

        await repository.delete_session("12345678-1234-5678-1234-567812345678")

        mock_dynamodb_table.delete_item.assert_called_once_with(
            Key={"id": "12345678-1234-5678-1234-567812345678"}, ReturnValues="ALL_OLD"
        )

    @pytest.mark.asyncio
    async def test_delete_session_not_found(self, repository, mock_dynamodb_table):
        """Test deleting a session that doesn't exist."""
        mock_dynamodb_table.delete_item.return_value = {}

        with pytest.raises(ValueError, match="Session with id missing not found"):
            await repository.delete_session("missing")

    @pytest.mark.asyncio
    async def test_delete_session_client_error(self, repository, mock_dynamodb_table):
        mock_dynamodb_table.delete_item.side_effect = client_error("DeleteItem")

        with pytest.raises(RepositoryUnavailable, match="Could not delete session"):
            await repository.delete_session("missing")

    @pytest.mark.asyncio
    async def test_save_session_client_error(self, repository, mock_dynamodb_table, sample_session):
        """Test that botocore errors surface as RepositoryUnavailable."""
        mock_dynamodb_table.put_item.side_effect = client_error("PutItem")

        with pytest.raises(RepositoryUnavailable, match="Could not save session"):
            await repository.save_session(sample_session)

    @pytest.mark.asyncio
    async def test_load_session_client_error(self, repository, mock_dynamodb_table):
        mock_dynamodb_table.get_item.side_effect = client_error("GetItem")

        with pytest.raises(RepositoryUnavailable):
            await repository.load_session("12345678-1234-5678-1234-567812345678")

    def test_repository_uses_configured_region(self, repository, mock_aioboto3_session):
        assert repository.table_name == "test-sessions"
        assert repository.region_name == "us-east-1"
