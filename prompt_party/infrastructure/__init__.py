"""Infrastructure layer components."""

from .dynamodb_content_repository import DynamoDBContentRepository
from .dynamodb_session_repository import DynamoDBSessionRepository
from .local_content_repository import LocalContentRepository
from .local_session_repository import LocalSessionRepository
from .static_content_repository import StaticContentRepository

__all__ = [
    "DynamoDBContentRepository",
    "DynamoDBSessionRepository",
    "LocalContentRepository",
    "LocalSessionRepository",
    "StaticContentRepository",
]
