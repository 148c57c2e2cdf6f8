"""Session entities for the party game."""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .content import Challenge, ContentItem, ContentKind, ContentType, Deck

MAX_ANSWER_LENGTH = 2000


class SessionStatus(str, Enum):
    """Session status enum."""
    ACTIVE = "active"
    ENDED = "ended"


class ReflectionAnswer(BaseModel):
    """What the group said during a reflection pause."""

    pause_id: int
    answer: str = Field(max_length=MAX_ANSWER_LENGTH)
    answered_at: datetime = Field(default_factory=datetime.utcnow)


class GameSession(BaseModel):
    """One play-through's mutable state."""

    id: UUID = Field(default_factory=uuid.uuid4)
    status: SessionStatus = SessionStatus.ACTIVE

    level: int = Field(default=1, ge=1, le=3)
    intensity: int = Field(default=1, ge=1, le=3)
    group_mode: bool = False
    deck: Optional[Deck] = None
    is_drinking_game: bool = False

    content_type: Optional[ContentType] = None
    current_item: Optional[ContentItem] = None

    used_content_ids: dict[ContentKind, set[int]] = Field(default_factory=dict)
    last_used_ids: dict[ContentKind, int] = Field(default_factory=dict)

    prompts_answered: int = Field(default=0, ge=0)
    total_time_spent: int = Field(default=0, ge=0, description="Seconds played")
    full_house_moments: int = Field(default=0, ge=0)

    # Cadence bookkeeping for interleaved breaks
    prompts_since_break: int = Field(default=0, ge=0)
    last_break_type: Optional[ContentType] = None

    unlocked_pack_ids: set[int] = Field(default_factory=set)
    dismissed_pack_ids: set[int] = Field(default_factory=set)

    reflection_answers: list[ReflectionAnswer] = Field(default_factory=list)
    custom_challenges: list[Challenge] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_activity_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_ended(self) -> bool:
        return self.status == SessionStatus.ENDED

    def touch(self) -> None:
        self.last_activity_at = datetime.utcnow()

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        json_schema_extra = {
            "example": {
                "id": "6f1c2c1e-2a52-4a4e-9d53-8f3d3e0c1a77",
                "status": "active",
                "level": 1,
                "intensity": 1,
                "group_mode": False,
                "deck": "friends",
                "is_drinking_game": False,
                "content_type": "prompt",
                "prompts_answered": 3,
                "unlocked_pack_ids": [],
            }
        }
