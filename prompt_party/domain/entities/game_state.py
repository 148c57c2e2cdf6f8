"""Game state snapshot handed to the presentation layer."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .content import (
    Challenge,
    ContentItem,
    ContentType,
    Deck,
    PromptPack,
    get_intensity_name,
    get_level_name,
)
from .game_session import GameSession, ReflectionAnswer, SessionStatus


class GameCounters(BaseModel):
    """Monotonic session counters."""

    prompts_answered: int = 0
    total_time_spent: int = 0
    full_house_moments: int = 0


class GameState(BaseModel):
    """Read-only view of a session after a controller call."""

    session_id: UUID
    status: SessionStatus
    level: int
    level_name: str
    intensity: int
    intensity_name: str
    group_mode: bool
    deck: Optional[Deck] = None
    is_drinking_game: bool = False
    content_type: Optional[ContentType] = None
    current_item: Optional[ContentItem] = None
    counters: GameCounters = Field(default_factory=GameCounters)
    unlocked_pack_ids: list[int] = Field(default_factory=list)
    pending_unlock_pack: Optional[PromptPack] = None
    from_fallback: bool = Field(
        default=False,
        description="True when the current item came from the static backup content",
    )
    pool_was_reset: bool = Field(
        default=False,
        description="True when the last delivery started a fresh cycle through its pool",
    )
    custom_challenges: list[Challenge] = Field(default_factory=list)
    reflection_answers: list[ReflectionAnswer] = Field(default_factory=list)

    @classmethod
    def from_session(
        cls,
        session: GameSession,
        pending_unlock_pack: Optional[PromptPack] = None,
        from_fallback: bool = False,
        pool_was_reset: bool = False,
    ) -> "GameState":
        return cls(
            session_id=session.id,
            status=session.status,
            level=session.level,
            level_name=get_level_name(session.level),
            intensity=session.intensity,
            intensity_name=get_intensity_name(session.intensity),
            group_mode=session.group_mode,
            deck=session.deck,
            is_drinking_game=session.is_drinking_game,
            content_type=session.content_type,
            current_item=session.current_item,
            counters=GameCounters(
                prompts_answered=session.prompts_answered,
                total_time_spent=session.total_time_spent,
                full_house_moments=session.full_house_moments,
            ),
            unlocked_pack_ids=sorted(session.unlocked_pack_ids),
            pending_unlock_pack=pending_unlock_pack,
            from_fallback=from_fallback,
            pool_was_reset=pool_was_reset,
            custom_challenges=list(session.custom_challenges),
            reflection_answers=list(session.reflection_answers),
        )
