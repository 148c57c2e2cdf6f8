"""Domain entities for the party game."""

from .content import (
    ActivityBreak,
    Challenge,
    ContentItem,
    ContentKind,
    ContentType,
    Deck,
    Intensity,
    Level,
    Prompt,
    PromptPack,
    ReflectionPause,
    UnlockMetric,
    get_intensity_name,
    get_level_name,
)
from .game_session import GameSession, ReflectionAnswer, SessionStatus
from .game_state import GameCounters, GameState

__all__ = [
    # Content entities
    "ContentItem",
    "ContentKind",
    "ContentType",
    "Prompt",
    "Challenge",
    "ActivityBreak",
    "ReflectionPause",
    "PromptPack",
    "UnlockMetric",
    # Tiers
    "Level",
    "Intensity",
    "Deck",
    "get_level_name",
    "get_intensity_name",
    # Session entities
    "GameSession",
    "SessionStatus",
    "ReflectionAnswer",
    # Snapshot entities
    "GameState",
    "GameCounters",
]
