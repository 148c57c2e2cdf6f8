"""Content entities for the party game."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Level(int, Enum):
    """Prompt depth tiers."""

    ICEBREAKER = 1
    GETTING_TO_KNOW_YOU = 2
    DEEPER_DIVE = 3

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]


class Intensity(int, Enum):
    """Mildness/wildness tiers, shared by prompts and challenges."""

    MILD = 1
    MEDIUM = 2
    WILD = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


_LEVEL_LABELS = {
    Level.ICEBREAKER: "Icebreaker",
    Level.GETTING_TO_KNOW_YOU: "Getting to Know You",
    Level.DEEPER_DIVE: "Deeper Dive",
}


class Deck(str, Enum):
    """How well the group knows each other; picks deck-specific breaks."""

    STRANGERS = "strangers"
    FRIENDS = "friends"
    BFFS = "bffs"

    @property
    def label(self) -> str:
        return _DECK_LABELS[self]


_DECK_LABELS = {
    Deck.STRANGERS: "Strangers",
    Deck.FRIENDS: "Friends",
    Deck.BFFS: "BFFs",
}


def get_level_name(level: int) -> str:
    """Display name of a level, falling back to the first tier."""
    try:
        return Level(level).label
    except ValueError:
        return Level.ICEBREAKER.label


def get_intensity_name(intensity: int) -> str:
    """Display name of an intensity, falling back to Mild."""
    try:
        return Intensity(intensity).label
    except ValueError:
        return Intensity.MILD.label


class ContentKind(str, Enum):
    """Kinds of content items held by the content repository."""

    PROMPT = "prompt"
    CHALLENGE = "challenge"
    ACTIVITY_BREAK = "activity_break"
    REFLECTION_PAUSE = "reflection_pause"


class ContentType(str, Enum):
    """What the game screen is showing (the session's content cursor)."""

    PROMPT = "prompt"
    ACTIVITY_BREAK = "activity-break"
    REFLECTION_PAUSE = "reflection-pause"

    @property
    def kind(self) -> ContentKind:
        return _TYPE_TO_KIND[self]


_TYPE_TO_KIND = {
    ContentType.PROMPT: ContentKind.PROMPT,
    ContentType.ACTIVITY_BREAK: ContentKind.ACTIVITY_BREAK,
    ContentType.REFLECTION_PAUSE: ContentKind.REFLECTION_PAUSE,
}


class Prompt(BaseModel):
    """A conversation prompt."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prompt"] = "prompt"
    id: int
    text: str = Field(min_length=1)
    level: int = Field(ge=1, le=3)
    intensity: int = Field(ge=1, le=3)
    category: str = Field(default="Icebreaker")
    is_group: bool = False
    pack_id: Optional[int] = Field(None, description="Pack the prompt ships in, if any")


class Challenge(BaseModel):
    """A truth-or-dare style challenge."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["challenge"] = "challenge"
    id: int
    type: str = Field(default="Truth or Dare")
    text: str = Field(min_length=1)
    intensity: int = Field(ge=1, le=3)
    is_custom: bool = Field(False, description="Written by the players during this game")


class ActivityBreak(BaseModel):
    """A short group activity interleaved between prompts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["activity_break"] = "activity_break"
    id: int
    title: str = Field(min_length=1)
    description: str
    duration: int = Field(default=60, ge=0, description="Duration in seconds")
    deck: Optional[Deck] = Field(None, description="Deck the break is written for; None suits every deck")


class ReflectionPause(BaseModel):
    """A quiet reflection moment interleaved between prompts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reflection_pause"] = "reflection_pause"
    id: int
    title: str = Field(min_length=1)
    description: str
    duration: int = Field(default=120, ge=0, description="Duration in seconds")
    deck: Optional[Deck] = None


ContentItem = Annotated[
    Union[Prompt, Challenge, ActivityBreak, ReflectionPause],
    Field(discriminator="kind"),
]


class UnlockMetric(str, Enum):
    """Session counter a pack's unlock threshold is measured against."""

    PROMPTS_ANSWERED = "prompts_answered"
    TOTAL_TIME_SPENT = "total_time_spent"
    FULL_HOUSE_MOMENTS = "full_house_moments"


class PromptPack(BaseModel):
    """A named bundle of prompts unlocked once a session counter crosses a threshold."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    unlock_metric: UnlockMetric = UnlockMetric.PROMPTS_ANSWERED
    unlock_threshold: int = Field(default=10, ge=0)
    prompt_ids: frozenset[int] = Field(default_factory=frozenset)
