"""Local in-memory implementation of ContentRepository."""

from typing import Dict, Iterable

from ..domain.entities.content import (
    ActivityBreak,
    Challenge,
    Deck,
    Prompt,
    PromptPack,
    ReflectionPause,
)
from ..domain.interfaces.content_repository import ContentRepository


class LocalContentRepository(ContentRepository):
    """Local implementation of the ContentRepository protocol.

    Stores content in dictionaries keyed by id. Useful for testing and
    development purposes; ``with_sample_content`` gives a playable deck.
    """

    def __init__(
        self,
        prompts: Iterable[Prompt] = (),
        challenges: Iterable[Challenge] = (),
        activity_breaks: Iterable[ActivityBreak] = (),
        reflection_pauses: Iterable[ReflectionPause] = (),
        packs: Iterable[PromptPack] = (),
    ):
        self._prompts: Dict[int, Prompt] = {p.id: p for p in prompts}
        self._challenges: Dict[int, Challenge] = {c.id: c for c in challenges}
        self._activity_breaks: Dict[int, ActivityBreak] = {a.id: a for a in activity_breaks}
        self._reflection_pauses: Dict[int, ReflectionPause] = {r.id: r for r in reflection_pauses}
        self._packs: Dict[int, PromptPack] = {p.id: p for p in packs}

    @classmethod
    def with_sample_content(cls) -> "LocalContentRepository":
        """Create a repository pre-populated with a small playable deck."""
        return cls(
            prompts=SAMPLE_PROMPTS,
            challenges=SAMPLE_CHALLENGES,
            activity_breaks=SAMPLE_ACTIVITY_BREAKS,
            reflection_pauses=SAMPLE_REFLECTION_PAUSES,
            packs=SAMPLE_PACKS,
        )

    def get_prompts(
        self, level: int, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Prompt]:
        """Retrieve prompts matching a level and intensity.

        Args:
            level: Prompt depth tier (1-3).
            intensity: Prompt intensity tier (1-3).
            exclude_ids: Prompt ids to leave out.

        Returns:
            list[Prompt]: Matching prompts in insertion order.
        """
        excluded = set(exclude_ids)
        return [
            p for p in self._prompts.values()
            if p.level == level and p.intensity == intensity and p.id not in excluded
        ]

    def get_challenges(
        self, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Challenge]:
        excluded = set(exclude_ids)
        return [
            c for c in self._challenges.values()
            if c.intensity == intensity and c.id not in excluded
        ]

    def get_activity_breaks(self) -> list[ActivityBreak]:
        return list(self._activity_breaks.values())

    def get_reflection_pauses(self) -> list[ReflectionPause]:
        return list(self._reflection_pauses.values())

    def get_packs(self) -> list[PromptPack]:
        return list(self._packs.values())


SAMPLE_PROMPTS = [
    Prompt(id=1, level=1, intensity=1, category="Icebreaker",
           text="What's the best meal you've had this year?"),
    Prompt(id=2, level=1, intensity=1, category="Icebreaker",
           text="Which app on your phone do you open first every morning?"),
    Prompt(id=3, level=1, intensity=1, category="Icebreaker", is_group=True,
           text="Everyone name a song that always gets you dancing. Who picked the oldest one?"),
    Prompt(id=4, level=1, intensity=2, category="Icebreaker",
           text="What's a hobby you picked up and dropped within a month?"),
    Prompt(id=5, level=1, intensity=2, category="Icebreaker",
           text="What's the most overrated thing everyone seems to love?"),
    Prompt(id=6, level=1, intensity=3, category="Icebreaker",
           text="What's the boldest thing you've done on a dare?"),
    Prompt(id=7, level=1, intensity=3, category="Icebreaker",
           text="What's a rule you broke as a teenager that your parents still don't know about?"),
    Prompt(id=8, level=2, intensity=1, category="Getting to Know You",
           text="Who in your life makes you laugh the most, and why?"),
    Prompt(id=9, level=2, intensity=1, category="Getting to Know You",
           text="What does a perfect lazy Sunday look like for you?"),
    Prompt(id=10, level=2, intensity=2, category="Getting to Know You",
           text="What's a compliment you received that stuck with you?"),
    Prompt(id=11, level=2, intensity=2, category="Getting to Know You", is_group=True,
           text="Go around the group: what first impression did you have of the person to your left?"),
    Prompt(id=12, level=2, intensity=3, category="Getting to Know You",
           text="What's something you pretend to like but secretly can't stand?"),
    Prompt(id=13, level=3, intensity=1, category="Deeper Dive",
           text="What's a lesson you had to learn more than once?"),
    Prompt(id=14, level=3, intensity=1, category="Deeper Dive",
           text="When do you feel most like yourself?"),
    Prompt(id=15, level=3, intensity=2, category="Deeper Dive",
           text="What's a fear you've outgrown, and what helped?"),
    Prompt(id=16, level=3, intensity=3, category="Deeper Dive",
           text="What's something you've never forgiven yourself for?"),
    Prompt(id=101, level=1, intensity=2, category="After Hours", pack_id=1,
           text="What's the strangest place you've ever fallen asleep?"),
    Prompt(id=102, level=2, intensity=2, category="After Hours", pack_id=1,
           text="What's the worst date you've ever been on?"),
    Prompt(id=103, level=3, intensity=2, category="After Hours", pack_id=1,
           text="What's a late-night conversation that changed how you see someone?"),
]

SAMPLE_CHALLENGES = [
    Challenge(id=1, type="Truth or Dare", intensity=1,
              text="TRUTH: Share a funny childhood memory OR DARE: Do your best impression of someone in the group"),
    Challenge(id=2, type="Act It Out", intensity=1,
              text="Act out your favorite movie scene and have others guess what it is"),
    Challenge(id=3, type="Truth or Dare", intensity=2,
              text="TRUTH: What's the most embarrassing thing you've done in public? OR DARE: Sing the chorus of the last song you listened to"),
    Challenge(id=4, type="Act It Out", intensity=2,
              text="Do your best dance move without music"),
    Challenge(id=5, type="Truth or Dare", intensity=3,
              text="TRUTH: What's something you've never told anyone in this room? OR DARE: Let the group read your last sent message"),
    Challenge(id=6, type="Act It Out", intensity=3,
              text="Act out your most embarrassing moment without speaking"),
]

SAMPLE_ACTIVITY_BREAKS = [
    ActivityBreak(id=1, title="Stretch It Out", duration=60,
                  description="Everyone stand up and stretch together for one minute."),
    ActivityBreak(id=2, title="Mirror Match", duration=90,
                  description="Pair up and mirror each other's movements without talking."),
    ActivityBreak(id=3, title="Refill Round", duration=120,
                  description="Take two minutes to grab a drink or snack and swap seats."),
    ActivityBreak(id=4, title="Name Game", duration=90, deck=Deck.STRANGERS,
                  description="Go around twice: say your name and one thing you did today."),
    ActivityBreak(id=5, title="Inside Joke Relay", duration=120, deck=Deck.BFFS,
                  description="Retell a shared memory one sentence per person, no repeats."),
]

SAMPLE_REFLECTION_PAUSES = [
    ReflectionPause(id=1, title="Moment of Gratitude", duration=120,
                    description="Think of one thing someone said tonight that you appreciated."),
    ReflectionPause(id=2, title="Something New", duration=120,
                    description="What's one thing you learned about someone in the last few rounds?"),
    ReflectionPause(id=3, title="First Impressions", duration=120, deck=Deck.STRANGERS,
                    description="How has your first impression of someone here changed?"),
]

SAMPLE_PACKS = [
    PromptPack(id=1, name="After Hours", unlock_threshold=10,
               description="Late-night stories for groups who have warmed up.",
               prompt_ids=frozenset({101, 102, 103})),
]
