"""Static backup content used when the content store is empty or unreachable."""

from typing import Iterable

from ..domain.entities.content import (
    ActivityBreak,
    Challenge,
    Prompt,
    ReflectionPause,
    get_level_name,
)
from .local_content_repository import LocalContentRepository


class StaticContentRepository(LocalContentRepository):
    """Small built-in content set that never needs a backend.

    Matching is looser than the real store: prompts of the requested level at
    or below the requested intensity, then any prompt of the level, then any
    prompt at all. Ids are negative so they never collide with store ids.
    """

    def __init__(self):
        super().__init__(
            prompts=FALLBACK_PROMPTS,
            challenges=FALLBACK_CHALLENGES,
            activity_breaks=FALLBACK_ACTIVITY_BREAKS,
            reflection_pauses=FALLBACK_REFLECTION_PAUSES,
        )

    def get_prompts(
        self, level: int, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Prompt]:
        excluded = set(exclude_ids)
        candidates = [p for p in self._prompts.values() if p.id not in excluded]

        same_level = [p for p in candidates if p.level == level]
        milder = [p for p in same_level if p.intensity <= intensity]
        return milder or same_level or candidates

    def get_challenges(
        self, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Challenge]:
        excluded = set(exclude_ids)
        candidates = [c for c in self._challenges.values() if c.id not in excluded]
        return [c for c in candidates if c.intensity <= intensity] or candidates


def _prompt(prompt_id: int, level: int, intensity: int, text: str) -> Prompt:
    return Prompt(
        id=prompt_id,
        level=level,
        intensity=intensity,
        category=get_level_name(level),
        text=text,
    )


FALLBACK_PROMPTS = [
    _prompt(-1, 1, 1, "If you could have dinner with any historical figure, who would it be and why?"),
    _prompt(-2, 1, 1, "What's one skill you wish you had learned earlier in life?"),
    _prompt(-3, 1, 1, "If you could travel anywhere in the world right now, where would you go and why?"),
    _prompt(-4, 1, 2, "What's a popular opinion you strongly disagree with?"),
    _prompt(-5, 1, 2, "What's the best piece of advice you've ever received?"),
    _prompt(-6, 1, 3, "What's one thing that's on your bucket list that might surprise people?"),
    _prompt(-7, 2, 1, "What's something you're proud of that you don't often get to talk about?"),
    _prompt(-8, 2, 1, "What's a small, everyday thing that brings you joy?"),
    _prompt(-9, 2, 2, "What's a belief or value you hold that has changed significantly over time?"),
    _prompt(-10, 2, 3, "What's something that deeply moved you or changed your perspective?"),
    _prompt(-11, 3, 1, "What values or principles do you try to live by?"),
    _prompt(-12, 3, 2, "What's something you're passionate about that you wish more people understood?"),
    _prompt(-13, 3, 3, "What's a moment in your life where you felt truly vulnerable?"),
]

FALLBACK_CHALLENGES = [
    Challenge(id=-1, type="Truth or Dare", intensity=1,
              text="TRUTH: Share a funny childhood memory OR DARE: Do your best impression of someone in the group"),
    Challenge(id=-2, type="Truth or Dare", intensity=2,
              text="TRUTH: What's the most embarrassing thing you've done in public? OR DARE: Let someone post anything they want to your social media"),
    Challenge(id=-3, type="Truth or Dare", intensity=3,
              text="TRUTH: What's something you've never told anyone in this room? OR DARE: Let the group look through your phone for 1 minute"),
    Challenge(id=-4, type="Act It Out", intensity=1,
              text="Act out your favorite movie scene and have others guess what it is"),
    Challenge(id=-5, type="Act It Out", intensity=2,
              text="Do your best dance move without music"),
    Challenge(id=-6, type="Act It Out", intensity=3,
              text="Act out your most embarrassing moment without speaking"),
]

FALLBACK_ACTIVITY_BREAKS = [
    ActivityBreak(id=-1, title="Quick Stretch", duration=60,
                  description="Everyone stand up, reach for the ceiling and shake it out."),
    ActivityBreak(id=-2, title="High Five Round", duration=30,
                  description="High five everyone in the group before the next prompt."),
]

FALLBACK_REFLECTION_PAUSES = [
    ReflectionPause(id=-1, title="Take a Breath", duration=60,
                    description="Close your eyes for a moment and notice how the conversation feels."),
    ReflectionPause(id=-2, title="Look Back", duration=120,
                    description="Which answer tonight surprised you the most?"),
]
