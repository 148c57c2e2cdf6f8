"""Content selection for the party game.

The selector picks the next item to show a session: it applies the break
cadence (activity breaks and reflection pauses interleaved with prompts),
builds the eligible pool from the content repository minus the session's
used ids, and falls back to repeating content once a pool is exhausted.
Breaks follow the session's deck, and challenges include the ones the
players wrote themselves.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from ..entities.content import (
    ActivityBreak,
    Challenge,
    ContentKind,
    ContentType,
    Deck,
    Prompt,
    PromptPack,
    ReflectionPause,
)
from ..entities.game_session import GameSession
from ..errors import NoContentAvailable
from ..interfaces.content_repository import ContentRepository
from .usage_tracker import UsageTracker

logger = logging.getLogger(__name__)

TIERS = (1, 2, 3)

SelectableItem = Union[Prompt, Challenge, ActivityBreak, ReflectionPause]


@dataclass(frozen=True)
class Selection:
    """Outcome of a successful selection."""

    item: SelectableItem
    content_type: Optional[ContentType]
    pool_was_reset: bool = False
    from_fallback: bool = False


def custom_challenges_for(session: GameSession, exclude_ids: Iterable[int] = ()) -> list[Challenge]:
    """Player-written challenges of the session that match its intensity."""
    excluded = set(exclude_ids)
    return [
        c for c in session.custom_challenges
        if c.intensity == session.intensity and c.id not in excluded
    ]


class CadencePolicy:
    """Decides whether the next delivery is a prompt or a break.

    After every ``every`` prompts since the last break one break is inserted,
    alternating activity break and reflection pause, activity break first.
    ``every=0`` disables breaks entirely.
    """

    def __init__(self, every: int = 4):
        if every < 0:
            raise ValueError(f"Break cadence must be >= 0, got {every}")
        self.every = every

    @property
    def enabled(self) -> bool:
        return self.every > 0

    def next_content_type(self, session: GameSession) -> ContentType:
        if not self.enabled or session.prompts_since_break < self.every:
            return ContentType.PROMPT
        if session.last_break_type == ContentType.ACTIVITY_BREAK:
            return ContentType.REFLECTION_PAUSE
        return ContentType.ACTIVITY_BREAK


class ContentSelector:
    """Chooses the single next content item for a session."""

    def __init__(
        self,
        repository: ContentRepository,
        cadence: Optional[CadencePolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        self.repository = repository
        self.cadence = cadence or CadencePolicy()
        self.rng = rng or random.Random()

    def next_content_type(self, session: GameSession) -> ContentType:
        return self.cadence.next_content_type(session)

    def select(
        self,
        session: GameSession,
        tracker: UsageTracker,
        content_type: ContentType,
        packs: Sequence[PromptPack] = (),
    ) -> Selection:
        """Pick an unused item of the given content type and mark it used.

        Raises:
            NoContentAvailable: If the repository has no item at all for the
                session's current filter.
            RepositoryUnavailable: If the repository cannot be reached.
        """
        kind = content_type.kind
        locked = self._locked_prompt_ids(session, packs) if kind == ContentKind.PROMPT else frozenset()

        def fetch(exclude_ids: Iterable[int]) -> list:
            return self._fetch(session, kind, exclude_ids, locked)

        item, was_reset = self._pick(session, tracker, kind, fetch)
        return Selection(item=item, content_type=content_type, pool_was_reset=was_reset)

    def select_challenge(self, session: GameSession, tracker: UsageTracker) -> Selection:
        """Pick an unused challenge for the session's intensity."""

        def fetch(exclude_ids: Iterable[int]) -> list:
            return self._fetch(session, ContentKind.CHALLENGE, exclude_ids, frozenset())

        item, was_reset = self._pick(session, tracker, ContentKind.CHALLENGE, fetch)
        return Selection(item=item, content_type=None, pool_was_reset=was_reset)

    def select_any_prompt(
        self,
        session: GameSession,
        tracker: UsageTracker,
        packs: Sequence[PromptPack] = (),
    ) -> Selection:
        """Pick an unused prompt from any level and intensity.

        Tiers are tried in random order; the first one with an unused,
        unlocked prompt wins.

        Raises:
            NoContentAvailable: If no tier has an unused prompt.
        """
        locked = self._locked_prompt_ids(session, packs)
        used = tracker.used_ids(ContentKind.PROMPT)
        tiers = [(level, intensity) for level in TIERS for intensity in TIERS]
        self.rng.shuffle(tiers)

        for level, intensity in tiers:
            prompts = self.repository.get_prompts(level, intensity, used)
            pool = [
                p for p in prompts
                if p.id not in used and self._is_unlocked(p, session, locked)
            ]
            if pool:
                item = self.rng.choice(pool)
                tracker.mark_used(ContentKind.PROMPT, item.id)
                return Selection(item=item, content_type=ContentType.PROMPT)

        raise NoContentAvailable(ContentKind.PROMPT)

    def _pick(self, session, tracker, kind, fetch):
        used = tracker.used_ids(kind)
        pool = [item for item in fetch(used) if item.id not in used]
        was_reset = False

        if not pool:
            pool = fetch(())
            if not pool:
                raise NoContentAvailable(
                    kind,
                    level=session.level if kind == ContentKind.PROMPT else None,
                    intensity=session.intensity if kind in (ContentKind.PROMPT, ContentKind.CHALLENGE) else None,
                )
            logger.info(
                f"Session {session.id}: all {len(pool)} {kind.value} items used, "
                f"allowing repeats"
            )
            tracker.reset(kind)
            was_reset = True

            last_id = tracker.last_used(kind)
            if len(pool) > 1 and any(item.id == last_id for item in pool):
                # The item just shown sits out the first pick of the new cycle
                pool = [item for item in pool if item.id != last_id]
                tracker.mark_used(kind, last_id)

        if kind == ContentKind.PROMPT:
            pool = self._prefer_group_mode(pool, session.group_mode)

        item = self.rng.choice(pool)
        tracker.mark_used(kind, item.id)
        logger.debug(f"Session {session.id}: selected {kind.value} {item.id} from {len(pool)}")
        return item, was_reset

    def _fetch(
        self,
        session: GameSession,
        kind: ContentKind,
        exclude_ids: Iterable[int],
        locked_prompt_ids: frozenset[int],
    ) -> list:
        exclude_ids = list(exclude_ids)
        if kind == ContentKind.PROMPT:
            prompts = self.repository.get_prompts(session.level, session.intensity, exclude_ids)
            return [p for p in prompts if self._is_unlocked(p, session, locked_prompt_ids)]

        excluded = set(exclude_ids)
        if kind == ContentKind.CHALLENGE:
            challenges = self.repository.get_challenges(session.intensity, exclude_ids)
            return challenges + custom_challenges_for(session, excluded)

        if kind == ContentKind.ACTIVITY_BREAK:
            items = self.repository.get_activity_breaks()
        else:
            items = self.repository.get_reflection_pauses()
        return self._for_deck([item for item in items if item.id not in excluded], session.deck)

    @staticmethod
    def _is_unlocked(prompt: Prompt, session: GameSession, locked_prompt_ids: frozenset[int]) -> bool:
        if prompt.id in locked_prompt_ids:
            return False
        return prompt.pack_id is None or prompt.pack_id in session.unlocked_pack_ids

    @staticmethod
    def _locked_prompt_ids(session: GameSession, packs: Sequence[PromptPack]) -> frozenset[int]:
        locked: set[int] = set()
        for pack in packs:
            if pack.id not in session.unlocked_pack_ids:
                locked.update(pack.prompt_ids)
        return frozenset(locked)

    @staticmethod
    def _for_deck(items: list, deck: Optional[Deck]) -> list:
        # Deck-specific breaks only show for their deck; shared breaks cover decks without any
        if deck is not None:
            matching = [item for item in items if item.deck == deck]
            if matching:
                return matching
        return [item for item in items if item.deck is None]

    @staticmethod
    def _prefer_group_mode(pool: list[Prompt], group_mode: bool) -> list[Prompt]:
        # Mixed pools lean towards prompts written for the current mode
        matching = [p for p in pool if p.is_group == group_mode]
        return matching or pool
