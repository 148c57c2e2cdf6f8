"""Game controller composing selection, state transitions and unlocks."""

import logging
import random
from typing import Optional

from ..entities.content import Challenge, ContentKind, ContentType, Deck, Prompt, PromptPack
from ..entities.game_session import GameSession
from ..entities.game_state import GameState
from ..errors import (
    InitializationFailed,
    InvalidTransition,
    NoContentAvailable,
    RepositoryUnavailable,
    UnknownPack,
)
from ..interfaces.content_repository import ContentRepository
from .content_selector import CadencePolicy, ContentSelector, Selection, custom_challenges_for
from .session_state_machine import SessionStateMachine
from .unlock_evaluator import UnlockEvaluator
from .usage_tracker import UsageTracker

logger = logging.getLogger(__name__)


class GameController:
    """
    Per-session orchestrator consumed by the presentation layer.

    This controller owns:
    - The session entity and its usage tracker
    - Content selection with static fallback when the store is empty or down
    - Session transitions for player actions
    - The pack unlock offer pending confirmation

    Only ``InitializationFailed`` escapes it; every other failure turns into
    a boolean result or fallback content. Calls made after ``end_game`` are
    ignored.
    """

    def __init__(
        self,
        session: GameSession,
        content_repository: ContentRepository,
        fallback_repository: ContentRepository,
        cadence: Optional[CadencePolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.content_repository = content_repository
        self.fallback_repository = fallback_repository
        self.rng = rng or random.Random()

        self.tracker = UsageTracker(session)
        self.state_machine = SessionStateMachine(session)
        self.selector = ContentSelector(content_repository, cadence, self.rng)
        self.evaluator = UnlockEvaluator()

        self.packs: list[PromptPack] = []
        self.pending_unlock_pack: Optional[PromptPack] = None
        self.from_fallback = False
        self.pool_was_reset = False

        logger.debug(f"GameController created for session {session.id}")

    def initialize(self) -> bool:
        """Load the pack catalog and check the content store is reachable.

        Raises:
            InitializationFailed: If the content repository is unreachable.
        """
        try:
            self.packs = list(self.content_repository.get_packs())
            activity_breaks = self.content_repository.get_activity_breaks()
            reflection_pauses = self.content_repository.get_reflection_pauses()
        except RepositoryUnavailable as e:
            logger.error(f"Content repository unreachable for session {self.session.id}: {e}")
            raise InitializationFailed(str(e)) from e

        logger.info(
            f"Session {self.session.id} initialized: {len(self.packs)} packs, "
            f"{len(activity_breaks)} activity breaks, {len(reflection_pauses)} reflection pauses"
        )
        self._refresh_pending_unlock()
        return True

    def fork(self) -> "GameController":
        """Copy this controller over a deep copy of its session.

        Callers run an action on the fork and keep it only if the action and
        the save that follows both succeed.
        """
        forked = GameController(
            self.session.model_copy(deep=True),
            self.content_repository,
            self.fallback_repository,
            self.selector.cadence,
            self.rng,
        )
        forked.packs = self.packs
        forked.pending_unlock_pack = self.pending_unlock_pack
        forked.from_fallback = self.from_fallback
        forked.pool_was_reset = self.pool_was_reset
        return forked

    def _accepting(self, action: str) -> bool:
        if self.session.is_ended:
            logger.debug(f"Session {self.session.id} has ended, ignoring {action}")
            return False
        return True

    # ===== Content delivery =====

    def get_next_content(self) -> Optional[ContentType]:
        """Deliver the next prompt, activity break or reflection pause.

        Returns:
            The content type now showing, or None if the call was ignored.
        """
        if not self._accepting("get_next_content"):
            return None
        return self._deliver(self.selector.next_content_type(self.session))

    def _deliver(self, content_type: ContentType) -> Optional[ContentType]:
        selection = self._select(content_type)
        if selection is None and content_type != ContentType.PROMPT:
            logger.warning(
                f"Session {self.session.id}: no {content_type.value} content anywhere, "
                f"showing a prompt instead"
            )
            selection = self._select(ContentType.PROMPT)
        if selection is None:
            logger.error(f"Session {self.session.id}: no content to deliver")
            return None

        self._record(selection)
        return selection.content_type

    def _record(self, selection: Selection) -> None:
        self.state_machine.record_delivery(selection)
        if selection.content_type == ContentType.PROMPT:
            self.state_machine.record_prompt_answered()
        self.from_fallback = selection.from_fallback
        self.pool_was_reset = selection.pool_was_reset
        self._refresh_pending_unlock()

    def _select(self, content_type: ContentType) -> Optional[Selection]:
        try:
            return self.selector.select(self.session, self.tracker, content_type, self.packs)
        except (NoContentAvailable, RepositoryUnavailable) as e:
            logger.warning(f"Session {self.session.id}: {e}; using fallback content")
            return self._fallback_selection(content_type)

    def _fallback_selection(self, content_type: ContentType) -> Optional[Selection]:
        # Backup items are not recorded as used; their ids are not store ids
        kind = content_type.kind
        if kind == ContentKind.PROMPT:
            pool = self.fallback_repository.get_prompts(self.session.level, self.session.intensity)
        elif kind == ContentKind.ACTIVITY_BREAK:
            pool = self.fallback_repository.get_activity_breaks()
        else:
            pool = self.fallback_repository.get_reflection_pauses()

        if not pool:
            return None
        return Selection(item=self.rng.choice(pool), content_type=content_type, from_fallback=True)

    def draw_challenge(self) -> Optional[Challenge]:
        """Draw a challenge for the current intensity without moving the cursor."""
        if not self._accepting("draw_challenge"):
            return None
        try:
            return self.selector.select_challenge(self.session, self.tracker).item
        except (NoContentAvailable, RepositoryUnavailable) as e:
            logger.warning(f"Session {self.session.id}: {e}; using fallback challenge")
            pool = list(self.fallback_repository.get_challenges(self.session.intensity))
            pool.extend(custom_challenges_for(self.session))
            return self.rng.choice(pool) if pool else None

    def get_random_prompt(self) -> Optional[Prompt]:
        """Deliver a prompt from any level/intensity and switch the session to its tier."""
        if not self._accepting("get_random_prompt"):
            return None
        try:
            selection = self.selector.select_any_prompt(self.session, self.tracker, self.packs)
        except (NoContentAvailable, RepositoryUnavailable) as e:
            logger.warning(f"Session {self.session.id}: random prompt unavailable ({e})")
            if self._deliver(ContentType.PROMPT) is None:
                return None
            item = self.session.current_item
            return item if isinstance(item, Prompt) else None

        prompt = selection.item
        self.state_machine.set_level(prompt.level)
        self.state_machine.set_intensity(prompt.intensity)
        self._record(selection)
        logger.info(
            f"Session {self.session.id}: random prompt {prompt.id} "
            f"switched to level {prompt.level}, intensity {prompt.intensity}"
        )
        return prompt

    # ===== Player actions =====

    def complete_activity_break(self) -> bool:
        if not self.state_machine.complete_activity_break():
            return False
        self.get_next_content()
        return True

    def complete_reflection_pause(self, answer: Optional[str] = None) -> bool:
        try:
            completed = self.state_machine.complete_reflection_pause(answer)
        except InvalidTransition as e:
            logger.warning(f"Session {self.session.id}: rejected reflection answer: {e}")
            return False
        if not completed:
            return False
        self.get_next_content()
        return True

    def set_level(self, level: int) -> bool:
        try:
            changed = self.state_machine.set_level(level)
        except InvalidTransition as e:
            logger.warning(f"Session {self.session.id}: rejected level change: {e}")
            return False
        if changed:
            # The displayed prompt must match the new filter right away
            self._deliver(ContentType.PROMPT)
        return changed

    def set_intensity(self, intensity: int) -> bool:
        try:
            changed = self.state_machine.set_intensity(intensity)
        except InvalidTransition as e:
            logger.warning(f"Session {self.session.id}: rejected intensity change: {e}")
            return False
        if changed:
            self._deliver(ContentType.PROMPT)
        return changed

    def toggle_group_mode(self) -> bool:
        return self.state_machine.toggle_group_mode()

    def toggle_drinking_game(self) -> bool:
        return self.state_machine.toggle_drinking_game()

    def set_deck(self, deck: Optional[Deck]) -> bool:
        """Switch the deck; breaks written for it are shown from the next break on."""
        return self.state_machine.set_deck(deck)

    def add_custom_challenge(
        self, text: str, challenge_type: str = "Truth or Dare", intensity: int = 1
    ) -> Optional[Challenge]:
        """Add a player-written challenge to this game's challenge pool."""
        try:
            return self.state_machine.add_custom_challenge(text, challenge_type, intensity)
        except InvalidTransition as e:
            logger.warning(f"Session {self.session.id}: rejected custom challenge: {e}")
            return None

    def record_full_house_moment(self) -> bool:
        recorded = self.state_machine.record_full_house_moment()
        if recorded:
            self._refresh_pending_unlock()
        return recorded

    def add_time_spent(self, seconds: int) -> bool:
        try:
            recorded = self.state_machine.add_time_spent(seconds)
        except InvalidTransition as e:
            logger.warning(f"Session {self.session.id}: rejected time update: {e}")
            return False
        if recorded:
            self._refresh_pending_unlock()
        return recorded

    def end_game(self) -> bool:
        ended = self.state_machine.end_game()
        if ended:
            self.pending_unlock_pack = None
        return ended

    # ===== Packs =====

    def check_for_unlockable_pack(self) -> Optional[PromptPack]:
        return self.evaluator.check_for_unlockable_pack(
            self.session, self.packs, self.session.dismissed_pack_ids
        )

    def _refresh_pending_unlock(self) -> None:
        pending = self.pending_unlock_pack
        if pending is not None and self.evaluator.is_eligible(
            self.session, pending, self.session.dismissed_pack_ids
        ):
            return
        self.pending_unlock_pack = self.check_for_unlockable_pack()
        if self.pending_unlock_pack is not None:
            logger.info(
                f"Session {self.session.id}: pack {self.pending_unlock_pack.id} "
                f"({self.pending_unlock_pack.name}) ready to unlock"
            )

    def unlock_pack(self, pack_id: int) -> bool:
        if not self._accepting("unlock_pack"):
            return False
        try:
            self.evaluator.confirm_unlock(self.session, pack_id, self.packs)
        except UnknownPack as e:
            logger.warning(f"Session {self.session.id}: {e}")
            return False

        self.session.touch()
        self._refresh_pending_unlock()
        return True

    def dismiss_pack(self, pack_id: int) -> bool:
        """Record that the player declined a pack offer for this play-through."""
        if not self._accepting("dismiss_pack"):
            return False
        if not any(pack.id == pack_id for pack in self.packs):
            logger.warning(f"Session {self.session.id}: cannot dismiss unknown pack {pack_id}")
            return False

        self.session.dismissed_pack_ids.add(pack_id)
        self._refresh_pending_unlock()
        return True

    # ===== Snapshot =====

    def get_state(self) -> GameState:
        return GameState.from_session(
            self.session,
            pending_unlock_pack=self.pending_unlock_pack,
            from_fallback=self.from_fallback,
            pool_was_reset=self.pool_was_reset,
        )
