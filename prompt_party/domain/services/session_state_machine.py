"""Session state transitions for the party game."""

import logging
from typing import Optional

from ..entities.content import Challenge, ContentType, Deck
from ..entities.game_session import MAX_ANSWER_LENGTH, GameSession, ReflectionAnswer, SessionStatus
from ..errors import InvalidTransition
from .content_selector import TIERS, Selection

logger = logging.getLogger(__name__)

# Player-written challenges count down from here, clear of store and backup ids
CUSTOM_CHALLENGE_ID_BASE = -1000


class SessionStateMachine:
    """
    Owns the mutable fields of a game session and the legal transitions
    triggered by player actions.

    Every action on an ended session is ignored and reported as ``False``.
    Out-of-range level/intensity values raise ``InvalidTransition`` before
    anything is mutated.
    """

    def __init__(self, session: GameSession):
        self.session = session

    def _accepting(self, action: str) -> bool:
        if self.session.is_ended:
            logger.debug(f"Session {self.session.id} has ended, ignoring {action}")
            return False
        return True

    @staticmethod
    def _validate_tier(name: str, value: int) -> None:
        if isinstance(value, bool) or value not in TIERS:
            raise InvalidTransition(f"{name} must be one of {TIERS}, got {value!r}")

    def set_level(self, level: int) -> bool:
        if not self._accepting("set_level"):
            return False
        self._validate_tier("level", level)

        old_level = self.session.level
        self.session.level = level
        self.session.touch()
        logger.info(f"Session {self.session.id}: level {old_level} -> {level}")
        return True

    def set_intensity(self, intensity: int) -> bool:
        if not self._accepting("set_intensity"):
            return False
        self._validate_tier("intensity", intensity)

        old_intensity = self.session.intensity
        self.session.intensity = intensity
        self.session.touch()
        logger.info(f"Session {self.session.id}: intensity {old_intensity} -> {intensity}")
        return True

    def toggle_group_mode(self) -> bool:
        if not self._accepting("toggle_group_mode"):
            return False
        self.session.group_mode = not self.session.group_mode
        self.session.touch()
        return True

    def complete_activity_break(self) -> bool:
        return self._complete(ContentType.ACTIVITY_BREAK)

    def set_deck(self, deck: Optional[Deck]) -> bool:
        if not self._accepting("set_deck"):
            return False
        self.session.deck = deck
        self.session.touch()
        logger.info(f"Session {self.session.id}: deck set to {deck.value if deck else None}")
        return True

    def toggle_drinking_game(self) -> bool:
        if not self._accepting("toggle_drinking_game"):
            return False
        self.session.is_drinking_game = not self.session.is_drinking_game
        self.session.touch()
        return True

    def complete_reflection_pause(self, answer: Optional[str] = None) -> bool:
        """Close the reflection pause, keeping the group's answer if one was given."""
        if answer is not None and len(answer) > MAX_ANSWER_LENGTH:
            raise InvalidTransition(f"answer must be at most {MAX_ANSWER_LENGTH} characters")

        pause = self.session.current_item
        if not self._complete(ContentType.REFLECTION_PAUSE):
            return False
        if answer and answer.strip():
            self.session.reflection_answers.append(
                ReflectionAnswer(pause_id=pause.id, answer=answer.strip())
            )
        return True

    def _complete(self, content_type: ContentType) -> bool:
        if not self._accepting(f"complete {content_type.value}"):
            return False
        if self.session.content_type != content_type:
            # Late or duplicate taps from the UI land here
            logger.debug(
                f"Session {self.session.id}: ignoring {content_type.value} completion "
                f"while showing {self.session.content_type}"
            )
            return False

        self.session.content_type = None
        self.session.current_item = None
        self.session.touch()
        return True

    def add_custom_challenge(self, text: str, challenge_type: str, intensity: int) -> Optional[Challenge]:
        if not self._accepting("add_custom_challenge"):
            return None
        self._validate_tier("intensity", intensity)
        text = text.strip()
        challenge_type = challenge_type.strip()
        if not text or not challenge_type:
            raise InvalidTransition("custom challenge needs a type and some text")

        challenge = Challenge(
            id=CUSTOM_CHALLENGE_ID_BASE - len(self.session.custom_challenges),
            type=challenge_type,
            text=text,
            intensity=intensity,
            is_custom=True,
        )
        self.session.custom_challenges.append(challenge)
        self.session.touch()
        logger.info(f"Session {self.session.id}: added custom challenge {challenge.id}")
        return challenge

    def record_prompt_answered(self) -> bool:
        if not self._accepting("record_prompt_answered"):
            return False
        self.session.prompts_answered += 1
        return True

    def record_delivery(self, selection: Selection) -> bool:
        """Move the content cursor onto a freshly selected item."""
        if not self._accepting("record_delivery"):
            return False

        self.session.content_type = selection.content_type
        self.session.current_item = selection.item
        if selection.content_type == ContentType.PROMPT:
            self.session.prompts_since_break += 1
        else:
            self.session.prompts_since_break = 0
            self.session.last_break_type = selection.content_type
        self.session.touch()
        return True

    def add_time_spent(self, seconds: int) -> bool:
        if not self._accepting("add_time_spent"):
            return False
        if seconds < 0:
            raise InvalidTransition(f"time spent must be >= 0, got {seconds}")
        self.session.total_time_spent += seconds
        return True

    def record_full_house_moment(self) -> bool:
        if not self._accepting("record_full_house_moment"):
            return False
        self.session.full_house_moments += 1
        return True

    def end_game(self) -> bool:
        if not self._accepting("end_game"):
            return False
        self.session.status = SessionStatus.ENDED
        self.session.touch()
        logger.info(
            f"Session {self.session.id} ended after "
            f"{self.session.prompts_answered} prompts"
        )
        return True
