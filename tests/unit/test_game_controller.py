"""Tests for GameController."""

import logging
import random
from unittest.mock import MagicMock

import pytest

from prompt_party.domain.entities import (
    ActivityBreak,
    Challenge,
    ContentKind,
    ContentType,
    Deck,
    GameSession,
    Prompt,
    PromptPack,
    ReflectionPause,
    SessionStatus,
)
from prompt_party.domain.errors import InitializationFailed, RepositoryUnavailable
from prompt_party.domain.services import CadencePolicy, GameController
from prompt_party.infrastructure.local_content_repository import LocalContentRepository
from prompt_party.infrastructure.static_content_repository import StaticContentRepository


def make_prompt(prompt_id, level=1, intensity=1, **kwargs):
    return Prompt(id=prompt_id, text=f"Prompt {prompt_id}?", level=level, intensity=intensity, **kwargs)


@pytest.fixture
def repository():
    return LocalContentRepository(
        prompts=[
            make_prompt(10),
            make_prompt(11),
            make_prompt(12),
            make_prompt(20, level=2),
            make_prompt(21, level=2),
            make_prompt(30, level=1, intensity=2),
        ],
        challenges=[Challenge(id=1, text="Dance", intensity=1), Challenge(id=2, text="Sing", intensity=1)],
        activity_breaks=[ActivityBreak(id=1, title="Stretch", description="Stand up")],
        reflection_pauses=[ReflectionPause(id=1, title="Breathe", description="Quiet")],
        packs=[PromptPack(id=1, name="Warm Up", unlock_threshold=5)],
    )


def make_controller(repository, every=0, fallback=None, session=None, seed=1):
    controller = GameController(
        session=session or GameSession(),
        content_repository=repository,
        fallback_repository=fallback if fallback is not None else StaticContentRepository(),
        cadence=CadencePolicy(every=every),
        rng=random.Random(seed),
    )
    controller.initialize()
    return controller


def pause_due():
    """Session whose next delivery is a reflection pause under a cadence of one."""
    return GameSession(prompts_since_break=1, last_break_type=ContentType.ACTIVITY_BREAK)


class TestInitialization:
    """Test cases for controller initialization."""

    def test_initialize_loads_packs(self, repository):
        controller = make_controller(repository)

        assert [p.id for p in controller.packs] == [1]

    def test_unreachable_repository_raises(self):
        repository = MagicMock()
        repository.get_packs.side_effect = RepositoryUnavailable("connection refused")
        controller = GameController(GameSession(), repository, StaticContentRepository())

        with pytest.raises(InitializationFailed) as exc_info:
            controller.initialize()

        assert isinstance(exc_info.value.__cause__, RepositoryUnavailable)
        assert controller.packs == []


class TestContentDelivery:
    """Test cases for get_next_content."""

    def test_no_repeats_then_reset(self, repository):
        """Three deliveries are a permutation of the pool; the fourth repeats an earlier one."""
        controller = make_controller(repository)

        delivered = []
        for _ in range(3):
            assert controller.get_next_content() == ContentType.PROMPT
            delivered.append(controller.session.current_item.id)

        assert sorted(delivered) == [10, 11, 12]

        assert controller.get_state().pool_was_reset is False

        controller.get_next_content()
        assert controller.session.current_item.id in {10, 11, 12}
        assert controller.session.current_item.id != delivered[-1]
        assert controller.session.prompts_answered == 4
        assert controller.get_state().pool_was_reset is True

        controller.get_next_content()
        assert controller.get_state().pool_was_reset is False

    def test_breaks_interleave_with_prompts(self, repository):
        controller = make_controller(repository, every=2)

        types = [controller.get_next_content() for _ in range(3)]
        assert types == [ContentType.PROMPT, ContentType.PROMPT, ContentType.ACTIVITY_BREAK]

        assert controller.complete_activity_break() is True
        assert controller.session.content_type == ContentType.PROMPT

        assert controller.get_next_content() == ContentType.PROMPT
        assert controller.get_next_content() == ContentType.REFLECTION_PAUSE

    def test_breaks_do_not_count_as_answered(self, repository):
        controller = make_controller(repository, every=1)

        controller.get_next_content()
        controller.get_next_content()

        assert controller.session.content_type == ContentType.ACTIVITY_BREAK
        assert controller.session.prompts_answered == 1

    def test_fallback_when_filter_is_empty(self, repository, caplog):
        """An empty tier yields a fallback prompt and a warning, not an error."""
        session = GameSession(level=3, intensity=3)
        controller = make_controller(repository, session=session)

        with caplog.at_level(logging.WARNING):
            content_type = controller.get_next_content()

        assert content_type == ContentType.PROMPT
        assert controller.session.current_item.id < 0
        assert controller.session.current_item.level == 3
        assert controller.get_state().from_fallback is True
        assert "using fallback content" in caplog.text
        assert controller.tracker.used_ids(ContentKind.PROMPT) == frozenset()

    def test_fallback_when_repository_unavailable(self):
        repository = MagicMock()
        repository.get_packs.return_value = []
        repository.get_activity_breaks.return_value = []
        repository.get_reflection_pauses.return_value = []
        repository.get_prompts.side_effect = RepositoryUnavailable("timeout")
        controller = make_controller(repository)

        assert controller.get_next_content() == ContentType.PROMPT
        assert controller.from_fallback is True
        assert controller.session.prompts_answered == 1

    def test_missing_break_content_uses_fallback_break(self):
        repository = LocalContentRepository(prompts=[make_prompt(1)])
        controller = make_controller(repository, every=1)

        controller.get_next_content()
        content_type = controller.get_next_content()

        assert content_type == ContentType.ACTIVITY_BREAK
        assert controller.session.current_item.id < 0

    def test_no_break_content_anywhere_shows_prompt(self):
        repository = LocalContentRepository(prompts=[make_prompt(1), make_prompt(2)])
        controller = make_controller(repository, every=1, fallback=LocalContentRepository())

        controller.get_next_content()
        content_type = controller.get_next_content()

        assert content_type == ContentType.PROMPT
        assert controller.session.prompts_answered == 2

    def test_nothing_anywhere_returns_none(self, caplog):
        controller = make_controller(LocalContentRepository(), fallback=LocalContentRepository())

        with caplog.at_level(logging.ERROR):
            assert controller.get_next_content() is None

        assert controller.session.content_type is None
        assert "no content to deliver" in caplog.text


class TestPlayerActions:
    """Test cases for player actions routed through the controller."""

    def test_set_level_refreshes_prompt(self, repository):
        """Changing level delivers a prompt of the new level right away."""
        controller = make_controller(repository)
        controller.get_next_content()

        assert controller.set_level(2) is True

        assert controller.session.content_type == ContentType.PROMPT
        assert controller.session.current_item.level == 2

    def test_set_intensity_refreshes_prompt(self, repository):
        controller = make_controller(repository)
        controller.get_next_content()

        assert controller.set_intensity(2) is True

        assert controller.session.current_item.id == 30

    def test_invalid_level_is_rejected(self, repository, caplog):
        controller = make_controller(repository)
        controller.get_next_content()
        current = controller.session.current_item

        with caplog.at_level(logging.WARNING):
            assert controller.set_level(7) is False

        assert controller.session.level == 1
        assert controller.session.current_item == current
        assert "rejected level change" in caplog.text

    def test_complete_activity_break_while_prompt_is_noop(self, repository):
        controller = make_controller(repository)
        controller.get_next_content()
        before = controller.session.model_dump()

        assert controller.complete_activity_break() is False
        assert controller.session.model_dump() == before

    def test_draw_challenge_keeps_cursor(self, repository):
        controller = make_controller(repository)
        controller.get_next_content()
        current = controller.session.current_item

        challenge = controller.draw_challenge()

        assert isinstance(challenge, Challenge)
        assert controller.session.current_item == current
        assert controller.tracker.is_used(ContentKind.CHALLENGE, challenge.id)

    def test_draw_challenge_fallback(self, repository):
        session = GameSession(intensity=3)
        controller = make_controller(repository, session=session)

        challenge = controller.draw_challenge()

        assert challenge.id < 0
        assert challenge.intensity <= 3

    def test_random_prompt_switches_tier(self, repository):
        controller = make_controller(repository, seed=11)

        prompt = controller.get_random_prompt()

        assert controller.session.level == prompt.level
        assert controller.session.intensity == prompt.intensity
        assert controller.session.current_item == prompt
        assert controller.session.prompts_answered == 1

    def test_random_prompt_with_nothing_to_deliver_returns_none(self):
        """A failed random prompt does not report the prompt already on screen."""
        repository = MagicMock()
        repository.get_packs.return_value = []
        repository.get_activity_breaks.return_value = []
        repository.get_reflection_pauses.return_value = []
        repository.get_prompts.return_value = [make_prompt(1)]
        controller = make_controller(repository, fallback=LocalContentRepository())
        controller.get_next_content()
        assert controller.session.current_item.id == 1

        repository.get_prompts.side_effect = RepositoryUnavailable("timeout")

        assert controller.get_random_prompt() is None
        assert controller.session.prompts_answered == 1

    def test_toggle_group_mode(self, repository):
        controller = make_controller(repository)

        assert controller.toggle_group_mode() is True
        assert controller.get_state().group_mode is True

    def test_add_time_spent_rejects_negative(self, repository):
        controller = make_controller(repository)

        assert controller.add_time_spent(-1) is False
        assert controller.add_time_spent(45) is True
        assert controller.session.total_time_spent == 45

    def test_calls_after_end_are_ignored(self, repository):
        controller = make_controller(repository)
        controller.get_next_content()
        assert controller.end_game() is True
        before = controller.session.model_dump()

        assert controller.get_next_content() is None
        assert controller.set_level(2) is False
        assert controller.draw_challenge() is None
        assert controller.get_random_prompt() is None
        assert controller.unlock_pack(1) is False
        assert controller.set_deck(Deck.FRIENDS) is False
        assert controller.toggle_drinking_game() is False
        assert controller.add_custom_challenge("Sing", "Dare", 1) is None
        assert controller.end_game() is False

        assert controller.session.model_dump() == before
        assert controller.get_state().status == SessionStatus.ENDED


class TestPartyOptions:
    """Test cases for decks, the drinking-game toggle, reflection answers and custom challenges."""

    def test_set_deck_picks_deck_breaks(self):
        repository = LocalContentRepository(
            prompts=[make_prompt(1), make_prompt(2)],
            activity_breaks=[
                ActivityBreak(id=1, title="Stretch", description="Stand up"),
                ActivityBreak(id=2, title="Name Game", description="Names", deck=Deck.STRANGERS),
            ],
        )
        controller = make_controller(repository, every=1)
        controller.get_next_content()

        assert controller.set_deck(Deck.STRANGERS) is True
        assert controller.get_next_content() == ContentType.ACTIVITY_BREAK

        assert controller.session.current_item.id == 2
        assert controller.get_state().deck == Deck.STRANGERS

    def test_clear_deck(self, repository):
        controller = make_controller(repository, session=GameSession(deck=Deck.BFFS))

        assert controller.set_deck(None) is True
        assert controller.session.deck is None

    def test_toggle_drinking_game(self, repository):
        controller = make_controller(repository)

        assert controller.toggle_drinking_game() is True
        assert controller.get_state().is_drinking_game is True

        controller.toggle_drinking_game()
        assert controller.session.is_drinking_game is False

    def test_reflection_answer_is_kept(self, repository):
        controller = make_controller(repository, every=1)
        controller.get_next_content()
        controller.get_next_content()
        controller.complete_activity_break()
        assert controller.get_next_content() == ContentType.REFLECTION_PAUSE

        assert controller.complete_reflection_pause("  We all love pizza  ") is True

        answers = controller.get_state().reflection_answers
        assert [(a.pause_id, a.answer) for a in answers] == [(1, "We all love pizza")]
        assert controller.session.content_type == ContentType.PROMPT

    def test_reflection_without_answer(self, repository):
        controller = make_controller(repository, session=pause_due(), every=1)
        assert controller.get_next_content() == ContentType.REFLECTION_PAUSE

        assert controller.complete_reflection_pause() is True
        assert controller.session.reflection_answers == []

    def test_overlong_reflection_answer_is_rejected(self, repository, caplog):
        controller = make_controller(repository, session=pause_due(), every=1)
        controller.get_next_content()

        with caplog.at_level(logging.WARNING):
            assert controller.complete_reflection_pause("x" * 2001) is False

        assert controller.session.content_type == ContentType.REFLECTION_PAUSE
        assert "rejected reflection answer" in caplog.text

    def test_custom_challenge_can_be_drawn(self, repository):
        controller = make_controller(repository, session=GameSession(intensity=2))

        challenge = controller.add_custom_challenge("Swap shoes with your neighbour", "Dare", 2)

        assert challenge.is_custom is True
        assert challenge.id == -1000
        assert controller.draw_challenge() == challenge
        assert controller.get_state().custom_challenges == [challenge]

    def test_custom_challenge_ids_are_distinct(self, repository):
        controller = make_controller(repository)

        first = controller.add_custom_challenge("One", "Dare", 1)
        second = controller.add_custom_challenge("Two", "Truth", 1)

        assert first.id != second.id

    def test_invalid_custom_challenge(self, repository, caplog):
        controller = make_controller(repository)

        with caplog.at_level(logging.WARNING):
            assert controller.add_custom_challenge("   ", "Dare", 1) is None
            assert controller.add_custom_challenge("Sing", "Dare", 5) is None

        assert controller.session.custom_challenges == []
        assert "rejected custom challenge" in caplog.text


class TestPackUnlocks:
    """Test cases for pack unlock offers."""

    def test_pack_offered_at_threshold(self, repository):
        """The pack is offered on exactly the fifth prompt and unlocks idempotently."""
        controller = make_controller(repository)

        for _ in range(4):
            controller.get_next_content()
        assert controller.pending_unlock_pack is None
        assert controller.check_for_unlockable_pack() is None

        controller.get_next_content()
        assert controller.session.prompts_answered == 5
        assert controller.pending_unlock_pack.id == 1
        assert controller.check_for_unlockable_pack().id == 1

        assert controller.unlock_pack(1) is True
        assert controller.unlock_pack(1) is True
        assert controller.session.unlocked_pack_ids == {1}
        assert controller.pending_unlock_pack is None

    def test_unlock_unknown_pack(self, repository, caplog):
        controller = make_controller(repository)

        with caplog.at_level(logging.WARNING):
            assert controller.unlock_pack(99) is False

        assert "Prompt pack with id 99 not found" in caplog.text

    def test_dismiss_pack(self, repository):
        session = GameSession(prompts_answered=5)
        controller = make_controller(repository, session=session)
        assert controller.pending_unlock_pack.id == 1

        assert controller.dismiss_pack(1) is True

        assert controller.pending_unlock_pack is None
        assert controller.session.dismissed_pack_ids == {1}
        assert controller.dismiss_pack(42) is False

    def test_time_based_pack(self):
        repository = LocalContentRepository(
            prompts=[make_prompt(1)],
            packs=[PromptPack(id=4, name="Marathon", unlock_metric="total_time_spent", unlock_threshold=300)],
        )
        controller = make_controller(repository)

        controller.add_time_spent(299)
        assert controller.pending_unlock_pack is None

        controller.add_time_spent(1)
        assert controller.pending_unlock_pack.id == 4

    def test_unlocked_pack_prompts_become_eligible(self):
        repository = LocalContentRepository(
            prompts=[make_prompt(1), make_prompt(2, pack_id=3)],
            packs=[PromptPack(id=3, name="Secret", unlock_threshold=0, prompt_ids={2})],
        )
        controller = make_controller(repository)

        controller.get_next_content()
        controller.get_next_content()
        assert controller.session.current_item.id == 1

        controller.unlock_pack(3)
        delivered = set()
        for _ in range(2):
            controller.get_next_content()
            delivered.add(controller.session.current_item.id)
        assert 2 in delivered


class TestFork:
    """Test cases for forking a controller."""

    def test_fork_isolates_session(self, repository):
        controller = make_controller(repository)
        controller.get_next_content()

        forked = controller.fork()
        forked.get_next_content()
        forked.set_level(2)

        assert controller.session.prompts_answered == 1
        assert controller.session.level == 1
        assert forked.session.prompts_answered == 3
        assert forked.session.id == controller.session.id
        assert forked.packs == controller.packs
