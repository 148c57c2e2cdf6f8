"""Session controller coordinating game controllers and session persistence."""

import asyncio
import logging
import random
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, Optional

from ..domain.entities import Deck, GameSession, GameState, PromptPack
from ..domain.interfaces.content_repository import ContentRepository
from ..domain.interfaces.session_repository import SessionRepository
from ..domain.services import CadencePolicy, GameController

logger = logging.getLogger(__name__)


class SessionNotFound(ValueError):
    """No session is stored under the requested id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session with id {session_id} not found")


@dataclass
class ActionResult:
    """Return value of an action together with the state it left behind."""

    result: Any
    state: GameState


class SessionController:
    """
    Controller for coordinating game sessions behind the API.

    This controller is injected with the repositories and handles session
    lookup, a lock per session id, and persistence, keeping the API layer
    thin. Each action runs on a copy of the session that is saved and
    adopted only when the action and the save both succeed, so usage marks
    and counters are committed together.

    Live game controllers are kept in a bounded least-recently-used cache.
    Ended sessions leave the cache, and any session that is not cached is
    resumed from the session repository on its next call.
    """

    def __init__(
        self,
        content_repository: ContentRepository,
        session_repository: SessionRepository,
        fallback_repository: ContentRepository,
        cadence: Optional[CadencePolicy] = None,
        rng: Optional[random.Random] = None,
        max_cached_sessions: int = 1000,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            content_repository: Store of prompts, challenges, breaks and packs
            session_repository: Repository for session persistence
            fallback_repository: Static backup content
            cadence: Break cadence shared by all sessions
            rng: Randomness source shared by all sessions
            max_cached_sessions: How many live sessions to keep in memory
        """
        if max_cached_sessions < 0:
            raise ValueError(f"max_cached_sessions must be >= 0, got {max_cached_sessions}")

        self.content_repository = content_repository
        self.session_repository = session_repository
        self.fallback_repository = fallback_repository
        self.cadence = cadence or CadencePolicy()
        self.rng = rng or random.Random()
        self.max_cached_sessions = max_cached_sessions

        self._controllers: "OrderedDict[str, GameController]" = OrderedDict()
        # Only ids with a caller holding or waiting on the lock have an entry
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

        logger.info("SessionController initialized with repositories")

    def _build(self, session: GameSession) -> GameController:
        return GameController(
            session=session,
            content_repository=self.content_repository,
            fallback_repository=self.fallback_repository,
            cadence=self.cadence,
            rng=self.rng,
        )

    @asynccontextmanager
    async def _session_lock(self, session_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[session_id] -= 1
            if self._lock_users[session_id] == 0:
                del self._lock_users[session_id]
                del self._locks[session_id]

    def _remember(self, session_id: str, controller: GameController) -> None:
        if controller.session.is_ended:
            if self._controllers.pop(session_id, None) is not None:
                logger.debug(f"Dropped ended session {session_id} from the cache")
            return

        self._controllers[session_id] = controller
        self._controllers.move_to_end(session_id)
        while len(self._controllers) > self.max_cached_sessions:
            evicted_id, _ = self._controllers.popitem(last=False)
            logger.debug(f"Evicted session {evicted_id} from the cache")

    async def create_session(self) -> GameState:
        """
        Start a new game and deliver its first content.

        Raises:
            InitializationFailed: If the content repository is unreachable.
            RepositoryUnavailable: If the new session cannot be saved.
        """
        controller = self._build(GameSession())
        controller.initialize()
        controller.get_next_content()

        session_id = str(controller.session.id)
        await self.session_repository.save_session(controller.session)
        self._remember(session_id, controller)
        logger.info(f"Created new session {session_id}")
        return controller.get_state()

    async def _load_controller(self, session_id: str) -> GameController:
        controller = self._controllers.get(session_id)
        if controller is not None:
            return controller

        session = await self.session_repository.load_session(session_id)
        if session is None:
            raise SessionNotFound(session_id)

        controller = self._build(session)
        controller.initialize()
        logger.info(f"Resumed session {session_id} from storage")
        return controller

    async def _perform(
        self, session_id: str, action: Callable[[GameController], Any]
    ) -> ActionResult:
        async with self._session_lock(session_id):
            controller = await self._load_controller(session_id)
            working = controller.fork()
            result = action(working)
            await self.session_repository.save_session(working.session)
            self._remember(session_id, working)
            return ActionResult(result=result, state=working.get_state())

    async def get_state(self, session_id: str) -> GameState:
        async with self._session_lock(session_id):
            controller = await self._load_controller(session_id)
            self._remember(session_id, controller)
            return controller.get_state()

    async def delete_session(self, session_id: str) -> None:
        """
        Discard a game and its stored state.

        Raises:
            SessionNotFound: If no session is stored under the id.
        """
        async with self._session_lock(session_id):
            try:
                await self.session_repository.delete_session(session_id)
            except ValueError as e:
                raise SessionNotFound(session_id) from e
            self._controllers.pop(session_id, None)
            logger.info(f"Deleted session {session_id}")

    async def next_content(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.get_next_content())

    async def set_level(self, session_id: str, level: int) -> ActionResult:
        return await self._perform(session_id, lambda c: c.set_level(level))

    async def set_intensity(self, session_id: str, intensity: int) -> ActionResult:
        return await self._perform(session_id, lambda c: c.set_intensity(intensity))

    async def set_deck(self, session_id: str, deck: Optional[Deck]) -> ActionResult:
        return await self._perform(session_id, lambda c: c.set_deck(deck))

    async def toggle_group_mode(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.toggle_group_mode())

    async def toggle_drinking_game(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.toggle_drinking_game())

    async def complete_activity_break(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.complete_activity_break())

    async def complete_reflection_pause(
        self, session_id: str, answer: Optional[str] = None
    ) -> ActionResult:
        return await self._perform(session_id, lambda c: c.complete_reflection_pause(answer))

    async def unlock_pack(self, session_id: str, pack_id: int) -> ActionResult:
        return await self._perform(session_id, lambda c: c.unlock_pack(pack_id))

    async def dismiss_pack(self, session_id: str, pack_id: int) -> ActionResult:
        return await self._perform(session_id, lambda c: c.dismiss_pack(pack_id))

    async def draw_challenge(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.draw_challenge())

    async def add_custom_challenge(
        self, session_id: str, text: str, challenge_type: str, intensity: int
    ) -> ActionResult:
        return await self._perform(
            session_id, lambda c: c.add_custom_challenge(text, challenge_type, intensity)
        )

    async def random_prompt(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.get_random_prompt())

    async def record_full_house_moment(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.record_full_house_moment())

    async def add_time_spent(self, session_id: str, seconds: int) -> ActionResult:
        return await self._perform(session_id, lambda c: c.add_time_spent(seconds))

    async def end_game(self, session_id: str) -> ActionResult:
        return await self._perform(session_id, lambda c: c.end_game())

    def list_packs(self) -> list[PromptPack]:
        """
        Get the prompt pack catalog.

        Raises:
            RepositoryUnavailable: If the content repository is unreachable.
        """
        return self.content_repository.get_packs()

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "active_sessions": len(self._controllers),
            "max_cached_sessions": self.max_cached_sessions,
            "break_every": self.cadence.every,
            "repositories": {
                "content_repository": type(self.content_repository).__name__,
                "fallback_repository": type(self.fallback_repository).__name__,
                "session_repository": type(self.session_repository).__name__,
            },
        }
