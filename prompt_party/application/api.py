"""FastAPI application entry point."""

import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..domain.entities import Deck
from ..domain.entities.game_session import MAX_ANSWER_LENGTH
from ..domain.errors import InitializationFailed, RepositoryUnavailable
from ..domain.interfaces.content_repository import ContentRepository
from ..domain.interfaces.session_repository import SessionRepository
from ..domain.services import CadencePolicy
from ..infrastructure.dynamodb_content_repository import DynamoDBContentRepository
from ..infrastructure.dynamodb_session_repository import DynamoDBSessionRepository
from ..infrastructure.local_content_repository import LocalContentRepository
from ..infrastructure.local_session_repository import LocalSessionRepository
from ..infrastructure.static_content_repository import StaticContentRepository
from .auth import AccessCodeGate
from .config import Settings, settings
from .controller import ActionResult, SessionController, SessionNotFound

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

T = TypeVar("T")


class AccessCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=32)


class LevelRequest(BaseModel):
    level: int = Field(ge=1, le=3, description="1 Icebreaker, 2 Getting to Know You, 3 Deeper Dive")


class IntensityRequest(BaseModel):
    intensity: int = Field(ge=1, le=3, description="1 Mild, 2 Medium, 3 Wild")


class TimeSpentRequest(BaseModel):
    seconds: int = Field(ge=0, le=24 * 60 * 60)


class DeckRequest(BaseModel):
    deck: Optional[Deck] = Field(None, description="strangers, friends or bffs; null clears the deck")


class ReflectionAnswerRequest(BaseModel):
    answer: Optional[str] = Field(None, max_length=MAX_ANSWER_LENGTH)


class CustomChallengeRequest(BaseModel):
    text: str = Field(min_length=1, max_length=500)
    type: str = Field(default="Truth or Dare", min_length=1, max_length=50)
    intensity: int = Field(default=1, ge=1, le=3)


def build_content_repository(config: Settings) -> ContentRepository:
    """Create the content repository selected by configuration."""
    if config.content_backend == "dynamodb":
        return DynamoDBContentRepository(
            prompts_table=config.prompts_table_name,
            challenges_table=config.challenges_table_name,
            activity_breaks_table=config.activity_breaks_table_name,
            reflection_pauses_table=config.reflection_pauses_table_name,
            packs_table=config.packs_table_name,
            region_name=config.aws_region,
        )
    return LocalContentRepository.with_sample_content()


def build_session_repository(config: Settings) -> SessionRepository:
    """Create the session repository selected by configuration."""
    if config.session_backend == "dynamodb":
        return DynamoDBSessionRepository(
            table_name=config.sessions_table_name,
            region_name=config.aws_region,
        )
    return LocalSessionRepository()


def build_controller(config: Settings) -> SessionController:
    return SessionController(
        content_repository=build_content_repository(config),
        session_repository=build_session_repository(config),
        fallback_repository=StaticContentRepository(),
        cadence=CadencePolicy(every=config.break_every),
        max_cached_sessions=config.session_cache_size,
    )


def _action_response(outcome: ActionResult, success: Optional[bool] = None) -> dict:
    return {
        "success": bool(outcome.result) if success is None else success,
        "state": outcome.state.model_dump(mode="json"),
    }


async def _run(target: str, pending: Awaitable[T]) -> T:
    """Await a controller call, mapping failures to HTTP errors.

    Args:
        target: What the call works on, for the logs (e.g. "session <id>")
        pending: The controller coroutine
    """
    try:
        return await pending
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InitializationFailed, RepositoryUnavailable) as e:
        logger.error(f"Storage unavailable for {target}: {e}")
        raise HTTPException(status_code=503, detail="Game content is unavailable, try again shortly")
    except Exception as e:
        logger.error(f"Error handling {target}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


def create_app(
    controller: Optional[SessionController] = None,
    gate: Optional[AccessCodeGate] = None,
    config: Settings = settings,
) -> FastAPI:
    """Build the FastAPI app around an injected session controller."""
    controller = controller or build_controller(config)
    gate = gate or AccessCodeGate(config)

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        debug=config.debug,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return controller.get_health_status()

    # ===== Access-code gate =====

    @app.post("/auth/access-code")
    async def redeem_access_code(body: AccessCodeRequest, response: Response):
        """Exchange an access code for a session cookie."""
        if not gate.enabled:
            return {"authenticated": True, "gate_enabled": False}
        try:
            token = gate.issue_token(body.code)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

        response.set_cookie(
            key=config.session_cookie_name,
            value=token,
            httponly=True,
            samesite="lax",
            max_age=config.token_ttl_hours * 3600,
        )
        return {"authenticated": True, "gate_enabled": True}

    @app.post("/auth/logout")
    async def logout(response: Response):
        response.delete_cookie(config.session_cookie_name)
        return {"authenticated": False}

    # ===== Game sessions =====

    router = APIRouter(dependencies=[Depends(gate.require_access)])

    @router.get("/packs")
    async def list_packs():
        """List the prompt pack catalog."""
        try:
            packs = controller.list_packs()
        except RepositoryUnavailable as e:
            logger.error(f"Error listing packs: {e}")
            raise HTTPException(status_code=503, detail="Game content is unavailable, try again shortly")
        return {"packs": [pack.model_dump(mode="json") for pack in packs]}

    @router.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session():
        """Start a new game; the response carries the first content item."""
        state = await _run("a new session", controller.create_session())
        return {"state": state.model_dump(mode="json")}

    @router.get("/sessions/{session_id}")
    async def get_session_state(session_id: str):
        state = await _run(f"session {session_id}", controller.get_state(session_id))
        return {"state": state.model_dump(mode="json")}

    @router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_session(session_id: str):
        """Discard a game and its stored state."""
        await _run(f"session {session_id}", controller.delete_session(session_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.post("/sessions/{session_id}/next")
    async def next_content(session_id: str):
        outcome = await _run(f"session {session_id}", controller.next_content(session_id))
        return _action_response(outcome, success=outcome.result is not None)

    @router.post("/sessions/{session_id}/level")
    async def set_level(session_id: str, body: LevelRequest):
        outcome = await _run(f"session {session_id}", controller.set_level(session_id, body.level))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/intensity")
    async def set_intensity(session_id: str, body: IntensityRequest):
        outcome = await _run(f"session {session_id}", controller.set_intensity(session_id, body.intensity))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/group-mode")
    async def toggle_group_mode(session_id: str):
        outcome = await _run(f"session {session_id}", controller.toggle_group_mode(session_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/drinking-game")
    async def toggle_drinking_game(session_id: str):
        outcome = await _run(f"session {session_id}", controller.toggle_drinking_game(session_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/deck")
    async def set_deck(session_id: str, body: DeckRequest):
        outcome = await _run(f"session {session_id}", controller.set_deck(session_id, body.deck))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/activity-break/complete")
    async def complete_activity_break(session_id: str):
        outcome = await _run(f"session {session_id}", controller.complete_activity_break(session_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/reflection-pause/complete")
    async def complete_reflection_pause(session_id: str, body: Optional[ReflectionAnswerRequest] = None):
        answer = body.answer if body else None
        outcome = await _run(
            f"session {session_id}", controller.complete_reflection_pause(session_id, answer)
        )
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/packs/{pack_id}/unlock")
    async def unlock_pack(session_id: str, pack_id: int):
        outcome = await _run(f"session {session_id}", controller.unlock_pack(session_id, pack_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/packs/{pack_id}/dismiss")
    async def dismiss_pack(session_id: str, pack_id: int):
        outcome = await _run(f"session {session_id}", controller.dismiss_pack(session_id, pack_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/challenge")
    async def draw_challenge(session_id: str):
        outcome = await _run(f"session {session_id}", controller.draw_challenge(session_id))
        response = _action_response(outcome, success=outcome.result is not None)
        response["challenge"] = outcome.result.model_dump(mode="json") if outcome.result else None
        return response

    @router.post("/sessions/{session_id}/challenges/custom")
    async def add_custom_challenge(session_id: str, body: CustomChallengeRequest):
        """Add a player-written challenge to this game."""
        outcome = await _run(
            f"session {session_id}",
            controller.add_custom_challenge(session_id, body.text, body.type, body.intensity),
        )
        response = _action_response(outcome, success=outcome.result is not None)
        response["challenge"] = outcome.result.model_dump(mode="json") if outcome.result else None
        return response

    @router.post("/sessions/{session_id}/random-prompt")
    async def random_prompt(session_id: str):
        outcome = await _run(f"session {session_id}", controller.random_prompt(session_id))
        return _action_response(outcome, success=outcome.result is not None)

    @router.post("/sessions/{session_id}/full-house")
    async def record_full_house(session_id: str):
        outcome = await _run(f"session {session_id}", controller.record_full_house_moment(session_id))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/time")
    async def add_time_spent(session_id: str, body: TimeSpentRequest):
        outcome = await _run(f"session {session_id}", controller.add_time_spent(session_id, body.seconds))
        return _action_response(outcome)

    @router.post("/sessions/{session_id}/end")
    async def end_game(session_id: str):
        outcome = await _run(f"session {session_id}", controller.end_game(session_id))
        return _action_response(outcome)

    app.include_router(router)
    return app


app = create_app()
