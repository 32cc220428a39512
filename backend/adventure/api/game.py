"""
Game API endpoints - Start sessions, advance the story and inspect state
"""

import logging

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from adventure.engine.orchestrator import SceneOrchestrator
from adventure.engine.store import SessionStore, get_store
from adventure.models.game import (
    SESSION_ID_PATTERN,
    ErrorResponse,
    GenerateRequest,
    SceneResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {500: {"model": ErrorResponse}}


def get_orchestrator(store: SessionStore = Depends(get_store)) -> SceneOrchestrator:
    """Build the orchestrator for a request (overridable in tests)"""
    return SceneOrchestrator(store)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/start", response_model=SceneResponse, responses=ERROR_RESPONSES)
async def start_game(
    user_id: str = Query(alias="userId", pattern=SESSION_ID_PATTERN),
    orchestrator: SceneOrchestrator = Depends(get_orchestrator),
):
    """Start (or restart) a session and return its opening scene"""
    try:
        result = await orchestrator.start(user_id)
    except Exception as e:
        logger.exception(f"Failed to start session {user_id}")
        return _error(500, str(e))

    return SceneResponse.from_state(result.state, fallback=result.is_fallback)


@router.post("/generate", response_model=SceneResponse, responses=ERROR_RESPONSES)
async def generate_scene(
    request: GenerateRequest,
    orchestrator: SceneOrchestrator = Depends(get_orchestrator),
):
    """Process a player action and return the next scene"""
    try:
        result = await orchestrator.advance(request.user_id, request.prompt)
    except Exception as e:
        logger.exception(f"Failed to generate scene for session {request.user_id}")
        return _error(500, str(e))

    return SceneResponse.from_state(result.state, fallback=result.is_fallback)


@router.get(
    "/state/{user_id}",
    response_model=SceneResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_state(
    user_id: str = Path(pattern=SESSION_ID_PATTERN),
    store: SessionStore = Depends(get_store),
):
    """Get current session state without generating a scene"""
    state = store.get(user_id)
    if state is None:
        return _error(404, "Game session not found")
    return SceneResponse.from_state(state)
