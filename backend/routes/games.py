"""Game session endpoints: create, view, act, restart."""

from fastapi import APIRouter, Depends, HTTPException

from backend import storage
from backend.sessions import SessionStore
from textventure.game import GameSession, InvalidTransition
from textventure.llm import LLM, LLMError
from textventure.presentation import game_view
from textventure.prompts import PromptError, resolve_templates

from .deps import get_llm, get_sessions
from .models import ActionBody

router = APIRouter()


def _session_or_404(sessions: SessionStore, game_id: str) -> GameSession:
    session = sessions.get(game_id)
    if session is None:
        raise HTTPException(404, "Game not found")
    return session


def _generation_failed(session: GameSession, error: Exception) -> HTTPException:
    return HTTPException(502, {
        "message": session.state.error or str(error),
        "reason": str(error),
        "game": game_view(session.id, session.state),
    })


@router.post("/games")
async def create_game(
    replaces: str | None = None,
    llm: LLM = Depends(get_llm),
    sessions: SessionStore = Depends(get_sessions),
):
    """Start a new game and generate its opening scene.

    `replaces` names the game this browser played before; it is forgotten.
    """
    if replaces:
        sessions.discard(replaces)
    config = storage.get_config()
    session = sessions.add(GameSession(
        archive=storage.get_archive(),
        llm=llm,
        world_prompt=config["world_prompt"],
        templates=resolve_templates(config["prompts"]),
    ))
    try:
        await session.start()
    except (LLMError, PromptError) as e:
        raise _generation_failed(session, e)
    return game_view(session.id, session.state)


@router.get("/games/{game_id}")
async def get_game(game_id: str, sessions: SessionStore = Depends(get_sessions)):
    """Current state of a game."""
    session = _session_or_404(sessions, game_id)
    return game_view(session.id, session.state)


@router.delete("/games/{game_id}")
async def delete_game(game_id: str, sessions: SessionStore = Depends(get_sessions)):
    """Forget a game. Finished runs stay in the archive."""
    if not sessions.discard(game_id):
        raise HTTPException(404, "Game not found")
    return {"ok": True}


@router.post("/games/{game_id}/start")
async def retry_start(game_id: str, sessions: SessionStore = Depends(get_sessions)):
    """Retry the opening scene after it failed."""
    session = _session_or_404(sessions, game_id)
    try:
        await session.start()
    except InvalidTransition as e:
        raise HTTPException(409, str(e))
    except (LLMError, PromptError) as e:
        raise _generation_failed(session, e)
    return game_view(session.id, session.state)


@router.post("/games/{game_id}/actions")
async def submit_action(
    game_id: str, body: ActionBody, sessions: SessionStore = Depends(get_sessions),
):
    """Submit one player action and return the updated game."""
    session = _session_or_404(sessions, game_id)
    try:
        await session.submit(body.action)
    except ValueError as e:
        raise HTTPException(400, str(e))
    except InvalidTransition as e:
        raise HTTPException(409, str(e))
    except (LLMError, PromptError) as e:
        raise _generation_failed(session, e)
    return game_view(session.id, session.state)


@router.post("/games/{game_id}/restart")
async def restart_game(game_id: str, sessions: SessionStore = Depends(get_sessions)):
    """Play again: reset the session to a fresh game."""
    session = _session_or_404(sessions, game_id)
    try:
        await session.restart()
    except InvalidTransition as e:
        raise HTTPException(409, str(e))
    except (LLMError, PromptError) as e:
        raise _generation_failed(session, e)
    return game_view(session.id, session.state)
