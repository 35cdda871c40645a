"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request

from backend import storage
from backend.llm import build_llm
from backend.sessions import SessionStore
from textventure.llm import LLM


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_llm() -> LLM:
    """LLM client for the configured connection. Overridden in tests."""
    try:
        return build_llm(storage.get_config())
    except ValueError as e:
        raise HTTPException(400, str(e))
