"""Health check, settings and connection check endpoints."""

import logging

import httpx
from fastapi import APIRouter

from backend import storage

from .models import CheckConnectionBody

logger = logging.getLogger(__name__)

router = APIRouter()

_CHECK_PATHS = {
    "koboldcpp": "/api/v1/model",
    "openai": "/v1/models",
    "openai_chat": "/v1/models",
}


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.post("/check-connection")
async def check_connection(body: CheckConnectionBody):
    """Quick reachability check against an LLM provider URL."""
    path = _CHECK_PATHS.get(body.provider_format, _CHECK_PATHS["koboldcpp"])
    url = f"{body.provider_url.rstrip('/')}{path}"
    headers: dict[str, str] = {}
    if body.api_key:
        headers["Authorization"] = f"Bearer {body.api_key}"
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
        return {"ok": True}
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("connection check to %s failed: %s", url, e)
        return {"ok": False}


@router.get("/settings")
async def get_settings():
    """Get app settings (LLM connection, world prompt, prompt overrides)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update app settings (partial merge)."""
    return storage.update_config(body)
