"""Past-run history endpoint."""

from fastapi import APIRouter

from backend import storage
from textventure.presentation import history_view

router = APIRouter()


@router.get("/runs")
async def list_runs():
    """Finished runs, newest first."""
    return history_view(storage.get_archive().load_all())
