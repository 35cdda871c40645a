"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, settings, check-connection), games
(create, view, act, restart) and runs (past-run history).

In-progress games live in the SessionStore on app.state; finished runs are
read from the JSON run archive.
"""

from fastapi import APIRouter

from .games import router as games_router
from .runs import router as runs_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(games_router)
router.include_router(runs_router)
