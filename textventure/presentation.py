"""Read-only projections of the game state and the run archive.

Nothing here mutates state; the API returns these dicts as-is and the
static page renders them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from textventure.models import CharacterStats, GameState, RunRecord

logger = logging.getLogger(__name__)

EMPTY_STATS = CharacterStats(health=0, strength=0, agility=0, intelligence=0)

_UNITS = (
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_duration(start: str, end: str) -> str:
    """Strict distance between two ISO timestamps in the largest whole unit.

    "45 seconds", "3 hours", "1 month". Returns "N/A" when either
    timestamp cannot be parsed.
    """
    try:
        delta = datetime.fromisoformat(end) - datetime.fromisoformat(start)
    except (TypeError, ValueError) as e:
        logger.warning("Cannot format duration %r → %r: %s", start, end, e)
        return "N/A"
    seconds = abs(int(delta.total_seconds()))
    name, size = next((u for u in _UNITS if seconds >= u[1]), _UNITS[-1])
    count = seconds // size
    return f"{count} {name}" if count == 1 else f"{count} {name}s"


def character_sheet(state: GameState) -> dict[str, Any]:
    return {
        "stats": state.stats.model_dump(),
        "inventory": list(state.inventory),
        "skills": list(state.skills),
    }


def game_view(session_id: str, state: GameState) -> dict[str, Any]:
    """Everything the page needs to draw the current session."""
    return {
        "id": session_id,
        "phase": state.phase,
        "narratives": list(state.narrative_log),
        "character": character_sheet(state),
        "turn": state.turn_count,
        "isLoading": state.phase in ("loading", "submitting"),
        "canSubmit": state.phase == "awaiting_input",
        "ended": state.ended,
        "result": state.result,
        "feedback": state.feedback,
        "error": state.error,
        "pendingInput": state.pending_input,
        "warning": state.warning,
    }


def history_view(runs: list[RunRecord]) -> list[dict[str, Any]]:
    """Past runs, newest first, numbered so the oldest is "Adventure Log #1"."""
    entries = []
    for number, run in reversed(list(enumerate(runs, start=1))):
        stats = run.final_character_stats or EMPTY_STATS
        entries.append({
            "id": run.id,
            "logNumber": number,
            "title": f"Adventure Log #{number}",
            "status": run.status,
            "turns": run.turns,
            "startTime": run.start_time,
            "endTime": run.end_time,
            "duration": format_duration(run.start_time, run.end_time),
            "feedback": run.final_feedback,
            "stats": stats.model_dump(),
            "inventory": list(run.final_inventory or []),
            "skills": list(run.final_skills or []),
            "narratives": list(run.narratives),
        })
    return entries
