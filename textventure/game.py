"""Game state reducer — the turn loop of one play session.

Phases and transitions:

    loading ──start()──────────────▶ awaiting_input
    awaiting_input ──submit()──────▶ submitting
    submitting ──not over──────────▶ awaiting_input   (narrative appended, turn +1)
    submitting ──over / health 0───▶ ended            (run handed to the archive)
    submitting ──narrator failed───▶ awaiting_input   (input restored, nothing else changes)
    ended ──restart()──────────────▶ loading ──▶ awaiting_input

A failed start() leaves the session in loading so it can be retried.
submit() is refused in any phase but awaiting_input, and start() or
restart() is refused while an opening scene is being generated, so at
most one model request is in flight per session. A failed submit(), for
any reason, returns to awaiting_input with the action restored.
"""

from __future__ import annotations

import logging
import uuid

from textventure.flows import generate_initial_scene, narrate_action
from textventure.llm import LLM, LLMError
from textventure.models import (
    GameState,
    NarrateActionInput,
    RunRecord,
    TurnResult,
    dedupe,
    utcnow,
)
from textventure.prompts import INITIAL_GAME_PROMPT, PromptError
from textventure.storage import RunArchive

logger = logging.getLogger(__name__)

START_FAILED_MESSAGE = "Failed to start the adventure. Please try again."
NARRATION_FAILED_MESSAGE = "The Dungeon Master seems confused. Try a different action."
ARCHIVE_FAILED_WARNING = "This run could not be saved to your history."


class InvalidTransition(RuntimeError):
    """Raised when an operation is not allowed in the session's current phase."""


class GameSession:
    """Owns one GameState and applies narrator results to it.

    Args:
        archive:      Where finished runs are appended.
        llm:          The model callable used by both flows.
        world_prompt: The fixed world setting the opening scene is built from.
        templates:    Optional {"scene": ..., "narrator": ...} template sources.
    """

    def __init__(
        self,
        archive: RunArchive,
        llm: LLM,
        world_prompt: str = INITIAL_GAME_PROMPT,
        templates: dict[str, str] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.archive = archive
        self.llm = llm
        self.world_prompt = world_prompt
        self.templates = templates or {}
        self.state = GameState()
        self._scene_pending = False

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start(self) -> GameState:
        if self._scene_pending:
            raise InvalidTransition("The opening scene is already being generated")
        if self.state.phase != "loading":
            raise InvalidTransition(f"Cannot start a game in phase {self.state.phase!r}")
        state = self.state
        state.error = None
        self._scene_pending = True
        try:
            scene = await generate_initial_scene(
                self.llm, self.world_prompt, self.templates.get("scene"),
            )
        except (LLMError, PromptError) as e:
            logger.warning("session %s: initial scene failed: %s", self.id, e)
            state.error = START_FAILED_MESSAGE
            raise
        except Exception:
            logger.exception("session %s: initial scene failed unexpectedly", self.id)
            state.error = START_FAILED_MESSAGE
            raise
        finally:
            self._scene_pending = False

        state.narrative_log = [scene.scene_description]
        state.phase = "awaiting_input"
        logger.info("session %s: game started", self.id)
        return state

    async def submit(self, action: str) -> GameState:
        action = action.strip()
        if not action:
            raise ValueError("Action must not be empty")
        if self.state.phase != "awaiting_input":
            raise InvalidTransition(f"Cannot submit an action in phase {self.state.phase!r}")

        state = self.state
        state.phase = "submitting"
        state.error = None
        state.pending_input = None

        request = NarrateActionInput(
            action=action,
            previous_narrative=state.narrative_log[-1] if state.narrative_log else self.world_prompt,
            inventory=list(state.inventory),
            skills=list(state.skills),
            character_stats=state.stats.model_copy(),
            turn_count=state.turn_count,
        )
        result: TurnResult | None = None
        try:
            result = await narrate_action(self.llm, request, self.templates.get("narrator"))
        except (LLMError, PromptError) as e:
            logger.warning("session %s: narration failed on turn %d: %s",
                           self.id, state.turn_count, e)
            raise
        except Exception:
            logger.exception("session %s: narration failed unexpectedly on turn %d",
                             self.id, state.turn_count)
            raise
        finally:
            # also runs on cancellation
            if result is None:
                state.phase = "awaiting_input"
                state.pending_input = action
                state.error = NARRATION_FAILED_MESSAGE

        self._apply(result)
        return state

    async def restart(self) -> GameState:
        """Discard the current run (the archive is untouched) and start over."""
        if self.state.phase == "submitting":
            raise InvalidTransition("Cannot restart while an action is being narrated")
        if self._scene_pending:
            raise InvalidTransition("Cannot restart while the opening scene is being generated")
        self.state = GameState()
        logger.info("session %s: new game", self.id)
        return await self.start()

    # ------------------------------------------------------------------
    # Reducer
    # ------------------------------------------------------------------

    def _apply(self, result: TurnResult) -> None:
        state = self.state
        state.narrative_log.append(result.narrative)
        if result.updated_inventory is not None:
            state.inventory = dedupe(result.updated_inventory)
        if result.updated_skills is not None:
            state.skills = dedupe(result.updated_skills)
        if result.updated_character_stats is not None:
            state.stats = result.updated_character_stats.model_copy()
        state.feedback = result.feedback

        if not result.game_over:
            state.turn_count += 1
            state.phase = "awaiting_input"
            return

        state.ended = True
        state.result = result.game_status  # "win" | "loss" after correction
        state.phase = "ended"
        logger.info("session %s: game over (%s) on turn %d",
                    self.id, state.result, state.turn_count)
        if not self.archive.append(self.snapshot()):
            state.warning = ARCHIVE_FAILED_WARNING

    def snapshot(self) -> RunRecord:
        """Freeze the finished run as an archive record."""
        state = self.state
        if not state.ended or state.result is None:
            raise InvalidTransition("Only a finished game can be archived")
        return RunRecord(
            id=uuid.uuid4().hex,
            start_time=state.start_time,
            end_time=utcnow(),
            narratives=list(state.narrative_log),
            status=state.result,
            turns=state.turn_count,
            final_feedback=state.feedback,
            final_inventory=list(state.inventory),
            final_skills=list(state.skills),
            final_character_stats=state.stats.model_copy(),
        )
