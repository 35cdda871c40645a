"""Action narration — one player action in, one TurnResult out.

The pacing rules (escalating difficulty, turn floors before a win or a loss)
live only in the prompt. After every reply two rules are enforced here:

  1. gameOver with gameStatus "ongoing" is corrected to "loss".
  2. Health at or below zero ends the game as a loss.

A third correction keeps the flag and status consistent in the other
direction: gameOver false with a terminal status is reset to "ongoing".
"""

import logging

from pydantic import ValidationError

from textventure.llm import LLM, LLMError
from textventure.models import NarrateActionInput, TurnResult
from textventure.prompts import NARRATOR_TEMPLATE, pacing_context, render_prompt

from .parsing import parse_json_object

logger = logging.getLogger(__name__)

HEALTH_DEPLETED_FEEDBACK = "Your health has reached zero. The adventure ends."


def build_narrator_context(request: NarrateActionInput) -> dict:
    return {
        "action": request.action,
        "previous_narrative": request.previous_narrative,
        "inventory": request.inventory,
        "skills": request.skills,
        "stats": request.character_stats.model_dump(),
        "turn_count": request.turn_count,
        "pacing": pacing_context(),
    }


def correct_turn_result(result: TurnResult) -> TurnResult:
    """Return a copy of `result` with the enforced game-over rules applied."""
    fixed = result.model_copy(deep=True)

    if fixed.game_over and fixed.game_status == "ongoing":
        logger.info("narrator ended the game without a verdict; recording a loss")
        fixed.game_status = "loss"
    elif not fixed.game_over and fixed.game_status != "ongoing":
        logger.info("narrator gave status %r without ending the game; ignoring it",
                    fixed.game_status)
        fixed.game_status = "ongoing"

    stats = fixed.updated_character_stats
    if stats is not None and stats.health <= 0:
        if fixed.game_status != "loss":
            logger.info("health at %d; forcing a loss", stats.health)
        fixed.game_over = True
        fixed.game_status = "loss"
        if not fixed.feedback:
            fixed.feedback = HEALTH_DEPLETED_FEEDBACK

    return fixed


async def narrate_action(
    llm: LLM, request: NarrateActionInput, template: str | None = None,
) -> TurnResult:
    """Narrate one action. Raises LLMError on transport or parse failure."""
    prompt = render_prompt(template or NARRATOR_TEMPLATE, build_narrator_context(request))
    output = await llm("narrator", prompt)

    data = parse_json_object(output)
    if data is None:
        raise LLMError("Narrator returned invalid JSON")
    try:
        result = TurnResult.model_validate(data)
    except ValidationError as e:
        raise LLMError(f"Narrator reply does not match the expected shape: {e}") from e

    return correct_turn_result(result)
