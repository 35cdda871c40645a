"""Generation flows: one LLM call each, typed input and output.

  scene     — world prompt → opening scene description
  narrator  — player action + state → TurnResult, then the enforced
              corrections (gameOver ⇒ terminal status, health ≤ 0 ⇒ loss)
"""

from .narrator import correct_turn_result, narrate_action  # noqa: F401
from .parsing import parse_json_object  # noqa: F401
from .scene import generate_initial_scene  # noqa: F401
