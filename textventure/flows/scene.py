"""Initial scene generation."""

import logging

from pydantic import ValidationError

from textventure.llm import LLM, LLMError
from textventure.models import InitialScene
from textventure.prompts import SCENE_TEMPLATE, render_prompt

from .parsing import parse_json_object

logger = logging.getLogger(__name__)


async def generate_initial_scene(
    llm: LLM, world_prompt: str, template: str | None = None,
) -> InitialScene:
    """Ask the model for the opening scene of a run.

    Expects {"sceneDescription": ...}; plain prose is accepted as the
    description too. An empty reply raises LLMError.
    """
    prompt = render_prompt(template or SCENE_TEMPLATE, {"world": world_prompt})
    output = await llm("scene", prompt)

    data = parse_json_object(output)
    if data is not None:
        try:
            scene = InitialScene.model_validate(data)
        except ValidationError as e:
            raise LLMError(f"Scene reply does not match the expected shape: {e}") from e
    else:
        scene = InitialScene(scene_description=output.strip())

    if not scene.scene_description.strip():
        raise LLMError("Scene generator returned an empty description")
    return scene
