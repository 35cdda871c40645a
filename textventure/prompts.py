"""Handlebars prompt templates for the scene and narrator flows."""

from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


# Advisory pacing rules, rendered into the narrator prompt. The code never
# enforces them; only the corrections in flows.narrator are enforced.
TARGET_ENCOUNTERS_MIN = 15
TARGET_ENCOUNTERS_MAX = 20
MIN_TURNS_BEFORE_WIN = 8
MIN_TURNS_BEFORE_LOSS = 6
MIN_TURNS_BEFORE_RECKLESS_LOSS = 4

INITIAL_GAME_PROMPT = (
    "The adventurer stands at the entrance of a long-forgotten dungeon, rumored "
    "to hold immense treasures and equally great dangers. The air is heavy with "
    "the scent of dust and decay."
)

SCENE_TEMPLATE = """\
You are the dungeon master of a fast-paced fantasy text adventure. The player \
types actions such as 'look around', 'attack the goblin' or 'open the chest'.

Describe the opening scene for the world below. Be vivid and brief (under 80 \
words), hint at danger or a twist, and close with a subtle suggestion of what \
the player could do next.

World: {{{world}}}

Reply with JSON only: {"sceneDescription": "<the scene>"}
"""

NARRATOR_TEMPLATE = """\
You are the dungeon master of a fast-paced fantasy text adventure. The player \
types actions such as 'look around', 'attack the goblin' or 'open the chest'.

Run a multi-stage adventure of roughly {{pacing.encounters_min}}-{{pacing.encounters_max}} \
encounters that grows harder as it goes and ends in a WIN or a LOSS.
- No WIN before turn {{pacing.min_turns_before_win}}; a win must be earned through \
puzzles, fights, and clever use of items, skills and stats.
- No LOSS in the first {{pacing.min_turns_before_loss}} turns. Early missteps cost \
health or position instead. Only an exceptionally reckless, obviously \
self-destructive action may end the game early, and never before turn \
{{pacing.min_turns_before_reckless_loss}}.
- Setbacks (injuries, traps, lost advantages) lower stats but leave room to recover.
- Items, skills and stats should matter: mention them when they are relevant.
- Health at 0 or below is always a LOSS.

Player state
Turn: {{{turn_count}}}
Previous narrative: {{{previous_narrative}}}
Inventory: {{#if inventory}}{{#each inventory}}"{{{this}}}" {{/each}}{{else}}Empty{{/if}}
Skills: {{#if skills}}{{#each skills}}"{{{this}}}" {{/each}}{{else}}None{{/if}}
Stats: Health {{{stats.health}}}, Strength {{{stats.strength}}}, \
Agility {{{stats.agility}}}, Intelligence {{{stats.intelligence}}}

Player action:
{{{action}}}

Reply with JSON only, in this shape:
{
  "narrative": "<what happens next, under 100 words>",
  "gameOver": <true|false>,
  "gameStatus": "<win|loss|ongoing>",
  "feedback": "<why the game ended, or a hint / consequence>",
  "updatedInventory": ["<full inventory, only if it changed>"],
  "updatedSkills": ["<full skill list, only if it changed>"],
  "updatedCharacterStats": {"health": 0, "strength": 0, "agility": 0, "intelligence": 0}
}
Omit updatedInventory, updatedSkills and updatedCharacterStats when nothing \
changed. When updatedCharacterStats is present it must carry all four stats.
"""

DEFAULT_TEMPLATES: dict[str, str] = {
    "scene": SCENE_TEMPLATE,
    "narrator": NARRATOR_TEMPLATE,
}


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def pacing_context() -> dict[str, int]:
    return {
        "encounters_min": TARGET_ENCOUNTERS_MIN,
        "encounters_max": TARGET_ENCOUNTERS_MAX,
        "min_turns_before_win": MIN_TURNS_BEFORE_WIN,
        "min_turns_before_loss": MIN_TURNS_BEFORE_LOSS,
        "min_turns_before_reckless_loss": MIN_TURNS_BEFORE_RECKLESS_LOSS,
    }


def resolve_templates(overrides: dict[str, str] | None) -> dict[str, str]:
    """Built-in templates with any non-empty override swapped in."""
    templates = dict(DEFAULT_TEMPLATES)
    for name, source in (overrides or {}).items():
        if name in templates and source:
            templates[name] = source
    return templates
