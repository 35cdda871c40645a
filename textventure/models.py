"""Core domain models.

The generation flows, the game reducer and the run archive all operate on
these types. Pydantic is used for validation and serialisation at every data
boundary. On the wire (model replies, API responses, the archive file)
fields use camelCase; in Python they are snake_case. Both spellings are
accepted on input.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

GameStatus = Literal["win", "loss", "ongoing"]
RunStatus = Literal["win", "loss"]
Phase = Literal["loading", "awaiting_input", "submitting", "ended"]

DEFAULT_HEALTH = 100
DEFAULT_ATTRIBUTE = 10


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def dedupe(items: list[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence's position."""
    return list(dict.fromkeys(items))


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CharacterStats(_Model):
    """The four player attributes. Always reported together."""

    health: int
    strength: int
    agility: int
    intelligence: int

    @classmethod
    def defaults(cls) -> CharacterStats:
        return cls(
            health=DEFAULT_HEALTH,
            strength=DEFAULT_ATTRIBUTE,
            agility=DEFAULT_ATTRIBUTE,
            intelligence=DEFAULT_ATTRIBUTE,
        )


class InitialScene(_Model):
    scene_description: str


class NarrateActionInput(_Model):
    """Everything the narrator sees for one turn."""

    action: str = Field(min_length=1)
    previous_narrative: str
    inventory: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    character_stats: CharacterStats = Field(default_factory=CharacterStats.defaults)
    turn_count: int = Field(default=1, ge=1)


class TurnResult(_Model):
    """The narrator's verdict on one action."""

    narrative: str
    game_over: bool
    game_status: GameStatus
    feedback: str | None = None
    updated_inventory: list[str] | None = None
    updated_skills: list[str] | None = None
    updated_character_stats: CharacterStats | None = None


class RunRecord(_Model):
    """One finished run as stored in the archive. Never mutated."""

    id: str
    start_time: str
    end_time: str
    narratives: list[str]
    status: RunStatus
    turns: int
    final_feedback: str | None = None
    final_inventory: list[str] = Field(default_factory=list)
    final_skills: list[str] = Field(default_factory=list)
    final_character_stats: CharacterStats | None = None


class GameState(_Model):
    """In-memory state of the running session.

    Only GameSession mutates it; starting a new game replaces it wholesale.
    """

    phase: Phase = "loading"
    narrative_log: list[str] = Field(default_factory=list)
    inventory: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    stats: CharacterStats = Field(default_factory=CharacterStats.defaults)
    turn_count: int = Field(default=1, ge=1)
    ended: bool = False
    result: RunStatus | None = None
    feedback: str | None = None
    start_time: str = Field(default_factory=utcnow)
    error: str | None = None
    pending_input: str | None = None
    warning: str | None = None

    @field_validator("inventory", "skills")
    @classmethod
    def _unique_names(cls, value: list[str]) -> list[str]:
        return dedupe(value)
