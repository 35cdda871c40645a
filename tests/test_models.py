"""Tests for textventure.models."""

import pytest
from pydantic import ValidationError

from textventure.models import (
    CharacterStats,
    GameState,
    NarrateActionInput,
    RunRecord,
    TurnResult,
)


class TestCharacterStats:
    def test_defaults(self) -> None:
        stats = CharacterStats.defaults()
        assert stats.model_dump() == {
            "health": 100, "strength": 10, "agility": 10, "intelligence": 10,
        }

    def test_all_four_fields_required(self) -> None:
        with pytest.raises(ValidationError):
            CharacterStats.model_validate({"health": 50, "strength": 10, "agility": 10})


class TestTurnResult:
    def test_parses_camel_case_wire_format(self) -> None:
        r = TurnResult.model_validate({
            "narrative": "The goblin flees.",
            "gameOver": False,
            "gameStatus": "ongoing",
            "updatedInventory": ["rusty key"],
            "updatedCharacterStats": {
                "health": 90, "strength": 10, "agility": 10, "intelligence": 10,
            },
        })
        assert r.game_over is False
        assert r.updated_inventory == ["rusty key"]
        assert r.updated_character_stats.health == 90
        assert r.updated_skills is None
        assert r.feedback is None

    def test_accepts_snake_case_names(self) -> None:
        r = TurnResult(narrative="x", game_over=True, game_status="win")
        assert r.game_status == "win"

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TurnResult.model_validate(
                {"narrative": "x", "gameOver": False, "gameStatus": "paused"}
            )

    def test_dump_by_alias_uses_camel_case(self) -> None:
        r = TurnResult(narrative="x", game_over=False, game_status="ongoing")
        dumped = r.model_dump(by_alias=True, exclude_none=True)
        assert dumped == {"narrative": "x", "gameOver": False, "gameStatus": "ongoing"}


class TestNarrateActionInput:
    def test_empty_action_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NarrateActionInput(action="", previous_narrative="x")

    def test_defaults(self) -> None:
        req = NarrateActionInput(action="look around", previous_narrative="x")
        assert req.turn_count == 1
        assert req.inventory == []
        assert req.character_stats == CharacterStats.defaults()


class TestGameState:
    def test_new_game_defaults(self) -> None:
        state = GameState()
        assert state.phase == "loading"
        assert state.turn_count == 1
        assert state.narrative_log == []
        assert state.inventory == []
        assert state.skills == []
        assert state.stats == CharacterStats.defaults()
        assert state.ended is False
        assert state.result is None

    def test_duplicate_names_collapsed_in_order(self) -> None:
        state = GameState(inventory=["rope", "torch", "rope"], skills=["stealth", "stealth"])
        assert state.inventory == ["rope", "torch"]
        assert state.skills == ["stealth"]


class TestRunRecord:
    def test_optional_rich_fields(self) -> None:
        rec = RunRecord.model_validate({
            "id": "a", "startTime": "2026-01-01T00:00:00+00:00",
            "endTime": "2026-01-01T00:05:00+00:00", "narratives": ["x"],
            "status": "loss", "turns": 3,
        })
        assert rec.final_character_stats is None
        assert rec.final_inventory == []
        assert rec.final_feedback is None

    def test_ongoing_is_not_a_run_status(self) -> None:
        with pytest.raises(ValidationError):
            RunRecord(
                id="a", start_time="t", end_time="t", narratives=[],
                status="ongoing", turns=1,
            )
