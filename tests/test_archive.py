"""Tests for the JSON-file run archive."""

import json

from textventure.models import CharacterStats, RunRecord
from textventure.storage import JsonRunArchive


def _record(run_id: str, status: str = "loss", turns: int = 3) -> RunRecord:
    return RunRecord(
        id=run_id,
        start_time="2026-01-01T10:00:00+00:00",
        end_time="2026-01-01T10:05:00+00:00",
        narratives=["Start.", "End."],
        status=status,
        turns=turns,
        final_feedback="It ends.",
        final_inventory=["torch"],
        final_skills=[],
        final_character_stats=CharacterStats(health=0, strength=10, agility=10, intelligence=10),
    )


def test_missing_file_is_empty(tmp_path):
    assert JsonRunArchive(tmp_path / "runs.json").load_all() == []


def test_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "runs.json"
    path.write_text("{not json")
    assert JsonRunArchive(path).load_all() == []


def test_non_array_is_empty(tmp_path):
    path = tmp_path / "runs.json"
    path.write_text(json.dumps({"runs": []}))
    assert JsonRunArchive(path).load_all() == []


def test_malformed_entries_skipped(tmp_path):
    path = tmp_path / "runs.json"
    good = _record("good").model_dump(by_alias=True)
    path.write_text(json.dumps([{"id": "bad"}, good, "junk"]))
    assert [r.id for r in JsonRunArchive(path).load_all()] == ["good"]


def test_append_preserves_insertion_order(tmp_path):
    archive = JsonRunArchive(tmp_path / "runs.json")
    assert archive.append(_record("first"))
    assert archive.append(_record("second", status="win"))
    loaded = archive.load_all()
    assert [r.id for r in loaded] == ["first", "second"]
    assert loaded[1].status == "win"
    assert loaded[0] == _record("first")


def test_persisted_as_camel_case_array(tmp_path):
    path = tmp_path / "runs.json"
    JsonRunArchive(path).append(_record("a"))
    data = json.loads(path.read_text())
    assert isinstance(data, list)
    assert data[0]["finalCharacterStats"]["health"] == 0
    assert data[0]["startTime"] == "2026-01-01T10:00:00+00:00"


def test_append_creates_parent_directory(tmp_path):
    archive = JsonRunArchive(tmp_path / "nested" / "runs.json")
    assert archive.append(_record("a"))
    assert len(archive.load_all()) == 1


def test_append_failure_returns_false(tmp_path):
    # A directory where the file should be makes write_text fail
    path = tmp_path / "runs.json"
    path.mkdir()
    archive = JsonRunArchive(path)
    assert archive.append(_record("a")) is False
    assert archive.load_all() == []


def test_reloaded_by_new_instance(tmp_path):
    path = tmp_path / "runs.json"
    JsonRunArchive(path).append(_record("a"))
    assert [r.id for r in JsonRunArchive(path).load_all()] == ["a"]
