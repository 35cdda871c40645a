"""API tests: games, runs and settings endpoints through FastAPI's TestClient."""

import json

import pytest
from fastapi.testclient import TestClient

from backend import storage
from backend.app import create_app
from backend.routes.deps import get_llm
from textventure.llm import LLMError, ScriptedLLM

SCENE = json.dumps({"sceneDescription": "A torch gutters at the dungeon mouth."})


def turn(narrative="Something stirs.", over=False, status="ongoing", **updates) -> str:
    body = {"narrative": narrative, "gameOver": over, "gameStatus": status}
    body.update(updates)
    return json.dumps(body)


@pytest.fixture
def llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture
def client(llm):
    app = create_app(storage.data_dir())
    app.dependency_overrides[get_llm] = lambda: llm
    with TestClient(app) as c:
        yield c


def _new_game(client, llm, *replies) -> dict:
    llm.queue(SCENE, *replies)
    resp = client.post("/api/games")
    assert resp.status_code == 200
    return resp.json()


# ── health / settings ────────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_roundtrip(client):
    resp = client.patch("/api/settings", json={
        "llm_connection": {"provider_url": "http://localhost:5001"},
        "world_prompt": "A haunted lighthouse.",
    })
    assert resp.status_code == 200
    settings = client.get("/api/settings").json()
    assert settings["llm_connection"]["provider_url"] == "http://localhost:5001"
    assert settings["world_prompt"] == "A haunted lighthouse."


def test_unconfigured_llm_is_a_400(monkeypatch):
    monkeypatch.delenv("LLM_PROVIDER_URL", raising=False)
    app = create_app(storage.data_dir())
    with TestClient(app) as c:
        resp = c.post("/api/games")
    assert resp.status_code == 400
    assert "not configured" in resp.json()["detail"]


# ── games ────────────────────────────────────────────────────


def test_create_game(client, llm):
    game = _new_game(client, llm)
    assert game["phase"] == "awaiting_input"
    assert game["narratives"] == ["A torch gutters at the dungeon mouth."]
    assert game["turn"] == 1
    assert game["canSubmit"] is True
    assert game["character"]["stats"] == {
        "health": 100, "strength": 10, "agility": 10, "intelligence": 10,
    }


def test_create_game_uses_configured_world_prompt(client, llm):
    storage.update_config({"world_prompt": "A sunken city."})
    _new_game(client, llm)
    assert "A sunken city." in llm.prompt(0)


def test_create_game_scene_failure_then_retry(client, llm):
    llm.queue(LLMError("down"))
    resp = client.post("/api/games")
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["game"]["phase"] == "loading"
    game_id = detail["game"]["id"]

    llm.queue(SCENE)
    resp = client.post(f"/api/games/{game_id}/start")
    assert resp.status_code == 200
    assert resp.json()["phase"] == "awaiting_input"


def test_get_game(client, llm):
    game = _new_game(client, llm)
    resp = client.get(f"/api/games/{game['id']}")
    assert resp.status_code == 200
    assert resp.json()["narratives"] == game["narratives"]


def test_unknown_game_404(client):
    assert client.get("/api/games/nope").status_code == 404
    assert client.post("/api/games/nope/actions", json={"action": "x"}).status_code == 404


def test_submit_action(client, llm):
    game = _new_game(client, llm, turn("Cobwebs and a draft.", updatedInventory=["torch"]))
    resp = client.post(f"/api/games/{game['id']}/actions", json={"action": "look around"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["turn"] == 2
    assert body["narratives"][-1] == "Cobwebs and a draft."
    assert body["character"]["inventory"] == ["torch"]


def test_blank_action_is_400(client, llm):
    game = _new_game(client, llm)
    resp = client.post(f"/api/games/{game['id']}/actions", json={"action": "  "})
    assert resp.status_code == 400


def test_generation_failure_returns_502_with_restored_input(client, llm):
    game = _new_game(client, llm, "gibberish")
    resp = client.post(f"/api/games/{game['id']}/actions", json={"action": "open the chest"})
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["game"]["pendingInput"] == "open the chest"
    assert detail["game"]["turn"] == 1
    assert detail["game"]["canSubmit"] is True
    assert "confused" in detail["message"]


def test_terminal_turn_archives_run(client, llm):
    game = _new_game(client, llm, turn("The dragon falls.", over=True, status="win", feedback="Glory!"))
    body = client.post(f"/api/games/{game['id']}/actions", json={"action": "strike"}).json()
    assert body["ended"] is True
    assert body["result"] == "win"

    resp = client.post(f"/api/games/{game['id']}/actions", json={"action": "again"})
    assert resp.status_code == 409

    runs = client.get("/api/runs").json()
    assert len(runs) == 1
    assert runs[0]["status"] == "win"
    assert runs[0]["feedback"] == "Glory!"
    assert runs[0]["turns"] == 1


def test_restart_and_history_order(client, llm):
    game = _new_game(client, llm, turn("End one.", over=True, status="loss"))
    client.post(f"/api/games/{game['id']}/actions", json={"action": "a"})

    llm.queue(SCENE, turn("End two.", over=True, status="win"))
    restarted = client.post(f"/api/games/{game['id']}/restart").json()
    assert restarted["turn"] == 1
    assert restarted["ended"] is False
    client.post(f"/api/games/{game['id']}/actions", json={"action": "b"})

    runs = client.get("/api/runs").json()
    assert [r["status"] for r in runs] == ["win", "loss"]
    assert [r["logNumber"] for r in runs] == [2, 1]
    assert runs[0]["id"] != runs[1]["id"]


def test_delete_game(client, llm):
    game = _new_game(client, llm)
    assert client.delete(f"/api/games/{game['id']}").json() == {"ok": True}
    assert client.get(f"/api/games/{game['id']}").status_code == 404


def test_new_game_replaces_previous(client, llm):
    old = _new_game(client, llm)
    llm.queue(SCENE)
    resp = client.post("/api/games", params={"replaces": old["id"]})
    assert resp.status_code == 200
    assert resp.json()["id"] != old["id"]
    assert client.get(f"/api/games/{old['id']}").status_code == 404
    assert client.get(f"/api/games/{resp.json()['id']}").status_code == 200


def test_runs_empty_when_archive_corrupt(client):
    (storage.data_dir() / "textventure-runs.json").write_text("oops")
    assert client.get("/api/runs").json() == []
