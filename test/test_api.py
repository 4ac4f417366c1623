"""
HTTP API against an in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from backend.api.main import app
from backend.api.storage import InMemoryGameStore
from backend.config import MAX_MAP_SIDE


@pytest.fixture
def client():
    app.state.store = InMemoryGameStore()
    return TestClient(app)


def _create(client, **options):
    body = {"width": 20, "height": 15, "target_cities": 8, "seed": "test"}
    body.update(options)
    response = client.post("/games", json=body)
    assert response.status_code == 200
    return response.json()


def _home_city(state):
    return next(c for c in state["cities"] if c["owner"] == "human")


def test_root_and_unit_types(client):
    assert client.get("/").json()["message"] == "Island Empire API"
    unit_types = client.get("/unit-types").json()
    assert unit_types["army"]["cost"] == 1
    assert unit_types["transport"]["category"] == "naval"


def test_create_game_is_deterministic(client):
    first = _create(client)
    second = _create(client)
    assert first["game_id"] != second["game_id"]
    assert first["state"]["grid"] == second["state"]["grid"]
    assert first["state"]["cities"] == second["state"]["cities"]
    assert first["state"]["player_stats"]["human"]["cities"] == 1


def test_create_game_defaults(client):
    response = client.post("/games", json={})
    assert response.status_code == 200
    state = response.json()["state"]
    assert (state["width"], state["height"]) == (20, 15)
    assert state["seed"] is not None


def test_create_game_rejects_bad_size(client):
    assert client.post("/games", json={"width": 0}).status_code == 400
    assert client.post("/games", json={"width": MAX_MAP_SIDE + 1}).status_code == 400
    assert client.post("/games", json={"width": 100000, "height": 100000}).status_code == 400


def test_get_and_delete(client):
    game_id = _create(client)["game_id"]
    response = client.get(f"/games/{game_id}")
    assert response.status_code == 200
    assert response.json()["game_id"] == game_id

    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}").status_code == 404
    assert client.delete(f"/games/{game_id}").status_code == 404


def test_unknown_game_is_404(client):
    assert client.post("/games/nope/end-turn").status_code == 404
    assert client.get("/games/nope/available-actions").status_code == 404


def test_move_errors(client):
    created = _create(client)
    game_id = created["game_id"]
    response = client.post(f"/games/{game_id}/move", json={"unit_id": "ghost", "target_x": 0, "target_y": 0})
    assert response.status_code == 404

    army = next(u for u in created["state"]["units"] if u["owner"] == "human")
    response = client.post(
        f"/games/{game_id}/move",
        json={"unit_id": army["id"], "target_x": army["x"] + 2, "target_y": army["y"]},
    )
    assert response.status_code == 400


def test_move_to_legal_target(client):
    game_id = _create(client)["game_id"]
    actions = client.get(f"/games/{game_id}/available-actions").json()
    unit = actions["movable_units"][0]
    target = next((t for t in unit["targets"] if not t["attack"]), None)
    if target is None:
        pytest.skip("starting army has no peaceful step on this map")

    response = client.post(
        f"/games/{game_id}/move",
        json={"unit_id": unit["id"], "target_x": target["x"], "target_y": target["y"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["events"]
    moved = next(u for u in body["state"]["units"] if u["id"] == unit["id"])
    assert (moved["x"], moved["y"]) == (target["x"], target["y"])


def test_production_flow(client):
    created = _create(client)
    game_id = created["game_id"]
    city_id = _home_city(created["state"])["id"]

    response = client.post(f"/games/{game_id}/produce-now", json={"city_id": city_id, "unit_type": "transport"})
    assert response.status_code == 400
    assert "Need at least 3 cities" in response.json()["detail"]

    response = client.post(f"/games/{game_id}/produce", json={"city_id": city_id, "unit_type": "army"})
    assert response.status_code == 200
    assert _home_city(response.json()["state"])["current_production"] == "army"

    response = client.post(f"/games/{game_id}/produce", json={"city_id": city_id, "unit_type": "army"})
    assert response.status_code == 400

    response = client.post(f"/games/{game_id}/produce", json={"city_id": "city_99", "unit_type": "army"})
    assert response.status_code == 404


def test_queue_endpoints(client):
    created = _create(client)
    game_id = created["game_id"]
    city_id = _home_city(created["state"])["id"]

    response = client.post(f"/games/{game_id}/add-to-queue", json={"city_id": city_id, "unit_type": "army"})
    assert _home_city(response.json()["state"])["production_queue"] == ["army"]

    response = client.post(f"/games/{game_id}/remove-from-queue", json={"city_id": city_id, "index": 4})
    assert response.status_code == 400

    response = client.post(f"/games/{game_id}/remove-from-queue", json={"city_id": city_id, "index": 0})
    assert _home_city(response.json()["state"])["production_queue"] == []

    response = client.post(
        f"/games/{game_id}/set-default-production", json={"city_id": city_id, "unit_type": "army"}
    )
    assert _home_city(response.json()["state"])["default_production"] == "army"

    response = client.post(f"/games/{game_id}/set-default-production", json={"city_id": city_id})
    assert _home_city(response.json()["state"])["default_production"] is None


def test_end_turn_advances_and_persists(client):
    game_id = _create(client)["game_id"]

    response = client.post(f"/games/{game_id}/end-turn")

    assert response.status_code == 200
    body = response.json()
    assert body["state"]["turn"] == 2
    assert body["events"][-1]["type"] in ("turn_ended", "victory")
    assert client.get(f"/games/{game_id}").json()["state"]["turn"] == 2


def test_unknown_games_leave_no_locks_behind(client):
    for n in range(50):
        game_id = f"missing-{n}"
        assert client.post(f"/games/{game_id}/end-turn").status_code == 404
        assert client.post(f"/games/{game_id}/move", json={"unit_id": "u1", "target_x": 0, "target_y": 0}).status_code == 404
        assert client.delete(f"/games/{game_id}").status_code == 404
    assert app.state.store._locks == {}
