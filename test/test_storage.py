"""
Game stores: in-memory snapshots and the SQLAlchemy-backed store.
"""

import threading

import pytest
from backend.api.database import create_session_factory, resolve_database_url
from backend.api.models import Game as GameModel
from backend.api.storage import InMemoryGameStore, SqlGameStore, create_store
from backend.engine.utils import generate_initial_game_state


@pytest.fixture
def sql_store():
    return SqlGameStore(session_factory=create_session_factory("sqlite://"))


@pytest.fixture(params=["memory", "sql"])
def store(request, sql_store):
    return InMemoryGameStore() if request.param == "memory" else sql_store


def _state():
    return generate_initial_game_state(width=12, height=10, target_cities=4, seed="store")


def test_create_get(store):
    state = _state()
    game_id = store.create(state)
    assert store.get(game_id).to_dict() == state.to_dict()
    assert store.get("missing") is None


def test_returned_state_is_a_copy(store):
    state = _state()
    game_id = store.create(state)
    loaded = store.get(game_id)
    loaded.turn = 99
    state.turn = 42
    assert store.get(game_id).turn == 1


def test_put_replaces_known_games_only(store):
    state = _state()
    game_id = store.create(state)
    state.turn = 5
    assert store.put(game_id, state)
    assert store.get(game_id).turn == 5
    assert not store.put("missing", state)


def test_delete(store):
    game_id = store.create(_state())
    assert store.delete(game_id)
    assert store.get(game_id) is None
    assert not store.delete(game_id)


def test_sql_store_denormalizes_columns(sql_store):
    state = _state()
    state.turn = 3
    state.game_over = True
    state.winner = "human"
    game_id = sql_store.create(state)

    db = sql_store._session_factory()
    try:
        row = db.query(GameModel).filter(GameModel.id == game_id).first()
        assert (row.turn, row.game_over, row.winner) == (3, True, "human")
    finally:
        db.close()


def test_lock_serializes_updates_per_game():
    store = InMemoryGameStore()
    game_id = store.create(_state())

    def bump():
        for _ in range(20):
            with store.lock(game_id):
                state = store.get(game_id)
                state.turn += 1
                store.put(game_id, state)

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.get(game_id).turn == 81


def test_locks_are_per_game():
    store = InMemoryGameStore()
    with store.lock("a"):
        with store.lock("b"):
            pass


def test_create_store():
    assert isinstance(create_store("memory"), InMemoryGameStore)
    with pytest.raises(ValueError):
        create_store("redis")


def test_database_url_resolution():
    assert resolve_database_url(None).startswith("sqlite:///")
    assert resolve_database_url("postgres://u:p@host/db") == "postgresql://u:p@host/db"
    assert resolve_database_url("postgresql://u:p@host/db") == "postgresql://u:p@host/db"


def test_lock_entries_are_dropped_after_release(store):
    with store.lock("never-created"):
        assert "never-created" in store._locks
    assert store._locks == {}


def test_delete_under_lock_keeps_waiters_excluded():
    store = InMemoryGameStore()
    game_id = store.create(_state())
    holding = threading.Event()
    release = threading.Event()
    order = []

    def deleter():
        with store.lock(game_id):
            holding.set()
            store.delete(game_id)
            release.wait(timeout=5)
            order.append("deleter")

    def waiter():
        holding.wait(timeout=5)
        with store.lock(game_id):
            order.append("waiter")

    first = threading.Thread(target=deleter)
    second = threading.Thread(target=waiter)
    first.start()
    second.start()
    holding.wait(timeout=5)
    # The deleted game's entry survives while it is held, so a late caller shares it.
    assert game_id in store._locks
    release.set()
    first.join()
    second.join()
    assert order == ["deleter", "waiter"]
    assert store._locks == {}
