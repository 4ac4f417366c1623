"""
Game stores: load-by-id, save-by-id, create and delete, plus a per-game lock.

The engine assumes exclusive access to a state for the duration of one call;
API handlers hold store.lock(game_id) around each load-apply-save cycle.
Stored states are JSON snapshots, so a returned GameState never aliases what is stored.
"""

import json
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Protocol

from backend.engine.state import GameState

from .database import SessionLocal, init_db
from .models import Game as GameModel


class GameStore(Protocol):
    def create(self, state: GameState) -> str: ...

    def get(self, game_id: str) -> GameState | None: ...

    def put(self, game_id: str, state: GameState) -> bool: ...

    def delete(self, game_id: str) -> bool: ...

    def lock(self, game_id: str): ...


class _LockEntry:
    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class _GameLocks:
    """
    One lock per game id while someone holds or waits on it.
    An entry is dropped when its last user releases it, so ids that were never
    found (or were deleted) do not accumulate.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, _LockEntry] = {}

    @contextmanager
    def lock(self, game_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(game_id)
            if entry is None:
                entry = self._locks[game_id] = _LockEntry()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[game_id]


def new_game_id() -> str:
    return str(uuid.uuid4())


class InMemoryGameStore(_GameLocks):
    """Process-local store. Games are lost on restart."""

    def __init__(self):
        super().__init__()
        self._games: dict[str, str] = {}

    def create(self, state: GameState) -> str:
        game_id = new_game_id()
        self._games[game_id] = state.to_json(indent=None)
        return game_id

    def get(self, game_id: str) -> GameState | None:
        raw = self._games.get(game_id)
        if raw is None:
            return None
        return GameState.from_json(raw)

    def put(self, game_id: str, state: GameState) -> bool:
        """Replace a stored game. Returns False if the id is unknown."""
        if game_id not in self._games:
            return False
        self._games[game_id] = state.to_json(indent=None)
        return True

    def delete(self, game_id: str) -> bool:
        return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        return len(self._games)


class SqlGameStore(_GameLocks):
    """
    Games persisted in the `games` table (SQLite by default, DATABASE_URL otherwise).
    Locks are per process; multiple API workers would need a database-level lock.
    """

    def __init__(self, session_factory=SessionLocal, create_tables: bool = True):
        super().__init__()
        self._session_factory = session_factory
        if create_tables:
            init_db(session_factory)

    @staticmethod
    def _write(row: GameModel, state: GameState) -> None:
        row.game_state = json.dumps(state.to_dict())
        row.turn = state.turn
        row.game_over = state.game_over
        row.winner = state.winner
        row.updated_at = datetime.utcnow()

    def create(self, state: GameState) -> str:
        game_id = new_game_id()
        db = self._session_factory()
        try:
            row = GameModel(id=game_id)
            self._write(row, state)
            db.add(row)
            db.commit()
        finally:
            db.close()
        return game_id

    def get(self, game_id: str) -> GameState | None:
        db = self._session_factory()
        try:
            row = db.query(GameModel).filter(GameModel.id == game_id).first()
            if not row:
                return None
            return GameState.from_json(row.game_state)
        finally:
            db.close()

    def put(self, game_id: str, state: GameState) -> bool:
        db = self._session_factory()
        try:
            row = db.query(GameModel).filter(GameModel.id == game_id).first()
            if not row:
                return False
            self._write(row, state)
            db.commit()
            return True
        finally:
            db.close()

    def delete(self, game_id: str) -> bool:
        db = self._session_factory()
        try:
            row = db.query(GameModel).filter(GameModel.id == game_id).first()
            if not row:
                return False
            db.delete(row)
            db.commit()
        finally:
            db.close()
        return True


def create_store(kind: str) -> GameStore:
    """Build the store named by backend.config.GAME_STORE ("sql" or "memory")."""
    if kind == "memory":
        return InMemoryGameStore()
    if kind == "sql":
        return SqlGameStore()
    raise ValueError(f"Unknown game store: {kind}")
