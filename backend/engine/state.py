"""
Game state representation.
Engine functions mutate the state they are given; use GameState.copy() to work on a private copy.
Includes JSON serialization for save/load functionality.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from backend.engine import HUMAN, PLAYERS


def _int(v: Any, default: int) -> int:
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def _optional_str(v: Any) -> str | None:
    return str(v) if v else None


def _ensure_str_list(value: Any) -> list[str]:
    """Ensure value is a list of strings (for production_queue from storage)."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(x) for x in value]
    return []


@dataclass
class Unit:
    """Individual unit on the map."""
    id: str  # Unique, stable for the unit's lifetime (e.g., "human_army_001")
    x: int
    y: int
    unit_type: str  # Key into UNIT_DEFS
    owner: str  # "human" or "ai"
    moves: int  # Movement remaining this turn

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "type": self.unit_type,
            "owner": self.owner,
            "moves": self.moves,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Unit":
        if not isinstance(data, dict):
            data = {}
        return cls(
            id=str(data.get("id") or ""),
            x=_int(data.get("x"), 0),
            y=_int(data.get("y"), 0),
            unit_type=str(data.get("type") or data.get("unit_type") or ""),
            owner=str(data.get("owner") or HUMAN),
            moves=_int(data.get("moves"), 0),
        )


@dataclass
class ProductionOrder:
    """A unit type a city is actively building. Its absence means the city is idle."""
    unit_type: str
    progress: int = 0  # Turns accumulated toward the type's production_time

    def to_dict(self) -> dict[str, Any]:
        return {"unit_type": self.unit_type, "progress": self.progress}


@dataclass
class City:
    """A city tile. Owner changes on capture; id and position never do."""
    id: str
    x: int
    y: int
    owner: str  # "human", "ai", or "neutral"
    production: int = 1  # Nominal yield, informational
    production_order: ProductionOrder | None = None
    default_production: str | None = None  # Restarted when idle and queue is empty
    production_queue: list[str] = field(default_factory=list)  # FIFO

    @property
    def current_production(self) -> str | None:
        return self.production_order.unit_type if self.production_order else None

    @property
    def production_progress(self) -> int:
        return self.production_order.progress if self.production_order else 0

    @property
    def is_idle(self) -> bool:
        return self.production_order is None

    def clear_production(self) -> None:
        """Drop the active order, the queue, and the default (used on capture)."""
        self.production_order = None
        self.default_production = None
        self.production_queue = []

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "owner": self.owner,
            "production": self.production,
            "current_production": self.current_production,
            "production_progress": self.production_progress,
            "default_production": self.default_production,
            "production_queue": list(self.production_queue),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "City":
        if not isinstance(data, dict):
            data = {}
        current = _optional_str(data.get("current_production"))
        order = None
        if current:
            order = ProductionOrder(
                unit_type=current,
                progress=max(0, _int(data.get("production_progress"), 0)),
            )
        return cls(
            id=str(data.get("id") or ""),
            x=_int(data.get("x"), 0),
            y=_int(data.get("y"), 0),
            owner=str(data.get("owner") or "neutral"),
            production=_int(data.get("production"), 1),
            production_order=order,
            default_production=_optional_str(data.get("default_production")),
            production_queue=_ensure_str_list(data.get("production_queue")),
        )


@dataclass
class GameState:
    """Complete game state."""
    turn: int
    current_player: str  # Always "human" between API calls
    width: int
    height: int
    grid: list[list[str]]  # grid[y][x] -> "water" | "land"; immutable after generation
    units: list[Unit] = field(default_factory=list)
    cities: list[City] = field(default_factory=list)
    fog: list[list[bool]] = field(default_factory=list)  # fog[y][x]; True = hidden
    game_over: bool = False
    winner: str | None = None
    # Seed the map was generated from (str or int), kept for reproducing a layout
    seed: str | int | None = None
    # Counter for generating unique unit IDs (owner -> last issued number)
    unit_id_counters: dict[str, int] = field(default_factory=dict)

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    def generate_unit_id(self, owner: str, unit_type: str) -> str:
        """Generate a unique id for a new unit."""
        self.unit_id_counters[owner] = self.unit_id_counters.get(owner, 0) + 1
        return f"{owner}_{unit_type}_{self.unit_id_counters[owner]:03d}"

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "turn": self.turn,
            "current_player": self.current_player,
            "width": self.width,
            "height": self.height,
            "grid": [list(row) for row in self.grid],
            "units": [u.to_dict() for u in self.units],
            "cities": [c.to_dict() for c in self.cities],
            "fog": [list(row) for row in self.fog],
            "game_over": self.game_over,
            "winner": self.winner,
            "seed": self.seed,
            "unit_id_counters": dict(self.unit_id_counters),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Create GameState from a dictionary. Grid and fog are trusted as stored."""
        grid = [list(row) for row in (data.get("grid") or [])]
        fog = [[bool(v) for v in row] for row in (data.get("fog") or [])]
        height = _int(data.get("height"), len(grid))
        width = _int(data.get("width"), len(grid[0]) if grid else 0)
        winner = data.get("winner")
        counters = data.get("unit_id_counters") or {}
        if not isinstance(counters, dict):
            counters = {}
        return cls(
            turn=max(1, _int(data.get("turn"), 1)),
            current_player=str(data.get("current_player") or HUMAN),
            width=width,
            height=height,
            grid=grid,
            units=[Unit.from_dict(u) for u in (data.get("units") or []) if isinstance(u, dict)],
            cities=[City.from_dict(c) for c in (data.get("cities") or []) if isinstance(c, dict)],
            fog=fog,
            game_over=bool(data.get("game_over", False)),
            winner=winner if winner in PLAYERS else None,
            seed=data.get("seed"),
            unit_id_counters={str(k): _int(v, 0) for k, v in counters.items()},
        )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize GameState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        """Deserialize GameState from a JSON string."""
        return cls.from_dict(json.loads(json_str))

    def save(self, filepath: str) -> None:
        """Save GameState to a JSON file."""
        with open(filepath, "w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, filepath: str) -> "GameState":
        """Load GameState from a JSON file."""
        with open(filepath, "r") as f:
            return cls.from_json(f.read())
