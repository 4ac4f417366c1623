"""
City production.

Two modes:
- Instant (produce_unit): cost check, placement, unit appears now.
- Timed (start_production + process_automatic_production): progress accumulates one
  turn per end-of-turn tick; when it reaches the unit's production_time the unit is
  placed, and the city pulls its next order from the queue (FIFO) or its default.

Cost is not spent: a player may build a unit type if it owns at least `cost` cities.
All functions mutate the state they are given.
"""

from dataclasses import dataclass, field
from typing import Any

from backend.engine import HUMAN
from backend.engine.definitions import get_unit_def, is_unit_type
from backend.engine.events import (
    GameEvent,
    production_blocked,
    production_completed,
    production_progressed,
    production_started,
    production_unaffordable,
    unit_produced,
)
from backend.engine.state import City, GameState, ProductionOrder, Unit
from backend.engine.utils import count_cities, create_unit, get_city, neighbors, unit_at

ERR_CITY_NOT_FOUND = "City not found"
ERR_NOT_CITY_OWNER = "Can only produce units in your own cities"
ERR_UNKNOWN_UNIT_TYPE = "Unknown unit type: {unit_type}"
ERR_INSUFFICIENT_CITIES = "Need at least {cost} cities to produce {unit_type}"
ERR_ALREADY_PRODUCING = "City is already producing {unit_type}"
ERR_NO_WATER_TILE = "No available water tiles adjacent to city for naval unit"
ERR_NO_LAND_TILE = "No available land tile at or adjacent to city"
ERR_INVALID_QUEUE_INDEX = "Invalid queue index"


@dataclass
class ProductionResult:
    """Result of produce_unit / start_production. unit is set when a unit was placed."""
    success: bool
    error: str | None = None
    state: GameState | None = None
    unit: Unit | None = None
    events: list[GameEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "unit": self.unit.to_dict() if self.unit else None,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass
class QueueResult:
    """Result of a queue/default mutation. city is the mutated city on success."""
    success: bool
    error: str | None = None
    city: City | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "city": self.city.to_dict() if self.city else None,
        }


def can_afford(state: GameState, owner: str, unit_type: str) -> bool:
    return count_cities(state, owner) >= get_unit_def(unit_type).cost


def _affordability_error(state: GameState, owner: str, unit_type: str) -> str | None:
    if not is_unit_type(unit_type):
        return ERR_UNKNOWN_UNIT_TYPE.format(unit_type=unit_type)
    if not can_afford(state, owner, unit_type):
        cost = get_unit_def(unit_type).cost
        return ERR_INSUFFICIENT_CITIES.format(cost=cost, unit_type=unit_type)
    return None


def find_spawn_tile(state: GameState, city: City, unit_type: str) -> tuple[int, int] | None:
    """
    Free tile for a new unit of this type, or None.
    Land units: the city tile itself, else the first free adjacent land tile.
    Naval units: the first free adjacent water tile.
    """
    unit_def = get_unit_def(unit_type)
    candidates = [] if unit_def.is_naval else [(city.x, city.y)]
    candidates.extend(neighbors(state, city.x, city.y))
    for x, y in candidates:
        if state.grid[y][x] == unit_def.terrain and unit_at(state, x, y) is None:
            return x, y
    return None


def placement_error(unit_type: str) -> str:
    return ERR_NO_WATER_TILE if get_unit_def(unit_type).is_naval else ERR_NO_LAND_TILE


def _place_unit(state: GameState, city: City, unit_type: str) -> tuple[Unit | None, str | None]:
    spawn = find_spawn_tile(state, city, unit_type)
    if spawn is None:
        return None, placement_error(unit_type)
    return create_unit(state, city.owner, unit_type, spawn[0], spawn[1]), None


def produce_unit(state: GameState, city_id: str, unit_type: str, owner: str = HUMAN) -> ProductionResult:
    """
    Instant production: the unit appears immediately with full movement.

    Validates the city exists and belongs to `owner`, that `owner` holds at least
    the unit's cost in cities, and that a legal free spawn tile exists.
    """
    city = get_city(state, city_id)
    if city is None:
        return ProductionResult(success=False, error=ERR_CITY_NOT_FOUND)
    if city.owner != owner:
        return ProductionResult(success=False, error=ERR_NOT_CITY_OWNER)
    error = _affordability_error(state, owner, unit_type)
    if error:
        return ProductionResult(success=False, error=error)

    unit, error = _place_unit(state, city, unit_type)
    if unit is None:
        return ProductionResult(success=False, error=error)
    event = unit_produced(state.turn, city.id, unit.id, unit_type, owner, unit.x, unit.y)
    return ProductionResult(success=True, state=state, unit=unit, events=[event])


def start_production(state: GameState, city_id: str, unit_type: str, owner: str = HUMAN) -> ProductionResult:
    """Timed production: the city must be idle and the unit affordable. Progress starts at 0."""
    city = get_city(state, city_id)
    if city is None:
        return ProductionResult(success=False, error=ERR_CITY_NOT_FOUND)
    if city.owner != owner:
        return ProductionResult(success=False, error=ERR_NOT_CITY_OWNER)
    if not city.is_idle:
        return ProductionResult(
            success=False,
            error=ERR_ALREADY_PRODUCING.format(unit_type=city.current_production),
        )
    error = _affordability_error(state, owner, unit_type)
    if error:
        return ProductionResult(success=False, error=error)

    city.production_order = ProductionOrder(unit_type=unit_type, progress=0)
    event = production_started(state.turn, city.id, unit_type, city.x, city.y, "order")
    return ProductionResult(success=True, state=state, events=[event])


def _pull_next_order(state: GameState, city: City) -> list[GameEvent]:
    """
    Start the next order on an idle city: queue head first (removed on pull),
    else the default (kept). An unaffordable queue head stays in the queue.
    """
    if city.production_queue:
        unit_type, source = city.production_queue[0], "queue"
    elif city.default_production:
        unit_type, source = city.default_production, "default"
    else:
        return []

    if not can_afford(state, city.owner, unit_type):
        cost = get_unit_def(unit_type).cost
        return [production_unaffordable(state.turn, city.id, unit_type, city.x, city.y, cost)]

    if source == "queue":
        city.production_queue.pop(0)
    city.production_order = ProductionOrder(unit_type=unit_type, progress=0)
    return [production_started(state.turn, city.id, unit_type, city.x, city.y, source)]


def _tick_city(state: GameState, city: City) -> list[GameEvent]:
    order = city.production_order
    if order is None:
        return _pull_next_order(state, city)

    required = get_unit_def(order.unit_type).production_time
    # Capped so a blocked city keeps exactly the turns it needs and retries next tick.
    order.progress = min(order.progress + 1, required)
    if order.progress < required:
        return [production_progressed(
            state.turn, city.id, order.unit_type, city.x, city.y, order.progress, required
        )]

    unit, error = _place_unit(state, city, order.unit_type)
    if unit is None:
        return [production_blocked(state.turn, city.id, order.unit_type, city.x, city.y, error)]

    city.production_order = None
    events = [production_completed(state.turn, city.id, unit.id, unit.unit_type, unit.x, unit.y)]
    events.extend(_pull_next_order(state, city))
    return events


def process_automatic_production(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """
    End-of-turn production tick for human cities, in city order.

    Producing cities advance by one turn and deploy on reaching the unit's
    production_time; a city with no free spawn tile keeps its progress and retries
    next turn. Idle cities start their next queued or default order.
    """
    events: list[GameEvent] = []
    for city in state.cities:
        if city.owner == HUMAN:
            events.extend(_tick_city(state, city))
    return state, events


# ===== Queue management =====

def _owned_city(state: GameState, city_id: str, owner: str) -> tuple[City | None, str | None]:
    city = get_city(state, city_id)
    if city is None:
        return None, ERR_CITY_NOT_FOUND
    if city.owner != owner:
        return None, ERR_NOT_CITY_OWNER
    return city, None


def set_default_production(
    state: GameState, city_id: str, unit_type: str | None, owner: str = HUMAN
) -> QueueResult:
    """Overwrite the city's default production; None clears it."""
    city, error = _owned_city(state, city_id, owner)
    if city is None:
        return QueueResult(success=False, error=error)
    if unit_type is not None and not is_unit_type(unit_type):
        return QueueResult(success=False, error=ERR_UNKNOWN_UNIT_TYPE.format(unit_type=unit_type))
    city.default_production = unit_type
    return QueueResult(success=True, city=city)


def add_to_queue(state: GameState, city_id: str, unit_type: str, owner: str = HUMAN) -> QueueResult:
    city, error = _owned_city(state, city_id, owner)
    if city is None:
        return QueueResult(success=False, error=error)
    if not is_unit_type(unit_type):
        return QueueResult(success=False, error=ERR_UNKNOWN_UNIT_TYPE.format(unit_type=unit_type))
    city.production_queue.append(unit_type)
    return QueueResult(success=True, city=city)


def remove_from_queue(state: GameState, city_id: str, index: int, owner: str = HUMAN) -> QueueResult:
    city, error = _owned_city(state, city_id, owner)
    if city is None:
        return QueueResult(success=False, error=error)
    if not 0 <= index < len(city.production_queue):
        return QueueResult(success=False, error=ERR_INVALID_QUEUE_INDEX)
    city.production_queue.pop(index)
    return QueueResult(success=True, city=city)
