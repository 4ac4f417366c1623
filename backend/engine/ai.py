"""
Scripted opponent.
Runs once per end of turn: first every AI unit steps toward the nearest human target,
then every AI city tries to build from a fixed priority list. Movement comes first so
units leaving a city tile free it for production in the same tick.
"""

from backend.engine import AI, HUMAN, WATER
from backend.engine.combat import RandomSource, resolve_combat
from backend.engine.definitions import get_unit_def
from backend.engine.events import GameEvent, unit_moved
from backend.engine.movement import can_occupy
from backend.engine.production import can_afford, produce_unit
from backend.engine.rng import SeededRandom
from backend.engine.state import City, GameState, Unit
from backend.engine.utils import (
    capture_city_at,
    count_cities,
    count_units,
    get_unit,
    manhattan,
    neighbors,
    unit_at,
)

# Destroyers are built once the AI holds this many cities even without a human navy.
DESTROYER_CITY_THRESHOLD = 6
# One transport per this many AI cities (at least one).
CITIES_PER_TRANSPORT = 3


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def find_nearest_target(state: GameState, unit: Unit) -> tuple[int, int] | None:
    """
    Position of the nearest human unit or city by Manhattan distance.
    Units are scanned before cities; the first minimum found wins ties.
    """
    best: tuple[int, int] | None = None
    best_distance = None
    targets = [(u.x, u.y) for u in state.units if u.owner == HUMAN]
    targets += [(c.x, c.y) for c in state.cities if c.owner == HUMAN]
    for x, y in targets:
        distance = manhattan(unit.x, unit.y, x, y)
        if best_distance is None or distance < best_distance:
            best, best_distance = (x, y), distance
    return best


def _move_unit_toward_target(state: GameState, unit: Unit, rng: RandomSource) -> list[GameEvent]:
    """
    One step toward the nearest target, on each axis independently (diagonals allowed).
    Illegal terrain, out-of-bounds, or a friendly blocker skips the unit for this turn.
    """
    target = find_nearest_target(state, unit)
    if target is None:
        return []
    new_x = unit.x + _sign(target[0] - unit.x)
    new_y = unit.y + _sign(target[1] - unit.y)
    if (new_x, new_y) == (unit.x, unit.y):
        return []
    if not can_occupy(state, unit.unit_type, new_x, new_y):
        return []

    occupant = unit_at(state, new_x, new_y)
    if occupant is not None:
        if occupant.owner != HUMAN:
            return []
        _, events = resolve_combat(state, unit, occupant, rng)
        return events

    from_pos = (unit.x, unit.y)
    unit.x = new_x
    unit.y = new_y
    events = [unit_moved(state.turn, unit.id, unit.unit_type, unit.owner, from_pos, (new_x, new_y))]
    _, capture_events = capture_city_at(state, new_x, new_y, AI)
    events.extend(capture_events)
    return events


def is_coastal(state: GameState, city: City) -> bool:
    return any(state.grid[y][x] == WATER for x, y in neighbors(state, city.x, city.y))


def has_free_water(state: GameState, city: City) -> bool:
    return any(
        state.grid[y][x] == WATER and unit_at(state, x, y) is None
        for x, y in neighbors(state, city.x, city.y)
    )


def choose_production(state: GameState, city: City) -> list[str]:
    """
    Priority-ordered unit types for an AI city:
    transport (below quota), destroyer (human navy exists or AI is large), army (city tile free).
    Naval types need a free adjacent water tile.
    """
    ai_cities = count_cities(state, AI)
    naval_ok = is_coastal(state, city) and has_free_water(state, city)
    priorities: list[str] = []

    transport_quota = max(1, ai_cities // CITIES_PER_TRANSPORT)
    if naval_ok and count_units(state, AI, "transport") < transport_quota and can_afford(state, AI, "transport"):
        priorities.append("transport")

    human_navy = any(
        u.owner == HUMAN and get_unit_def(u.unit_type).is_naval
        for u in state.units
    )
    if naval_ok and can_afford(state, AI, "destroyer") and (human_navy or ai_cities >= DESTROYER_CITY_THRESHOLD):
        priorities.append("destroyer")

    city_tile_free = unit_at(state, city.x, city.y) is None
    if city_tile_free and can_afford(state, AI, "army") and count_units(state, AI, "army") <= ai_cities:
        priorities.append("army")

    return priorities


def _produce_for_city(state: GameState, city: City) -> list[GameEvent]:
    for unit_type in choose_production(state, city):
        result = produce_unit(state, city.id, unit_type, owner=AI)
        if result.success:
            return result.events
    return []


def perform_ai_turn(state: GameState, rng: RandomSource | None = None) -> tuple[GameState, list[GameEvent]]:
    """
    Run the opponent's turn, mutating state in place.

    Args:
        state: Game state (mutated)
        rng: Source for combat coin flips (defaults to an unseeded SeededRandom)

    Returns:
        Tuple of (state, events)
    """
    rng = rng or SeededRandom()
    events: list[GameEvent] = []

    # Snapshot ids: units destroyed earlier in the loop are skipped, new ones wait a turn.
    for unit_id in [u.id for u in state.units if u.owner == AI]:
        unit = get_unit(state, unit_id)
        if unit is not None:
            events.extend(_move_unit_toward_target(state, unit, rng))

    for city in state.cities:
        if city.owner == AI:
            events.extend(_produce_for_city(state, city))

    return state, events
