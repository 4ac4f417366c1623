"""
Utility functions for the game engine.
"""

from collections import Counter

from backend.config import (
    DEFAULT_MAP_HEIGHT,
    DEFAULT_MAP_WIDTH,
    DEFAULT_TARGET_CITIES,
    START_REVEAL_RADIUS,
)
from backend.engine import AI, HUMAN, NEUTRAL, WATER
from backend.engine.definitions import UNIT_DEFS, get_unit_def
from backend.engine.events import GameEvent, city_captured
from backend.engine.map_gen import generate_map
from backend.engine.rng import SeededRandom
from backend.engine.state import City, GameState, Unit
from backend.engine.visibility import create_fog, reveal

# 8-neighborhood, scanned row by row (top-left first)
NEIGHBOR_OFFSETS = [
    (dx, dy)
    for dy in (-1, 0, 1)
    for dx in (-1, 0, 1)
    if (dx, dy) != (0, 0)
]


def in_bounds(state: GameState, x: int, y: int) -> bool:
    return 0 <= x < state.width and 0 <= y < state.height


def manhattan(ax: int, ay: int, bx: int, by: int) -> int:
    return abs(ax - bx) + abs(ay - by)


def neighbors(state: GameState, x: int, y: int) -> list[tuple[int, int]]:
    """In-bounds tiles of the 8-neighborhood."""
    return [
        (x + dx, y + dy)
        for dx, dy in NEIGHBOR_OFFSETS
        if in_bounds(state, x + dx, y + dy)
    ]


def get_unit(state: GameState, unit_id: str) -> Unit | None:
    for unit in state.units:
        if unit.id == unit_id:
            return unit
    return None


def get_city(state: GameState, city_id: str) -> City | None:
    for city in state.cities:
        if city.id == city_id:
            return city
    return None


def unit_at(state: GameState, x: int, y: int) -> Unit | None:
    for unit in state.units:
        if unit.x == x and unit.y == y:
            return unit
    return None


def city_at(state: GameState, x: int, y: int) -> City | None:
    for city in state.cities:
        if city.x == x and city.y == y:
            return city
    return None


def remove_unit(state: GameState, unit_id: str) -> None:
    state.units = [u for u in state.units if u.id != unit_id]


def count_cities(state: GameState, owner: str) -> int:
    return sum(1 for c in state.cities if c.owner == owner)


def count_units(state: GameState, owner: str, unit_type: str | None = None) -> int:
    return sum(
        1 for u in state.units
        if u.owner == owner and (unit_type is None or u.unit_type == unit_type)
    )


def create_unit(state: GameState, owner: str, unit_type: str, x: int, y: int) -> Unit:
    """Create a unit with its full movement allowance and add it to the state."""
    unit = Unit(
        id=state.generate_unit_id(owner, unit_type),
        x=x,
        y=y,
        unit_type=unit_type,
        owner=owner,
        moves=get_unit_def(unit_type).movement,
    )
    state.units.append(unit)
    return unit


def capture_city_at(state: GameState, x: int, y: int, new_owner: str) -> tuple[City | None, list[GameEvent]]:
    """
    Transfer the city on (x, y) to new_owner if it belongs to someone else.
    Production orders, queue, and default production do not survive the capture.
    Returns (captured_city or None, events).
    """
    city = city_at(state, x, y)
    if city is None or city.owner == new_owner:
        return None, []
    old_owner = city.owner
    city.owner = new_owner
    city.clear_production()
    return city, [city_captured(state.turn, city.id, x, y, old_owner, new_owner)]


def generate_initial_game_state(
    width: int = DEFAULT_MAP_WIDTH,
    height: int = DEFAULT_MAP_HEIGHT,
    target_cities: int = DEFAULT_TARGET_CITIES,
    seed: str | int | None = None,
) -> GameState:
    """
    Create a new game: generated map, one army on each player's starting city,
    and fog cleared around the human city.

    The same seed always produces the same grid, cities, and units.
    """
    rng = SeededRandom(seed)
    grid, cities = generate_map(width, height, target_cities, rng)

    state = GameState(
        turn=1,
        current_player=HUMAN,
        width=width,
        height=height,
        grid=grid,
        cities=cities,
        fog=create_fog(width, height),
        seed=rng.seed,
    )

    for owner in (HUMAN, AI):
        start_city = next((c for c in cities if c.owner == owner), None)
        if start_city:
            create_unit(state, owner, "army", start_city.x, start_city.y)

    human_city = next((c for c in cities if c.owner == HUMAN), None)
    if human_city:
        reveal(state.fog, human_city.x, human_city.y, START_REVEAL_RADIUS)

    return state


def render_map(state: GameState, show_fog: bool = True) -> str:
    """
    ASCII map. Water '~', land '.', hidden '?'. Cities: 'H' human, 'X' ai, 'O' neutral.
    Units show their type symbol, uppercase for human and lowercase for ai.
    """
    city_marks = {HUMAN: "H", AI: "X"}
    cells = [
        ["~" if tile == WATER else "." for tile in row]
        for row in state.grid
    ]
    for city in state.cities:
        cells[city.y][city.x] = city_marks.get(city.owner, "O")
    for unit in state.units:
        symbol = UNIT_DEFS[unit.unit_type].symbol
        cells[unit.y][unit.x] = symbol if unit.owner == HUMAN else symbol.lower()
    if show_fog:
        for y, row in enumerate(state.fog):
            for x, hidden in enumerate(row):
                if hidden:
                    cells[y][x] = "?"

    header = "   " + "".join(str(x % 10) for x in range(state.width))
    lines = [header]
    for y, row in enumerate(cells):
        lines.append(f"{y:2d} " + "".join(row))
    return "\n".join(lines)


def print_game_state(state: GameState, show_fog: bool = True, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        show_fog: If False, draw the whole map (debug view)
        verbose: If True, list individual units and city production
    """
    print(f"\n{'='*60}")
    status = f"Turn {state.turn} | Player: {state.current_player}"
    if state.game_over:
        status += f" | GAME OVER - {state.winner} wins"
    print(status)
    print(f"{'='*60}")
    print(render_map(state, show_fog=show_fog))

    city_counts = Counter(c.owner for c in state.cities)
    print(f"\n{'Cities':.<40}")
    for owner in (HUMAN, AI, NEUTRAL):
        print(f"  {owner}: {city_counts.get(owner, 0)}")

    if verbose:
        print(f"\n{'Units':.<40}")
        for unit in state.units:
            unit_def = UNIT_DEFS[unit.unit_type]
            print(f"  - {unit.id}: ({unit.x},{unit.y}) mv={unit.moves}/{unit_def.movement}")
        print(f"\n{'Production':.<40}")
        for city in state.cities:
            if city.owner != HUMAN:
                continue
            current = city.current_production or "idle"
            print(f"  - {city.id} ({city.x},{city.y}): {current} {city.production_progress} "
                  f"queue={city.production_queue} default={city.default_production}")
    print()
