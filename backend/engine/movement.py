"""
Human unit movement.
Single-tile steps only (Manhattan distance 1), checked in a fixed order; the first failed check is reported.
The AI moves its units through backend.engine.ai, not through move_unit.
"""

from dataclasses import dataclass, field
from typing import Any

from backend.config import MOVE_REVEAL_RADIUS
from backend.engine import HUMAN
from backend.engine.combat import CombatResult, RandomSource, resolve_combat
from backend.engine.definitions import get_unit_def, is_terrain_legal
from backend.engine.events import GameEvent, fog_revealed, unit_moved
from backend.engine.rng import SeededRandom
from backend.engine.state import GameState, Unit
from backend.engine.utils import capture_city_at, get_unit, in_bounds, manhattan, unit_at
from backend.engine.visibility import reveal

ERR_UNIT_NOT_FOUND = "Unit not found"
ERR_NOT_OWNER = "Can only move your own units"
ERR_OUT_OF_BOUNDS = "Target position is out of bounds"
ERR_NOT_ADJACENT = "Can only move to adjacent tiles"
ERR_NO_MOVES = "Unit has no moves left"
ERR_LAND_ON_WATER = "Land units cannot move onto water"
ERR_NAVAL_ON_LAND = "Naval units cannot move onto land"
ERR_FRIENDLY_UNIT = "Cannot move onto friendly unit"


@dataclass
class MoveResult:
    """Result of a move request. state is set on success."""
    success: bool
    error: str | None = None
    state: GameState | None = None
    combat: CombatResult | None = None
    events: list[GameEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "combat": self.combat.to_dict() if self.combat else None,
            "events": [e.to_dict() for e in self.events],
        }


def terrain_error(unit_type: str) -> str:
    return ERR_NAVAL_ON_LAND if get_unit_def(unit_type).is_naval else ERR_LAND_ON_WATER


def can_occupy(state: GameState, unit_type: str, x: int, y: int) -> bool:
    """Terrain check only; occupancy is handled separately."""
    return in_bounds(state, x, y) and is_terrain_legal(unit_type, state.grid[y][x])


def _validate_move(state: GameState, unit: Unit | None, target_x: int, target_y: int) -> str | None:
    if unit is None:
        return ERR_UNIT_NOT_FOUND
    if unit.owner != HUMAN:
        return ERR_NOT_OWNER
    if not in_bounds(state, target_x, target_y):
        return ERR_OUT_OF_BOUNDS
    if manhattan(unit.x, unit.y, target_x, target_y) > 1:
        return ERR_NOT_ADJACENT
    if unit.moves < 1:
        return ERR_NO_MOVES
    if not is_terrain_legal(unit.unit_type, state.grid[target_y][target_x]):
        return terrain_error(unit.unit_type)
    return None


def _arrive(state: GameState, unit: Unit, distance: int) -> list[GameEvent]:
    """Spend move points and clear fog around the unit's new position."""
    unit.moves -= distance
    revealed = reveal(state.fog, unit.x, unit.y, MOVE_REVEAL_RADIUS)
    if revealed:
        return [fog_revealed(state.turn, unit.x, unit.y, MOVE_REVEAL_RADIUS, revealed)]
    return []


def move_unit(
    state: GameState,
    unit_id: str,
    target_x: int,
    target_y: int,
    rng: RandomSource | None = None,
) -> MoveResult:
    """
    Move a human unit one tile, attacking an enemy unit standing there.
    Mutates state in place; on failure nothing is changed.

    Args:
        state: Game state (mutated)
        unit_id: Id of the unit to move
        target_x, target_y: Destination tile
        rng: Source for the combat coin flip (defaults to an unseeded SeededRandom)
    """
    unit = get_unit(state, unit_id)
    error = _validate_move(state, unit, target_x, target_y)
    if error:
        return MoveResult(success=False, error=error)

    distance = manhattan(unit.x, unit.y, target_x, target_y)
    occupant = unit_at(state, target_x, target_y)

    if occupant is not None:
        if occupant.owner == unit.owner:
            return MoveResult(success=False, error=ERR_FRIENDLY_UNIT)
        combat, events = resolve_combat(state, unit, occupant, rng or SeededRandom())
        if combat.attacker_wins:
            events.extend(_arrive(state, unit, distance))
        return MoveResult(success=True, state=state, combat=combat, events=events)

    from_pos = (unit.x, unit.y)
    unit.x = target_x
    unit.y = target_y
    events = [unit_moved(state.turn, unit.id, unit.unit_type, unit.owner, from_pos, (target_x, target_y))]
    events.extend(_arrive(state, unit, distance))
    _, capture_events = capture_city_at(state, target_x, target_y, unit.owner)
    events.extend(capture_events)
    return MoveResult(success=True, state=state, events=events)
