"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from typing import Any

from backend.engine import AI, HUMAN, NEUTRAL
from backend.engine.definitions import UNIT_DEFS, get_unit_def
from backend.engine.movement import can_occupy
from backend.engine.production import can_afford
from backend.engine.state import GameState
from backend.engine.utils import count_cities, get_unit, unit_at

# Single-step destinations for human moves (Manhattan distance 1)
STEP_OFFSETS = [(0, -1), (-1, 0), (1, 0), (0, 1)]


def get_available_action_types(state: GameState) -> list[str]:
    if state.game_over:
        return []
    return [
        "move_unit",
        "produce_unit",
        "start_production",
        "set_default_production",
        "add_to_queue",
        "remove_from_queue",
        "end_turn",
    ]


def get_movable_units(state: GameState, owner: str = HUMAN) -> list[dict[str, Any]]:
    """
    Get all units for an owner that can still move (moves > 0).
    Returns list of {id, type, x, y, moves}.
    """
    return [
        {"id": u.id, "type": u.unit_type, "x": u.x, "y": u.y, "moves": u.moves}
        for u in state.units
        if u.owner == owner and u.moves > 0
    ]


def get_unit_move_targets(state: GameState, unit_id: str) -> list[dict[str, Any]]:
    """
    Legal single-step destinations for a unit.
    Returns list of {x, y, attack}; attack is True when an enemy unit stands there.
    Empty if the unit does not exist or has no moves left.
    """
    unit = get_unit(state, unit_id)
    if unit is None or unit.moves < 1:
        return []

    targets = []
    for dx, dy in STEP_OFFSETS:
        x, y = unit.x + dx, unit.y + dy
        if not can_occupy(state, unit.unit_type, x, y):
            continue
        occupant = unit_at(state, x, y)
        if occupant is not None and occupant.owner == unit.owner:
            continue
        targets.append({"x": x, "y": y, "attack": occupant is not None})
    return targets


def get_producible_unit_types(state: GameState, owner: str = HUMAN) -> list[str]:
    """Unit types the owner currently holds enough cities to build, cheapest first."""
    return [
        unit_type
        for unit_type in sorted(UNIT_DEFS, key=lambda t: (UNIT_DEFS[t].cost, t))
        if can_afford(state, owner, unit_type)
    ]


def get_player_stats(state: GameState) -> dict[str, dict[str, int]]:
    """
    Per-player stats for the UI.
    production_per_turn is the summed production rate of owned cities.
    """
    stats: dict[str, dict[str, int]] = {}
    for owner in (HUMAN, AI):
        owned_units = [u for u in state.units if u.owner == owner]
        naval = sum(1 for u in owned_units if get_unit_def(u.unit_type).is_naval)
        stats[owner] = {
            "cities": count_cities(state, owner),
            "units": len(owned_units),
            "armies": sum(1 for u in owned_units if u.unit_type == "army"),
            "naval_units": naval,
            "production_per_turn": sum(c.production for c in state.cities if c.owner == owner),
        }
    stats[NEUTRAL] = {"cities": count_cities(state, NEUTRAL)}
    return stats


def get_available_actions(state: GameState) -> dict[str, Any]:
    """
    Everything the human can do right now: movable units with their targets, and
    per-city production options.
    """
    units = []
    for entry in get_movable_units(state, HUMAN):
        entry["targets"] = get_unit_move_targets(state, entry["id"])
        units.append(entry)

    producible = get_producible_unit_types(state, HUMAN)
    cities = [
        {
            "id": city.id,
            "x": city.x,
            "y": city.y,
            "current_production": city.current_production,
            "production_progress": city.production_progress,
            "can_start_production": city.is_idle,
            "producible_unit_types": producible,
        }
        for city in state.cities
        if city.owner == HUMAN
    ]

    return {
        "action_types": get_available_action_types(state),
        "movable_units": units,
        "cities": cities,
    }


def get_game_summary(state: GameState) -> dict[str, Any]:
    """
    Get a summary of the current game state for UI display.
    """
    return {
        "turn": state.turn,
        "current_player": state.current_player,
        "game_over": state.game_over,
        "winner": state.winner,
        "total_cities": len(state.cities),
        "players": get_player_stats(state),
        "available_actions": get_available_action_types(state),
    }
