"""
Action definitions for the game.
Actions are plain instructions from the human player; the reducer applies them.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Action:
    """Base action class. All actions have a type and a payload."""
    type: str  # e.g., "move_unit", "produce_unit", "start_production", "end_turn"
    payload: dict  # Action-specific data

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": dict(self.payload)}


def move_unit(unit_id: str, target_x: int, target_y: int) -> Action:
    """
    Move a unit one tile. Moving onto an enemy unit attacks it.
    Example: move_unit("human_army_001", 6, 5)
    """
    return Action(
        type="move_unit",
        payload={"unit_id": unit_id, "target_x": target_x, "target_y": target_y},
    )


def produce_unit(city_id: str, unit_type: str) -> Action:
    """Instant production: the unit appears now at or next to the city."""
    return Action(
        type="produce_unit",
        payload={"city_id": city_id, "unit_type": unit_type},
    )


def start_production(city_id: str, unit_type: str) -> Action:
    """
    Timed production. The city must be idle; the unit is deployed by the
    end-of-turn tick once its production_time has elapsed.
    """
    return Action(
        type="start_production",
        payload={"city_id": city_id, "unit_type": unit_type},
    )


def set_default_production(city_id: str, unit_type: str | None) -> Action:
    """Unit type the city restarts whenever it goes idle with an empty queue. None clears it."""
    return Action(
        type="set_default_production",
        payload={"city_id": city_id, "unit_type": unit_type},
    )


def add_to_queue(city_id: str, unit_type: str) -> Action:
    return Action(
        type="add_to_queue",
        payload={"city_id": city_id, "unit_type": unit_type},
    )


def remove_from_queue(city_id: str, index: int) -> Action:
    return Action(
        type="remove_from_queue",
        payload={"city_id": city_id, "index": index},
    )


def end_turn() -> Action:
    """End the human turn: production tick, opponent turn, victory check."""
    return Action(type="end_turn", payload={})
