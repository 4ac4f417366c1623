"""
Main game reducer.
Applies actions to a copy of the state, returning an ActionResult with the new
state and the events that describe what happened. The input state is never mutated.
"""

from dataclasses import dataclass, field
from typing import Any

from backend.engine.actions import Action
from backend.engine.combat import CombatResult, RandomSource
from backend.engine.events import GameEvent
from backend.engine.movement import move_unit
from backend.engine.production import (
    add_to_queue,
    produce_unit,
    remove_from_queue,
    set_default_production,
    start_production,
)
from backend.engine.state import GameState
from backend.engine.turn import end_turn

ERR_GAME_OVER = "Game is over"


@dataclass
class ActionResult:
    """
    Result of apply_action.
    On failure state is the untouched input state and events is empty.
    """
    success: bool
    state: GameState
    error: str | None = None
    events: list[GameEvent] = field(default_factory=list)
    combat: CombatResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "state": self.state.to_dict(),
            "combat": self.combat.to_dict() if self.combat else None,
            "events": [e.to_dict() for e in self.events],
        }


def apply_action(state: GameState, action: Action, rng: RandomSource | None = None) -> ActionResult:
    """
    Apply a single action to a copy of the current state.

    Args:
        state: Current game state (not mutated)
        action: Action to apply
        rng: Source for combat coin flips (moves and the opponent turn)

    Returns:
        ActionResult. Rule violations come back as success=False with an error
        message; an unknown action type raises ValueError.
    """
    if state.game_over:
        return ActionResult(success=False, state=state, error=ERR_GAME_OVER)

    new_state = state.copy()
    payload = action.payload

    if action.type == "move_unit":
        result = move_unit(new_state, payload["unit_id"], payload["target_x"], payload["target_y"], rng)
        if not result.success:
            return ActionResult(success=False, state=state, error=result.error)
        return ActionResult(success=True, state=new_state, events=result.events, combat=result.combat)

    elif action.type in ("produce_unit", "start_production"):
        handler = produce_unit if action.type == "produce_unit" else start_production
        result = handler(new_state, payload["city_id"], payload["unit_type"])
        if not result.success:
            return ActionResult(success=False, state=state, error=result.error)
        return ActionResult(success=True, state=new_state, events=result.events)

    elif action.type == "set_default_production":
        queue_result = set_default_production(new_state, payload["city_id"], payload.get("unit_type"))

    elif action.type == "add_to_queue":
        queue_result = add_to_queue(new_state, payload["city_id"], payload["unit_type"])

    elif action.type == "remove_from_queue":
        queue_result = remove_from_queue(new_state, payload["city_id"], payload["index"])

    elif action.type == "end_turn":
        turn_result = end_turn(new_state, rng)
        return ActionResult(success=True, state=turn_result.state, events=turn_result.events)

    else:
        raise ValueError(f"Unknown action type: {action.type}")

    if not queue_result.success:
        return ActionResult(success=False, state=state, error=queue_result.error)
    return ActionResult(success=True, state=new_state)
