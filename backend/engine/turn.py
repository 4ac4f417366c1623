"""
End-of-turn orchestration.

One transition per "end turn" request, always in this order:
1. Restore move points of human units
2. Automatic production tick for human cities
3. AI turn (movement, then production)
4. Advance the turn counter
5. Hand the turn back to the human
6. Victory check (game_over/winner are set once and never cleared)
"""

from dataclasses import dataclass, field
from typing import Any

from backend.engine import AI, HUMAN
from backend.engine.ai import perform_ai_turn
from backend.engine.combat import RandomSource
from backend.engine.definitions import get_unit_def
from backend.engine.events import GameEvent, turn_ended, victory
from backend.engine.production import process_automatic_production
from backend.engine.rng import SeededRandom
from backend.engine.state import GameState
from backend.engine.utils import count_cities
from backend.engine.victory import check_victory_conditions


@dataclass
class TurnResult:
    state: GameState
    events: list[GameEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.to_dict(),
            "events": [e.to_dict() for e in self.events],
        }


def reset_moves(state: GameState, owner: str = HUMAN) -> None:
    """Restore every unit of `owner` to its type's full movement allowance."""
    for unit in state.units:
        if unit.owner == owner:
            unit.moves = get_unit_def(unit.unit_type).movement


def end_turn(state: GameState, rng: RandomSource | None = None) -> TurnResult:
    """
    Run one full end-of-turn transition, mutating state in place.

    Events: human production first, then the AI turn, then the turn change and
    (if the game just ended) the victory.
    """
    rng = rng or SeededRandom()
    events: list[GameEvent] = []

    reset_moves(state, HUMAN)

    state, production_events = process_automatic_production(state)
    events.extend(production_events)

    state, ai_events = perform_ai_turn(state, rng)
    events.extend(ai_events)

    finished_turn = state.turn
    state.turn += 1
    state.current_player = HUMAN
    events.append(turn_ended(finished_turn, state.turn))

    result = check_victory_conditions(state)
    if result.game_over and not state.game_over:
        state.game_over = True
        state.winner = result.winner
        events.append(victory(
            state.turn,
            result.winner,
            {HUMAN: count_cities(state, HUMAN), AI: count_cities(state, AI)},
            len(state.cities),
        ))

    return TurnResult(state=state, events=events)
