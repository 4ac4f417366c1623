"""
Combat resolution system.
Empire's classic 50/50 combat: one coin flip decides, unit combat strength is not consulted.
The loser is removed; a winning attacker takes the defender's tile and any city on it.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Protocol

from backend.engine import COMBAT_WIN_CHANCE
from backend.engine.events import GameEvent, combat_resolved
from backend.engine.state import City, GameState, Unit
from backend.engine.utils import capture_city_at, remove_unit


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass
class CombatResult:
    """Outcome of one attack. Unit snapshots are taken before the fight."""
    attacker_wins: bool
    attacker_unit: Unit
    defender_unit: Unit
    captured_city: City | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {
            "attacker_wins": self.attacker_wins,
            "attacker_unit": self.attacker_unit.to_dict(),
            "defender_unit": self.defender_unit.to_dict(),
        }
        if self.captured_city is not None:
            out["captured_city"] = self.captured_city.to_dict()
        return out


def roll_attacker_wins(rng: RandomSource) -> bool:
    return rng.random() < COMBAT_WIN_CHANCE


def resolve_combat(
    state: GameState,
    attacker: Unit,
    defender: Unit,
    rng: RandomSource,
) -> tuple[CombatResult, list[GameEvent]]:
    """
    Resolve an attack of `attacker` on `defender`, mutating state in place.

    Attacker wins: defender removed, attacker moves onto the defender's tile and
    captures a city there if it belongs to someone else.
    Defender wins: attacker removed, nothing else changes.
    Move points and fog are left to the caller.
    """
    result = CombatResult(
        attacker_wins=roll_attacker_wins(rng),
        attacker_unit=deepcopy(attacker),
        defender_unit=deepcopy(defender),
    )
    x, y = defender.x, defender.y
    events = [combat_resolved(
        state.turn,
        attacker.id, attacker.unit_type, attacker.owner,
        defender.id, defender.unit_type, defender.owner,
        x, y,
        result.attacker_wins,
    )]

    if result.attacker_wins:
        remove_unit(state, defender.id)
        attacker.x = x
        attacker.y = y
        captured, capture_events = capture_city_at(state, x, y, attacker.owner)
        result.captured_city = deepcopy(captured) if captured else None
        events.extend(capture_events)
    else:
        remove_unit(state, attacker.id)

    return result, events
