"""
Game events for UI hooks and logging.
Events describe what happened during action processing.
Every event carries a display message that starts with "Turn N: ".
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type, the turn they happened on, and a payload."""
    type: str
    turn: int
    message: str
    payload: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "turn": self.turn,
            "message": self.message,
            "payload": self.payload,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(
            type=data["type"],
            turn=data["turn"],
            message=data["message"],
            payload=data.get("payload") or {},
        )


# ===== Event Type Constants =====

# Turn events
TURN_ENDED = "turn_ended"

# Movement events
UNIT_MOVED = "unit_moved"
FOG_REVEALED = "fog_revealed"

# Combat events
COMBAT_RESOLVED = "combat_resolved"

# City events
CITY_CAPTURED = "city_captured"

# Production events
UNIT_PRODUCED = "unit_produced"
PRODUCTION_STARTED = "production_started"
PRODUCTION_PROGRESSED = "production_progressed"
PRODUCTION_COMPLETED = "production_completed"
PRODUCTION_BLOCKED = "production_blocked"
PRODUCTION_UNAFFORDABLE = "production_unaffordable"

# Victory events
VICTORY = "victory"


def _at(x: int, y: int) -> str:
    return f"({x},{y})"


# ===== Event Factory Functions =====

def turn_ended(turn: int, next_turn: int) -> GameEvent:
    return GameEvent(TURN_ENDED, turn, f"Turn {turn}: Turn ended, turn {next_turn} begins", {
        "next_turn": next_turn,
    })


def unit_moved(
    turn: int,
    unit_id: str,
    unit_type: str,
    owner: str,
    from_pos: tuple[int, int],
    to_pos: tuple[int, int],
) -> GameEvent:
    return GameEvent(
        UNIT_MOVED,
        turn,
        f"Turn {turn}: {owner} {unit_type} moved from {_at(*from_pos)} to {_at(*to_pos)}",
        {
            "unit_id": unit_id,
            "unit_type": unit_type,
            "owner": owner,
            "from": list(from_pos),
            "to": list(to_pos),
        },
    )


def fog_revealed(turn: int, x: int, y: int, radius: int, tiles_revealed: int) -> GameEvent:
    return GameEvent(
        FOG_REVEALED,
        turn,
        f"Turn {turn}: Fog cleared around {_at(x, y)} ({tiles_revealed} tiles revealed)",
        {"x": x, "y": y, "radius": radius, "tiles_revealed": tiles_revealed},
    )


def combat_resolved(
    turn: int,
    attacker_id: str,
    attacker_type: str,
    attacker_owner: str,
    defender_id: str,
    defender_type: str,
    defender_owner: str,
    x: int,
    y: int,
    attacker_wins: bool,
) -> GameEvent:
    if attacker_wins:
        outcome = f"{attacker_owner} {attacker_type} destroyed {defender_owner} {defender_type}"
    else:
        outcome = f"{attacker_owner} {attacker_type} was destroyed attacking {defender_owner} {defender_type}"
    return GameEvent(
        COMBAT_RESOLVED,
        turn,
        f"Turn {turn}: Combat at {_at(x, y)}: {outcome}",
        {
            "attacker_id": attacker_id,
            "defender_id": defender_id,
            "attacker_owner": attacker_owner,
            "defender_owner": defender_owner,
            "x": x,
            "y": y,
            "attacker_wins": attacker_wins,
        },
    )


def city_captured(turn: int, city_id: str, x: int, y: int, old_owner: str, new_owner: str) -> GameEvent:
    return GameEvent(
        CITY_CAPTURED,
        turn,
        f"Turn {turn}: City at {_at(x, y)} captured by {new_owner} from {old_owner}",
        {"city_id": city_id, "x": x, "y": y, "old_owner": old_owner, "new_owner": new_owner},
    )


def unit_produced(turn: int, city_id: str, unit_id: str, unit_type: str, owner: str, x: int, y: int) -> GameEvent:
    return GameEvent(
        UNIT_PRODUCED,
        turn,
        f"Turn {turn}: {owner} {unit_type} produced at {_at(x, y)}",
        {"city_id": city_id, "unit_id": unit_id, "unit_type": unit_type, "owner": owner, "x": x, "y": y},
    )


def production_started(turn: int, city_id: str, unit_type: str, x: int, y: int, source: str) -> GameEvent:
    """source: "order", "queue", or "default"."""
    return GameEvent(
        PRODUCTION_STARTED,
        turn,
        f"Turn {turn}: City at {_at(x, y)} started producing {unit_type} (from {source})",
        {"city_id": city_id, "unit_type": unit_type, "source": source},
    )


def production_progressed(
    turn: int, city_id: str, unit_type: str, x: int, y: int, progress: int, required: int
) -> GameEvent:
    return GameEvent(
        PRODUCTION_PROGRESSED,
        turn,
        f"Turn {turn}: City at {_at(x, y)} building {unit_type} ({progress}/{required})",
        {"city_id": city_id, "unit_type": unit_type, "progress": progress, "required": required},
    )


def production_completed(turn: int, city_id: str, unit_id: str, unit_type: str, x: int, y: int) -> GameEvent:
    """x, y: where the new unit was placed."""
    return GameEvent(
        PRODUCTION_COMPLETED,
        turn,
        f"Turn {turn}: {unit_type} completed, deployed at {_at(x, y)}",
        {"city_id": city_id, "unit_id": unit_id, "unit_type": unit_type, "x": x, "y": y},
    )


def production_blocked(turn: int, city_id: str, unit_type: str, x: int, y: int, reason: str) -> GameEvent:
    return GameEvent(
        PRODUCTION_BLOCKED,
        turn,
        f"Turn {turn}: City at {_at(x, y)} cannot deploy {unit_type}: {reason}",
        {"city_id": city_id, "unit_type": unit_type, "reason": reason},
    )


def production_unaffordable(turn: int, city_id: str, unit_type: str, x: int, y: int, cost: int) -> GameEvent:
    return GameEvent(
        PRODUCTION_UNAFFORDABLE,
        turn,
        f"Turn {turn}: City at {_at(x, y)} cannot start {unit_type}: need {cost} cities",
        {"city_id": city_id, "unit_type": unit_type, "cost": cost},
    )


def victory(turn: int, winner: str, city_counts: dict[str, int], total_cities: int) -> GameEvent:
    return GameEvent(
        VICTORY,
        turn,
        f"Turn {turn}: Game over, {winner} wins",
        {"winner": winner, "city_counts": city_counts, "total_cities": total_cities},
    )
