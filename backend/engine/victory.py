"""
Victory conditions. Stateless: looks only at current city and unit counts.

A player wins when the opponent has no cities and no units left, or when it
holds at least VICTORY_CITY_SHARE of all cities. The human check runs first,
so the human wins if both conditions hold at once.
"""

from dataclasses import dataclass
from typing import Any

from backend.engine import AI, HUMAN, VICTORY_CITY_SHARE
from backend.engine.state import GameState
from backend.engine.utils import count_cities, count_units


@dataclass
class VictoryResult:
    game_over: bool
    winner: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"game_over": self.game_over}
        if self.winner is not None:
            out["winner"] = self.winner
        return out


def _has_won(state: GameState, player: str, opponent: str) -> bool:
    opponent_eliminated = count_cities(state, opponent) == 0 and count_units(state, opponent) == 0
    dominates = count_cities(state, player) >= len(state.cities) * VICTORY_CITY_SHARE
    return opponent_eliminated or dominates


def check_victory_conditions(state: GameState) -> VictoryResult:
    if _has_won(state, HUMAN, AI):
        return VictoryResult(game_over=True, winner=HUMAN)
    if _has_won(state, AI, HUMAN):
        return VictoryResult(game_over=True, winner=AI)
    return VictoryResult(game_over=False)
