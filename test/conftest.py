"""
Shared fixtures: small hand-built maps and a stub random source for combat.
Map rows use '.' for land and '~' for water.
"""

import pytest

from backend.engine import HUMAN, LAND, WATER
from backend.engine.state import City, GameState
from backend.engine.utils import create_unit
from backend.engine.visibility import create_fog


class StubRandom:
    """random() always returns the same value: below 0.5 the attacker wins."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


def build_state(rows, units=(), cities=()):
    """
    Build a GameState from map rows.

    units: (owner, unit_type, x, y) tuples, created in order with full moves.
    cities: (city_id, x, y, owner) tuples.
    """
    grid = [[LAND if ch == "." else WATER for ch in row] for row in rows]
    height = len(grid)
    width = len(grid[0])
    state = GameState(
        turn=1,
        current_player=HUMAN,
        width=width,
        height=height,
        grid=grid,
        cities=[City(id=cid, x=x, y=y, owner=owner) for cid, x, y, owner in cities],
        fog=create_fog(width, height),
    )
    for owner, unit_type, x, y in units:
        create_unit(state, owner, unit_type, x, y)
    return state


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def attacker_wins():
    return StubRandom(0.0)


@pytest.fixture
def defender_wins():
    return StubRandom(0.99)


@pytest.fixture
def stub_rng():
    return StubRandom
