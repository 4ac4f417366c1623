"""
Procedural map generation: organic islands on an ocean grid, then spaced city placement.
All randomness comes from the SeededRandom passed in, so a seed fully determines the map.
"""

import math

from backend.config import (
    CITY_BASE_PRODUCTION,
    ISLAND_AREA_PER_ISLAND,
    MAX_ISLAND_RADIUS,
    MAX_ISLANDS,
    MIN_CITY_SPACING,
    MIN_ISLAND_RADIUS,
    MIN_ISLANDS,
)
from backend.engine import AI, HUMAN, LAND, NEUTRAL, WATER
from backend.engine.rng import SeededRandom
from backend.engine.state import City

# Land probability falls off with normalized distance from the island center.
COASTLINE_FALLOFF = 0.6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def island_count(width: int, height: int, rng: SeededRandom) -> int:
    """One island per ISLAND_AREA_PER_ISLAND tiles, jittered by -1..+1, clamped to [MIN_ISLANDS, MAX_ISLANDS]."""
    base = _round_half_up(width * height / ISLAND_AREA_PER_ISLAND)
    jitter = rng.randrange(3) - 1
    return max(MIN_ISLANDS, min(MAX_ISLANDS, base + jitter))


def generate_island(grid: list[list[str]], rng: SeededRandom) -> None:
    """Stamp one roughly circular island with a ragged coastline onto the grid."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    center_x = rng.randrange(width)
    center_y = rng.randrange(height)
    size = MIN_ISLAND_RADIUS + rng.randrange(MAX_ISLAND_RADIUS - MIN_ISLAND_RADIUS + 1)

    for dy in range(-size, size + 1):
        for dx in range(-size, size + 1):
            x = center_x + dx
            y = center_y + dy
            distance = math.sqrt(dx * dx + dy * dy)
            if not (0 <= x < width and 0 <= y < height) or distance > size:
                continue
            if rng.random() > distance / size * COASTLINE_FALLOFF:
                grid[y][x] = LAND


def generate_terrain(width: int, height: int, rng: SeededRandom) -> list[list[str]]:
    grid = [[WATER] * width for _ in range(height)]
    for _ in range(island_count(width, height, rng)):
        generate_island(grid, rng)
    return grid


def place_cities(grid: list[list[str]], target_cities: int, rng: SeededRandom) -> list[City]:
    """
    Shuffle all land tiles and greedily pick cities at least MIN_CITY_SPACING apart.
    First pick belongs to the human, second to the AI, the rest are neutral.
    Places fewer cities when land runs out; never fails.
    """
    land_tiles = [
        (x, y)
        for y, row in enumerate(grid)
        for x, tile in enumerate(row)
        if tile == LAND
    ]
    rng.shuffle(land_tiles)

    cities: list[City] = []
    for x, y in land_tiles:
        if len(cities) >= target_cities:
            break
        too_close = any(
            math.hypot(c.x - x, c.y - y) < MIN_CITY_SPACING
            for c in cities
        )
        if too_close:
            continue
        index = len(cities)
        owner = HUMAN if index == 0 else AI if index == 1 else NEUTRAL
        cities.append(City(
            id=f"city_{index + 1:02d}",
            x=x,
            y=y,
            owner=owner,
            production=CITY_BASE_PRODUCTION,
        ))
    return cities


def generate_map(
    width: int,
    height: int,
    target_cities: int,
    rng: SeededRandom,
) -> tuple[list[list[str]], list[City]]:
    """Returns (grid, cities). grid[y][x] is "water" or "land"."""
    grid = generate_terrain(width, height, rng)
    cities = place_cities(grid, target_cities, rng)
    return grid, cities
