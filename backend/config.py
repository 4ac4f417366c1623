"""
Single place for default game configuration.
Change these to alter what a new game looks like when the request omits options.
"""
import os

# Map options used when POST /games omits them.
DEFAULT_MAP_WIDTH = 20
DEFAULT_MAP_HEIGHT = 15
DEFAULT_TARGET_CITIES = 8
# Largest accepted map side; grid and fog are width * height cells each.
MAX_MAP_SIDE = 200

# Island generation: one island per ISLAND_AREA_PER_ISLAND tiles, clamped.
ISLAND_AREA_PER_ISLAND = 400
MIN_ISLANDS = 6
MAX_ISLANDS = 24
MIN_ISLAND_RADIUS = 3
MAX_ISLAND_RADIUS = 10
# Minimum Euclidean distance between two cities
MIN_CITY_SPACING = 3

# Fog of war reveal radii
START_REVEAL_RADIUS = 2
MOVE_REVEAL_RADIUS = 1

# Nominal production yield of a freshly placed city (informational only)
CITY_BASE_PRODUCTION = 1

# Where the API keeps games: "sql" (DATABASE_URL, see backend.api.database) or "memory".
GAME_STORE = os.environ.get("GAME_STORE", "sql")
