"""
Static unit type definitions.
The unit table lives in engine/data/units.json; one entry per unit type.
Category (land or naval) is the single source of truth for terrain legality.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from backend.engine import LAND, WATER

DATA_DIR = Path(__file__).parent / "data"
UNITS_FILE = DATA_DIR / "units.json"

CATEGORY_LAND = "land"
CATEGORY_NAVAL = "naval"

# Tile kind each category may occupy
CATEGORY_TERRAIN = {
    CATEGORY_LAND: LAND,
    CATEGORY_NAVAL: WATER,
}


@dataclass(frozen=True)
class UnitDefinition:
    """Defines immutable properties of a unit type."""
    id: str
    display_name: str
    symbol: str  # Single character used on the ASCII map
    category: str  # "land" or "naval"
    cost: int  # Number of owned cities required to build
    movement: int  # Move points restored at end of turn
    combat: int  # Informational; combat is a coin flip
    production_time: int  # Turns of timed production

    @property
    def is_naval(self) -> bool:
        return self.category == CATEGORY_NAVAL

    @property
    def terrain(self) -> str:
        return CATEGORY_TERRAIN[self.category]


def load_unit_definitions(path: Path | str | None = None) -> dict[str, UnitDefinition]:
    """Load unit definitions from JSON. Key order is preserved (used for menus and queries)."""
    units_path = Path(path) if path is not None else UNITS_FILE
    with open(units_path, "r") as f:
        raw = json.load(f)
    unit_defs: dict[str, UnitDefinition] = {}
    for unit_id, data in raw.items():
        category = data["category"]
        if category not in CATEGORY_TERRAIN:
            raise ValueError(f"Unit {unit_id} has unknown category: {category}")
        unit_defs[unit_id] = UnitDefinition(
            id=unit_id,
            display_name=data.get("display_name", unit_id.title()),
            symbol=data.get("symbol", unit_id[:1].upper()),
            category=category,
            cost=int(data["cost"]),
            movement=int(data["movement"]),
            combat=int(data.get("combat", 0)),
            production_time=int(data["production_time"]),
        )
    return unit_defs


UNIT_DEFS: dict[str, UnitDefinition] = load_unit_definitions()


def get_unit_def(unit_type: str) -> UnitDefinition:
    """Raises KeyError for unknown types; callers validate user input with is_unit_type first."""
    return UNIT_DEFS[unit_type]


def is_unit_type(unit_type: str | None) -> bool:
    return unit_type in UNIT_DEFS


def is_terrain_legal(unit_type: str, tile: str) -> bool:
    """True if a unit of this type may stand on a tile of this kind."""
    return UNIT_DEFS[unit_type].terrain == tile
