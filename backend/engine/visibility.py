"""
Fog of war.
fog[y][x] is True while a tile is hidden. Tiles only ever go from hidden to revealed.
"""


def create_fog(width: int, height: int) -> list[list[bool]]:
    """All tiles hidden."""
    return [[True] * width for _ in range(height)]


def reveal(fog: list[list[bool]], center_x: int, center_y: int, radius: int) -> int:
    """
    Reveal every in-bounds tile within Euclidean distance `radius` of the center.
    Mutates fog in place. Returns the number of tiles that were hidden before the call.
    """
    height = len(fog)
    revealed = 0
    for dy in range(-radius, radius + 1):
        y = center_y + dy
        if y < 0 or y >= height:
            continue
        row = fog[y]
        for dx in range(-radius, radius + 1):
            x = center_x + dx
            if x < 0 or x >= len(row):
                continue
            if dx * dx + dy * dy > radius * radius:
                continue
            if row[x]:
                row[x] = False
                revealed += 1
    return revealed


def is_visible(fog: list[list[bool]], x: int, y: int) -> bool:
    return not fog[y][x]
