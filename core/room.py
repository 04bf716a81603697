"""core/room.py — Tile grid for a single room, plus the room generator.

The room is a ``ROOM_COLS`` × ``ROOM_ROWS`` grid of tile codes.  Anything
outside the grid reads as wall, so collision code never needs its own
bounds checks.

Generation
----------
1. border → wall
2. each interior cell → wall with the theme's ``wall_chance``
3. the safe rectangle (rows 4-6, cols 6-9) → floor, so spawning at the
   room centre always works
4. one doorway cell at the midpoint of each edge, plus the cell just
   inside it (the landing), so each doorway leads somewhere walkable
5. themed decorations (trees, dunes) dropped on floor cells

There is no connectivity pass: a room can contain floor pockets the
player cannot reach.  Spawning uses ``find_free_tile`` which only asks
for a walkable cell, not a reachable one.
"""

from __future__ import annotations
import random
from dataclasses import dataclass

from core.constants import (
    TILE_FLOOR, TILE_WALL, TILE_TREE, TILE_DUNE,
    TILE_SIZE, ROOM_COLS, ROOM_ROWS, SAFE_ROWS, SAFE_COLS, DOORWAYS,
    DOOR_LANDINGS,
)
from core.tuning import get as _tun


# ── Themes ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Theme:
    name: str
    wall_chance: float
    floor_color: tuple[int, int, int]
    wall_color: tuple[int, int, int]
    decor_tile: int | None = None
    decor_count: int = 0
    ambient_color: tuple[int, int, int] | None = None


_BASE_THEMES: dict[str, Theme] = {
    "forest": Theme("forest", 0.08, (34, 139, 34), (139, 69, 19),
                    decor_tile=TILE_TREE, decor_count=3,
                    ambient_color=(34, 139, 34)),
    "desert": Theme("desert", 0.05, (222, 184, 135), (205, 133, 63),
                    decor_tile=TILE_DUNE, decor_count=5,
                    ambient_color=(222, 184, 135)),
    "cave":   Theme("cave", 0.15, (105, 105, 105), (47, 79, 79)),
    "ruins":  Theme("ruins", 0.12, (154, 205, 50), (105, 105, 105)),
}

THEME_ORDER = ("forest", "desert", "cave", "ruins")


def get_theme(name: str) -> Theme:
    """Return theme *name* with tuning overrides applied."""
    base = _BASE_THEMES.get(name, _BASE_THEMES["forest"])
    sect = f"themes.{base.name}"
    return Theme(
        name=base.name,
        wall_chance=float(_tun(sect, "wall_chance", base.wall_chance)),
        floor_color=base.floor_color,
        wall_color=base.wall_color,
        decor_tile=base.decor_tile,
        decor_count=int(_tun(sect, "decor_count", base.decor_count)),
        ambient_color=base.ambient_color,
    )


def theme_for_level(level: int) -> Theme:
    """Themes cycle forest → desert → cave → ruins as levels advance."""
    return theme_for_room(level, 0, 0)


def theme_for_room(level: int, room_x: int, room_y: int) -> Theme:
    """Theme of the room at grid position (*room_x*, *room_y*) in *level*.

    Each step away from the level's first room moves one place along
    the cycle.
    """
    steps = level - 1 + abs(room_x) + abs(room_y)
    return get_theme(THEME_ORDER[steps % len(THEME_ORDER)])


# ── Room ────────────────────────────────────────────────────────────

class Room:
    """Immutable-in-practice tile grid.  Replaced wholesale, never edited."""

    def __init__(self, tiles: list[list[int]], theme: Theme | None = None,
                 tile_size: int = TILE_SIZE):
        self.tiles = tiles
        self.rows = len(tiles)
        self.cols = len(tiles[0]) if tiles else 0
        self.tile_size = tile_size
        self.theme = theme or get_theme("forest")

    @property
    def width_px(self) -> int:
        return self.cols * self.tile_size

    @property
    def height_px(self) -> int:
        return self.rows * self.tile_size

    def tile_at(self, col: int, row: int) -> int:
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            return TILE_WALL
        return self.tiles[row][col]

    def is_walkable(self, col: int, row: int) -> bool:
        return self.tile_at(col, row) != TILE_WALL

    def in_safe_zone(self, col: int, row: int) -> bool:
        return (SAFE_ROWS[0] <= row <= SAFE_ROWS[1]
                and SAFE_COLS[0] <= col <= SAFE_COLS[1])

    def is_landing(self, col: int, row: int) -> bool:
        return (col, row) in DOOR_LANDINGS

    def tile_center(self, col: int, row: int) -> tuple[float, float]:
        ts = self.tile_size
        return col * ts + ts / 2.0, row * ts + ts / 2.0

    def spawn_point(self, w: float, h: float) -> tuple[float, float]:
        """Top-left for a *w*×*h* box centred in the safe rectangle."""
        ts = self.tile_size
        cx = (SAFE_COLS[0] + SAFE_COLS[1] + 1) * ts / 2.0
        cy = (SAFE_ROWS[0] + SAFE_ROWS[1] + 1) * ts / 2.0
        return cx - w / 2.0, cy - h / 2.0

    def __repr__(self) -> str:
        return f"Room({self.cols}x{self.rows}, theme={self.theme.name})"


def open_room(cols: int = ROOM_COLS, rows: int = ROOM_ROWS) -> Room:
    """Walled box with an empty interior.  Handy for tests and fallbacks."""
    tiles = [[TILE_FLOOR] * cols for _ in range(rows)]
    for r in range(rows):
        tiles[r][0] = TILE_WALL
        tiles[r][cols - 1] = TILE_WALL
    for c in range(cols):
        tiles[0][c] = TILE_WALL
        tiles[rows - 1][c] = TILE_WALL
    return Room(tiles)


def generate_room(theme: Theme, rng=random) -> Room:
    cols, rows = ROOM_COLS, ROOM_ROWS
    tiles: list[list[int]] = []
    for r in range(rows):
        row: list[int] = []
        for c in range(cols):
            if r == 0 or r == rows - 1 or c == 0 or c == cols - 1:
                row.append(TILE_WALL)
            elif rng.random() < theme.wall_chance:
                row.append(TILE_WALL)
            else:
                row.append(TILE_FLOOR)
        tiles.append(row)

    for r in range(SAFE_ROWS[0], SAFE_ROWS[1] + 1):
        for c in range(SAFE_COLS[0], SAFE_COLS[1] + 1):
            tiles[r][c] = TILE_FLOOR

    for (c, r), (lc, lr) in zip(DOORWAYS, DOOR_LANDINGS):
        tiles[r][c] = TILE_FLOOR
        tiles[lr][lc] = TILE_FLOOR

    room = Room(tiles, theme)
    if theme.decor_tile is not None:
        _scatter_decor(room, theme, rng)
    print(f"[ROOM] generated {room}")
    return room


def _scatter_decor(room: Room, theme: Theme, rng):
    # Decorations only land on plain floor and never inside the safe area.
    for _ in range(theme.decor_count):
        c = rng.randint(1, room.cols - 2)
        r = rng.randint(1, room.rows - 2)
        if room.tiles[r][c] == TILE_FLOOR and not room.in_safe_zone(c, r):
            room.tiles[r][c] = theme.decor_tile


# ── Spawn-cell search ───────────────────────────────────────────────

def find_free_tile(room: Room, rng=random, *, avoid_safe: bool = False,
                   attempts: int | None = None,
                   taken: set[tuple[int, int]] | None = None) -> tuple[int, int]:
    """Pick a walkable interior cell.

    With *avoid_safe* the safe rectangle and the doorway landings are
    off limits.  Tries *attempts* random cells first.  If none fits, scans the grid
    row-major for the first acceptable cell.  If even that fails, returns
    the centre of the safe rectangle, which is always floor.
    """
    if attempts is None:
        attempts = int(_tun("spawn", "attempts", 50))
    taken = taken or set()

    def fits(c: int, r: int) -> bool:
        if not room.is_walkable(c, r) or (c, r) in taken:
            return False
        return not (avoid_safe and (room.in_safe_zone(c, r)
                                    or room.is_landing(c, r)))

    for _ in range(attempts):
        c = rng.randint(1, room.cols - 2)
        r = rng.randint(1, room.rows - 2)
        if fits(c, r):
            return c, r

    for r in range(1, room.rows - 1):
        for c in range(1, room.cols - 1):
            if fits(c, r):
                print(f"[SPAWN] random search exhausted, fallback cell ({c}, {r})")
                return c, r

    fallback = ((SAFE_COLS[0] + SAFE_COLS[1]) // 2,
                (SAFE_ROWS[0] + SAFE_ROWS[1]) // 2)
    print(f"[SPAWN] no free cell, using safe centre {fallback}")
    return fallback
