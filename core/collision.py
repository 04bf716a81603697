"""core/collision.py — Tile-grid and proximity collision primitives.

These live in ``core/`` (not ``logic/``) because the player controller,
the enemy AI, the spawner and the interaction rules all need them.

Boxes are half-open: the max edge is pulled in by ``_EPS`` so a box
sitting flush against a wall (x + w == wall edge) does not count as
overlapping it.  Movement resolves X then Y so a diagonal push into a
wall keeps sliding along the free axis.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.room import Room

_EPS = 0.001


def box_hits_wall(room: Room, x: float, y: float, w: float, h: float) -> bool:
    """Return True if the box (x, y)→(x+w, y+h) overlaps a non-walkable cell.

    Out-of-bounds cells read as wall via ``Room.tile_at``.
    """
    ts = room.tile_size
    min_c = int(math.floor(x / ts))
    max_c = int(math.floor((x + w - _EPS) / ts))
    min_r = int(math.floor(y / ts))
    max_r = int(math.floor((y + h - _EPS) / ts))
    for r in range(min_r, max_r + 1):
        for c in range(min_c, max_c + 1):
            if not room.is_walkable(c, r):
                return True
    return False


@dataclass
class SlideResult:
    x: float
    y: float
    blocked_x: bool = False
    blocked_y: bool = False

    @property
    def blocked(self) -> bool:
        return self.blocked_x or self.blocked_y


def move_and_slide(room: Room, x: float, y: float, w: float, h: float,
                   dx: float, dy: float) -> SlideResult:
    """Apply (*dx*, *dy*) one axis at a time, clamping on contact.

    A rejected axis is snapped flush against the tile it ran into.  The
    snap never moves the box backwards past where it started, and if
    the snapped spot is still inside a wall (the box was already stuck)
    the axis simply stays put.
    """
    ts = room.tile_size
    res = SlideResult(x, y)

    # ── X axis ──
    if dx != 0.0:
        nx = x + dx
        if box_hits_wall(room, nx, y, w, h):
            if dx > 0:
                col = int(math.floor((nx + w - _EPS) / ts))
                nx = max(x, min(nx, col * ts - w))
            else:
                col = int(math.floor(nx / ts))
                nx = min(x, max(nx, (col + 1) * ts))
            if box_hits_wall(room, nx, y, w, h):
                nx = x
            res.blocked_x = True
        res.x = nx

    # ── Y axis (uses the resolved X) ──
    if dy != 0.0:
        ny = y + dy
        if box_hits_wall(room, res.x, ny, w, h):
            if dy > 0:
                row = int(math.floor((ny + h - _EPS) / ts))
                ny = max(y, min(ny, row * ts - h))
            else:
                row = int(math.floor(ny / ts))
                ny = min(y, max(ny, (row + 1) * ts))
            if box_hits_wall(room, res.x, ny, w, h):
                ny = y
            res.blocked_y = True
        res.y = ny

    return res


# ── Entity proximity ────────────────────────────────────────────────

def center_distance(a, b) -> float:
    """Euclidean distance between the centres of two bodies."""
    return math.hypot(a.cx - b.cx, a.cy - b.cy)


def touching(a, b, threshold: float) -> bool:
    return center_distance(a, b) < threshold
