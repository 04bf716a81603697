"""components.spatial — Facing directions and bounding-box helpers.

All coordinates and dimensions are in pixels (1 tile = 32 px).
Positions are the top-left corner of an entity's bounding box.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum

from core.constants import DIR_DX, DIR_DY


class Direction(IntEnum):
    """Cardinal facing.  Integer values index ``DIR_DX`` / ``DIR_DY``."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def dx(self) -> int:
        return DIR_DX[self]

    @property
    def dy(self) -> int:
        return DIR_DY[self]

    def rotated(self) -> "Direction":
        """Next direction clockwise."""
        return Direction((self + 1) % 4)

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class Body:
    """Position + fixed size shared by every entity variant."""
    x: float = 0.0        # px
    y: float = 0.0        # px
    w: float = 16.0       # px
    h: float = 16.0       # px

    @property
    def cx(self) -> float:
        return self.x + self.w / 2.0

    @property
    def cy(self) -> float:
        return self.y + self.h / 2.0
