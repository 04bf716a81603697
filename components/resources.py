"""components.resources — World-level singletons (not per-entity)."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from components.spatial import Direction


@dataclass
class GameClock:
    """Monotonic game time: accumulated ``dt`` since session start.

    Used for DevLog timestamps and the play-time readout.  Advanced
    once per simulated frame by ``logic.tick``; frozen while paused or
    outside the PLAYING state.
    """
    time: float = 0.0


@dataclass
class Camera:
    x: float = 0.0        # px, top-left of the viewport in room space
    y: float = 0.0


class GameState(Enum):
    PLAYING = "playing"
    LEVEL_COMPLETE = "level_complete"
    GAME_WON = "game_won"
    GAME_OVER = "game_over"


@dataclass
class Objective:
    """What a level asks for before it counts as cleared."""
    enemies: int = 3
    currency: int = 5
    description: str = ""


@dataclass
class Progress:
    """Level index, running counters, and the top-level game state.

    Counters reset to zero exactly on level advance or restart.  Only
    ``logic.progression`` changes ``state``.
    """
    level: int = 1
    enemies_defeated: int = 0
    currency_collected: int = 0
    state: GameState = GameState.PLAYING
    score: int = 0
    paused: bool = False

    def reset_counters(self):
        self.enemies_defeated = 0
        self.currency_collected = 0


@dataclass
class RoomTransition:
    """Walking out through a doorway into the neighbouring room.

    While ``active`` the screen is dark and the simulation holds still.
    The room is swapped once ``timer`` passes half of ``duration``.
    ``room_x`` / ``room_y`` locate the current room on the level's grid;
    the level's first room is (0, 0).
    """
    active: bool = False
    timer: float = 0.0
    duration: float = 0.5
    direction: Direction = Direction.RIGHT
    swapped: bool = False
    room_x: int = 0
    room_y: int = 0
    rooms_entered: int = 0

    def reset(self):
        """Back to the level's first room with no transition running."""
        self.active = False
        self.timer = 0.0
        self.swapped = False
        self.room_x = self.room_y = 0
