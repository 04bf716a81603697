"""components — Entity variants and world resources, organised by domain.

Submodules
----------
spatial     Direction, Body
actors      Player, Enemy, EnemyKind
items       Collectible, CollectibleKind
resources   GameClock, Camera, GameState, Objective, Progress,
            RoomTransition
dev_log     DevLog

An entity is exactly one of ``Player | Enemy | Collectible``, a tagged
union where the dataclass type is the tag.  All public names are
re-exported here so code can do ``from components import Enemy``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Direction, Body

# ── Actors ───────────────────────────────────────────────────────────
from components.actors import Player, Enemy, EnemyKind

# ── Items ────────────────────────────────────────────────────────────
from components.items import Collectible, CollectibleKind

# ── World resources / singletons ─────────────────────────────────────
from components.resources import (
    GameClock, Camera, GameState, Objective, Progress, RoomTransition,
)

# ── Diagnostics ──────────────────────────────────────────────────────
from components.dev_log import DevLog

Entity = Player | Enemy | Collectible

__all__ = [
    # spatial
    "Direction", "Body",
    # actors
    "Player", "Enemy", "EnemyKind",
    # items
    "Collectible", "CollectibleKind",
    # resources
    "GameClock", "Camera", "GameState", "Objective", "Progress",
    "RoomTransition",
    # diagnostics
    "DevLog",
    # union
    "Entity",
]
