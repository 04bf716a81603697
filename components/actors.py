"""components.actors — Player and Enemy entity variants.

Each variant carries only the fields its kind needs.  Timers are plain
floats; they are advanced in one place (``logic/timers.py``) and read
everywhere else.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from components.spatial import Body, Direction


@dataclass
class Player(Body):
    """The avatar.  Exactly one per session."""
    health: int = 6
    max_health: int = 6
    currency: int = 0
    keys: int = 0
    speed: float = 120.0          # px/s
    facing: Direction = Direction.DOWN

    # Momentum integrator
    mx: float = 0.0               # px/s
    my: float = 0.0               # px/s
    moving: bool = False

    # Attack state: ``attack_time`` counts up while attacking
    attacking: bool = False
    attack_time: float = 0.0
    attack_cooldown: float = 0.0
    slash_emitted: bool = False

    # Invulnerability: ``invuln_time`` counts up while invulnerable
    invulnerable: bool = False
    invuln_time: float = 0.0

    # Seconds until the next walk-dust puff
    dust_timer: float = 0.0


class EnemyKind(Enum):
    WEAK = "octorok"
    STRONG = "moblin"


@dataclass
class Enemy(Body):
    kind: EnemyKind = EnemyKind.WEAK
    health: int = 1
    max_health: int = 1
    speed: float = 60.0           # px/s
    facing: Direction = Direction.DOWN
    wander_timer: float = 0.0     # counts up to ``wander_period``
    wander_period: float = 1.5
    chase_range: float = 80.0     # px, centre to centre
    stun_timer: float = 0.0       # counts down to 0
    chasing: bool = False

    @property
    def alive(self) -> bool:
        return self.health > 0
