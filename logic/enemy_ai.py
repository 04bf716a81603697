"""logic/enemy_ai.py — Per-enemy wander / chase / stunned behaviour.

State is derived, not stored as an enum:

    STUNNED    stun_timer > 0: no movement, no turning
    CHASING    player centre within ``chase_range``: dominant-axis
               pursuit at ``chase_mult`` × speed
    WANDERING  otherwise: random cardinal heading, re-picked every
               ``wander_period`` seconds (1–2 s, re-rolled per pick)

Blocked moves:
    chasing    turn clockwise to the next cardinal direction.  This is
               deliberately dumb local avoidance, so a blocked chaser
               can briefly walk away from the player.
    wandering  stop and force a re-pick on the next frame by filling
               the wander timer.  No direction reversal.

One enemy raising during its update is logged and skipped; the rest of
the frame carries on.
"""

from __future__ import annotations
import random
from enum import Enum

from core.collision import box_hits_wall, center_distance
from core.ecs import World
from core.room import Room
from core.tuning import get as _tun
from components import Enemy, EnemyKind, Player, Direction, DevLog, GameClock


class AiState(Enum):
    WANDERING = "wander"
    CHASING = "chase"
    STUNNED = "stunned"


def enemy_state(e: Enemy) -> AiState:
    if e.stun_timer > 0.0:
        return AiState.STUNNED
    if e.chasing:
        return AiState.CHASING
    return AiState.WANDERING


def make_enemy(kind: EnemyKind, cx: float, cy: float, rng=random) -> Enemy:
    """Build an enemy of *kind* centred on (*cx*, *cy*)."""
    sect = "enemy.strong" if kind is EnemyKind.STRONG else "enemy.weak"
    defaults = (2, 40.0, 16, 20) if kind is EnemyKind.STRONG else (1, 60.0, 16, 16)
    hp = int(_tun(sect, "health", defaults[0]))
    w = float(_tun(sect, "width", defaults[2]))
    h = float(_tun(sect, "height", defaults[3]))
    return Enemy(
        x=cx - w / 2.0, y=cy - h / 2.0, w=w, h=h,
        kind=kind, health=hp, max_health=hp,
        speed=float(_tun(sect, "speed", defaults[1])),
        facing=Direction(rng.randrange(4)),
        wander_period=_roll_wander_period(rng),
        chase_range=float(_tun("enemy", "chase_range", 80.0)),
    )


def drop_value(kind: EnemyKind) -> int:
    if kind is EnemyKind.STRONG:
        return int(_tun("enemy.strong", "drop_value", 5))
    return int(_tun("enemy.weak", "drop_value", 1))


def _roll_wander_period(rng) -> float:
    lo = float(_tun("enemy", "wander_min", 1.0))
    hi = float(_tun("enemy", "wander_max", 2.0))
    return rng.uniform(lo, hi)


# ── System ──────────────────────────────────────────────────────────

def update_enemies(world: World, dt: float, rng=random):
    found = world.query_one(Player)
    if found is None:
        return
    _pid, player = found
    room: Room = world.res(Room)
    log: DevLog | None = world.res(DevLog)
    clock: GameClock | None = world.res(GameClock)
    now = clock.time if clock else 0.0

    for eid, e in world.query(Enemy):
        try:
            if e.health <= 0:
                continue
            _update_enemy(eid, e, player, room, dt, rng, log, now)
        except Exception as exc:
            print(f"[AI] enemy {eid} update failed: {exc}")
            if log:
                log.record(eid, "error", f"ai update failed: {exc}", t=now)


def _update_enemy(eid: int, e: Enemy, player: Player, room: Room,
                  dt: float, rng, log: DevLog | None, now: float):
    if e.stun_timer > 0.0:
        return

    dist = center_distance(e, player)
    was_chasing = e.chasing
    e.chasing = dist < e.chase_range
    if log and was_chasing != e.chasing:
        msg = "wander → chase" if e.chasing else "chase → wander"
        log.record(eid, "ai", msg, t=now, details={"dist": round(dist, 1)})

    speed = e.speed
    if e.chasing:
        speed *= float(_tun("enemy", "chase_mult", 1.5))
        dx = player.cx - e.cx
        dy = player.cy - e.cy
        if abs(dx) > abs(dy):
            e.facing = Direction.RIGHT if dx > 0 else Direction.LEFT
        else:
            e.facing = Direction.DOWN if dy > 0 else Direction.UP
    elif e.wander_timer >= e.wander_period:
        e.facing = Direction(rng.randrange(4))
        e.wander_timer = 0.0
        e.wander_period = _roll_wander_period(rng)

    step = speed * dt
    nx = e.x + e.facing.dx * step
    ny = e.y + e.facing.dy * step
    if box_hits_wall(room, nx, ny, e.w, e.h):
        if e.chasing:
            e.facing = e.facing.rotated()
        else:
            e.wander_timer = e.wander_period
        return
    e.x, e.y = nx, ny
