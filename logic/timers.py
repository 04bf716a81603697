"""logic/timers.py — The one place per-entity timers move.

Runs at the start of every PLAYING frame, before any system reads a
timer.  Expiry of the timed player flags (attack, invulnerability) also
happens here, so controllers only ever *start* timers.

A malformed entity is reported and skipped; the rest of the world
still ticks.
"""

from __future__ import annotations
from core.ecs import World
from core.tuning import get as _tun
from components import Player, Enemy, Collectible, DevLog, GameClock


def advance_timers(world: World, dt: float):
    attack_duration = float(_tun("player", "attack_duration", 0.25))
    invuln_duration = float(_tun("player", "invuln_duration", 1.5))
    log: DevLog | None = world.res(DevLog)
    clock: GameClock | None = world.res(GameClock)

    for eid, ent in world.query():
        try:
            if isinstance(ent, Player):
                _advance_player(ent, dt, attack_duration, invuln_duration)
            elif isinstance(ent, Enemy):
                ent.stun_timer = max(0.0, ent.stun_timer - dt)
                if ent.stun_timer <= 0.0:
                    ent.wander_timer += dt
            elif isinstance(ent, Collectible):
                ent.anim_phase += dt * 4.0
            else:
                raise TypeError(f"unknown entity variant {type(ent).__name__}")
        except Exception as exc:
            print(f"[TIMERS] entity {eid} timer update failed: {exc}")
            if log:
                log.record(eid, "error", f"timer update failed: {exc}",
                           t=clock.time if clock else 0.0)


def _advance_player(p: Player, dt: float,
                    attack_duration: float, invuln_duration: float):
    if p.attack_cooldown > 0.0:
        p.attack_cooldown = max(0.0, p.attack_cooldown - dt)

    if p.attacking:
        p.attack_time += dt
        if p.attack_time >= attack_duration:
            p.attacking = False
            p.attack_time = 0.0

    if p.invulnerable:
        p.invuln_time += dt
        if p.invuln_time >= invuln_duration:
            p.invulnerable = False
            p.invuln_time = 0.0

    if p.dust_timer > 0.0:
        p.dust_timer = max(0.0, p.dust_timer - dt)
