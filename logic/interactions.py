"""logic/interactions.py — Player ↔ entity interaction rules.

Runs once per frame after all movement.  Entities are visited in store
(insertion) order, so when several overlap the player in one frame the
earliest-spawned is resolved first.

For each live entity within its kind's threshold of the player:

    currency    +value to player and level counter, collected
    heart       +1 health and collected, only when below max; at full
                health it is left on the floor untouched
    key         +1 key, collected
    enemy       attack branch first:
                    player attacking and enemy not stunned →
                    enemy -1 HP, stunned; at 0 HP it dies and a
                    currency drop is queued at its centre
                else damage branch:
                    player not attacking, not invulnerable, enemy not
                    stunned → player -1 HP, invulnerable, knocked back

This is the only system that creates or destroys enemies/collectibles
during play.  Drops are spawned after the loop so the same pass never
sees them; removal happens in ``end_of_frame_purge``.
"""

from __future__ import annotations
import random

from core.collision import touching
from core.ecs import World
from core.events import (
    EventBus, CurrencyPickup, HeartPickup, KeyPickup,
    EnemyHit, EnemyDefeated, PlayerHurt,
)
from core.tuning import get as _tun
from components import (
    Player, Enemy, Collectible, CollectibleKind, Progress, DevLog, GameClock,
)
from logic.enemy_ai import drop_value
from logic.player import apply_knockback
from logic.spawner import make_collectible


def resolve_interactions(world: World, rng=random):
    found = world.query_one(Player)
    if found is None:
        return
    _pid, player = found
    progress: Progress = world.res(Progress)
    bus: EventBus | None = world.res(EventBus)
    log: DevLog | None = world.res(DevLog)
    clock: GameClock | None = world.res(GameClock)
    now = clock.time if clock else 0.0

    enemy_thr = float(_tun("collision", "enemy_threshold", 20.0))
    item_thr = float(_tun("collision", "collectible_threshold", 30.0))

    drops: list[Collectible] = []
    for eid, ent in world.query(Enemy, Collectible):
        try:
            if isinstance(ent, Collectible):
                if ent.collected or not touching(player, ent, item_thr):
                    continue
                _collect(player, ent, progress, bus)
            else:
                if ent.health <= 0 or not touching(player, ent, enemy_thr):
                    continue
                drop = _fight(eid, player, ent, progress, bus, log, now, rng)
                if drop is not None:
                    drops.append(drop)
        except Exception as exc:
            print(f"[COMBAT] entity {eid} interaction failed: {exc}")
            if log:
                log.record(eid, "error", f"interaction failed: {exc}", t=now)

    for drop in drops:
        world.spawn(drop)


def end_of_frame_purge(world: World) -> int:
    """Remove collected / dead entities.  Safe to call more than once."""
    return world.purge()


# ── Rules ───────────────────────────────────────────────────────────

def _collect(player: Player, item: Collectible, progress: Progress | None,
             bus: EventBus | None):
    if item.kind is CollectibleKind.CURRENCY:
        player.currency += item.value
        item.collected = True
        if progress:
            progress.currency_collected += item.value
            progress.score += item.value * int(_tun("score", "currency", 10))
        if bus:
            bus.emit(CurrencyPickup(x=item.cx, y=item.cy, value=item.value))

    elif item.kind is CollectibleKind.HEART:
        if player.health >= player.max_health:
            return
        player.health += 1
        item.collected = True
        if bus:
            bus.emit(HeartPickup(x=item.cx, y=item.cy))

    elif item.kind is CollectibleKind.KEY:
        player.keys += 1
        item.collected = True
        if bus:
            bus.emit(KeyPickup(x=item.cx, y=item.cy))


def _fight(eid: int, player: Player, enemy: Enemy, progress: Progress | None,
           bus: EventBus | None, log: DevLog | None,
           now: float, rng=random) -> Collectible | None:
    if player.attacking and enemy.stun_timer <= 0.0:
        enemy.health -= 1
        enemy.stun_timer = float(_tun("enemy", "stun_duration", 0.5))
        if bus:
            bus.emit(EnemyHit(eid=eid, x=enemy.cx, y=enemy.cy))
        if enemy.health > 0:
            if log:
                log.record(eid, "combat", f"hit, {enemy.health} HP left", t=now)
            return None

        enemy.chasing = False
        if progress:
            progress.enemies_defeated += 1
            progress.score += int(_tun("score", "enemy", 50))
        if bus:
            bus.emit(EnemyDefeated(eid=eid, x=enemy.cx, y=enemy.cy,
                                   kind=enemy.kind.value))
        if log:
            log.record(eid, "combat", f"{enemy.kind.value} defeated", t=now)
        print(f"[COMBAT] {enemy.kind.value} #{eid} defeated")
        return make_collectible(CollectibleKind.CURRENCY, enemy.cx, enemy.cy,
                                value=drop_value(enemy.kind), rng=rng)

    if (not player.attacking and not player.invulnerable
            and enemy.stun_timer <= 0.0):
        player.health = max(0, player.health - 1)
        player.invulnerable = True
        player.invuln_time = 0.0
        apply_knockback(player, enemy.cx, enemy.cy)
        if bus:
            bus.emit(PlayerHurt(x=player.cx, y=player.cy, health=player.health))
        if log:
            log.record(eid, "combat", f"hit player, {player.health} HP left",
                       t=now)
    return None
