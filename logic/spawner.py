"""logic/spawner.py — Entity factories and per-level population.

Every spawn position comes from ``core.room.find_free_tile`` which has a
bounded retry count and a deterministic fallback, so populating a
crowded room can never hang.  Enemies stay out of the safe rectangle so
the player is never hit on arrival.
"""

from __future__ import annotations
import random

from core.ecs import World
from core.room import Room, find_free_tile
from core.tuning import get as _tun
from components import Collectible, CollectibleKind, EnemyKind, Objective
from logic.enemy_ai import make_enemy

_ITEM_SIZE = 16.0


def make_collectible(kind: CollectibleKind, cx: float, cy: float,
                     value: int = 1, rng=random) -> Collectible:
    """Build a collectible centred on (*cx*, *cy*)."""
    half = _ITEM_SIZE / 2.0
    return Collectible(
        x=cx - half, y=cy - half, w=_ITEM_SIZE, h=_ITEM_SIZE,
        kind=kind,
        value=value if kind is CollectibleKind.CURRENCY else 0,
        anim_phase=rng.uniform(0.0, 6.283),
    )


def pick_enemy_kind(level: int, rng=random) -> EnemyKind:
    if level >= int(_tun("enemy", "strong_from_level", 3)):
        if rng.random() < float(_tun("enemy", "strong_chance", 0.5)):
            return EnemyKind.STRONG
    return EnemyKind.WEAK


def populate_level(world: World, level: int, objective: Objective,
                   rng=random) -> dict[str, int]:
    """Spawn the enemies and items for *level* into *world*.

    Returns a count per category (handy for logs and tests).
    """
    room: Room = world.res(Room)
    taken: set[tuple[int, int]] = set()
    counts = {"enemies": 0, "currency": 0, "hearts": 0, "keys": 0}

    def cell_center() -> tuple[float, float]:
        c, r = find_free_tile(room, rng, avoid_safe=True, taken=taken)
        taken.add((c, r))
        return room.tile_center(c, r)

    for _ in range(objective.enemies):
        cx, cy = cell_center()
        world.spawn(make_enemy(pick_enemy_kind(level, rng), cx, cy, rng))
        counts["enemies"] += 1

    for _ in range(objective.currency):
        cx, cy = cell_center()
        world.spawn(make_collectible(CollectibleKind.CURRENCY, cx, cy, 1, rng))
        counts["currency"] += 1

    for _ in range(max(1, level // 2)):
        cx, cy = cell_center()
        world.spawn(make_collectible(CollectibleKind.HEART, cx, cy, rng=rng))
        counts["hearts"] += 1

    if rng.random() < float(_tun("spawn", "key_chance", 0.2)):
        cx, cy = cell_center()
        world.spawn(make_collectible(CollectibleKind.KEY, cx, cy, rng=rng))
        counts["keys"] += 1

    print(f"[SPAWN] level {level}: {counts['enemies']} enemies, "
          f"{counts['currency']} rupees, {counts['hearts']} hearts, "
          f"{counts['keys']} keys")
    return counts
