"""
core/ecs.py — Entity store + resource container

Entities are ints.  Each entity is exactly one variant object
(``Player``, ``Enemy`` or ``Collectible``); the variant's type is its
tag.  Iteration is always in insertion order so that tie-breaking
between overlapping entities is reproducible.

    w = World()
    e = w.spawn(Enemy(x=64, y=96))
    for eid, enemy in w.query(Enemy):
        enemy.x += 1

Resources are world-level singletons keyed by type:

    w.set_res(EventBus())
    bus = w.res(EventBus)
"""

from __future__ import annotations
from typing import Any, Iterator

from components import Collectible, Enemy


class World:
    def __init__(self):
        self._next_id = 0
        # dict keeps insertion order, which is the store order
        self._entities: dict[int, Any] = {}
        self._dead: set[int] = set()
        self._resources: dict[type, Any] = {}

    # -- Entities --

    def spawn(self, entity: Any) -> int:
        self._next_id += 1
        self._entities[self._next_id] = entity
        return self._next_id

    def get(self, eid: int) -> Any | None:
        if eid in self._dead:
            return None
        return self._entities.get(eid)

    def kill(self, eid: int):
        """Flag *eid* for removal on the next ``purge()``."""
        if eid in self._entities:
            self._dead.add(eid)

    def alive(self, eid: int) -> bool:
        return eid in self._entities and eid not in self._dead

    def purge(self) -> int:
        """Remove finished entities in one pass.  Returns count removed.

        Finished means: killed explicitly, a collected collectible, or
        an enemy with non-positive health.  The player is never purged
        here; a dead player is a game state, not a removal.  Calling
        this twice in a row is a no-op the second time.

        An entity whose state cannot be judged (say an enemy with no
        health value) is reported and removed with the finished ones.
        """
        doomed = [eid for eid, ent in self._entities.items()
                  if eid in self._dead or _finished(eid, ent)]
        for eid in doomed:
            del self._entities[eid]
        self._dead.clear()
        return len(doomed)

    def clear_entities(self, keep: tuple[type, ...] = ()):
        """Drop every entity whose type is not in *keep*."""
        for eid in [e for e, ent in self._entities.items()
                    if not isinstance(ent, keep)]:
            del self._entities[eid]
        self._dead.clear()

    # -- Queries --

    def query(self, *kinds: type) -> Iterator[tuple[int, Any]]:
        """Yield ``(eid, entity)`` for live entities of any of *kinds*.

        With no *kinds*, yields every live entity.  Order is insertion
        order.  Entities spawned during iteration are not visited.
        """
        for eid, ent in list(self._entities.items()):
            if eid in self._dead:
                continue
            if kinds and not isinstance(ent, kinds):
                continue
            yield eid, ent

    def query_one(self, kind: type) -> tuple[int, Any] | None:
        for result in self.query(kind):
            return result
        return None

    def all_of(self, kind: type) -> list[Any]:
        return [ent for _, ent in self.query(kind)]

    def count(self, *kinds: type) -> int:
        return sum(1 for _ in self.query(*kinds))

    def __len__(self) -> int:
        return len(self._entities)

    # -- Resources (singletons) --

    def set_res(self, obj: Any):
        self._resources[type(obj)] = obj

    def res(self, t: type) -> Any | None:
        return self._resources.get(t)


def _finished(eid: int, ent: Any) -> bool:
    try:
        if isinstance(ent, Collectible):
            return bool(ent.collected)
        if isinstance(ent, Enemy):
            return ent.health <= 0
    except TypeError as exc:
        print(f"[ECS] entity {eid} is malformed, removing it: {exc}")
        return True
    return False
