"""core/events.py — Gameplay events, effect requests and the bus.

The simulation only *reports* outcomes (``EnemyHit``, ``PlayerHurt``,
...).  Feedback sinks subscribe to those and answer with requests
(``ParticleRequest``, ``ShakeRequest``, ``FlashRequest``,
``SoundRequest``) which other sinks service.  Nothing flows back into
the simulation.

    bus = world.res(EventBus)
    bus.subscribe("PlayerHurt", on_hurt)
    bus.emit(PlayerHurt(x=120.0, y=88.0, health=5))
    bus.drain()          # once per frame, after the simulation step

A handler that raises is reported and skipped; the other handlers and
the rest of the frame carry on.
"""

from __future__ import annotations
import traceback
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable


# ═══════════════════════════════════════════════════════════════════
#  Gameplay outcomes (emitted by the simulation)
# ═══════════════════════════════════════════════════════════════════

@dataclass
class CurrencyPickup:
    x: float
    y: float
    value: int = 1


@dataclass
class HeartPickup:
    x: float
    y: float


@dataclass
class KeyPickup:
    x: float
    y: float


@dataclass
class SwordSlash:
    """Emitted once at the start of each swing."""
    x: float
    y: float
    facing: int = 2


@dataclass
class EnemyHit:
    eid: int
    x: float
    y: float


@dataclass
class EnemyDefeated:
    eid: int
    x: float
    y: float
    kind: str = "octorok"


@dataclass
class PlayerHurt:
    x: float
    y: float
    health: int = 0


@dataclass
class WalkDust:
    x: float
    y: float


@dataclass
class LevelChanged:
    level: int
    state: str = "playing"


@dataclass
class RoomExited:
    """The player stepped into a doorway; the screen goes dark."""
    direction: int
    duration: float = 0.5


@dataclass
class RoomEntered:
    room_x: int
    room_y: int
    theme: str = "forest"


# ═══════════════════════════════════════════════════════════════════
#  Effect requests (consumed by the feedback sinks)
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ParticleRequest:
    """Spawn *count* particles of *preset* at (x, y)."""
    preset: str
    x: float
    y: float
    count: int = 8
    angle: float | None = None     # aim the burst (radians), None = radial


@dataclass
class ShakeRequest:
    intensity: float
    duration: float


@dataclass
class FlashRequest:
    color: tuple[int, int, int]
    intensity: float
    duration: float


@dataclass
class SoundRequest:
    name: str


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """FIFO of events plus name-keyed handler lists.  An ECS resource."""

    MAX_ROUNDS = 100

    def __init__(self):
        self._queue: deque[Any] = deque()
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)
        self.handler_errors = 0

    def emit(self, event) -> None:
        self._queue.append(event)

    def subscribe(self, event_type: str | type, handler: Callable) -> None:
        """Call *handler* for every drained event of *event_type*.

        *event_type* is the event class or its name (``"EnemyHit"``).
        """
        self._subs[_name(event_type)].append(handler)

    def drain(self) -> int:
        """Deliver queued events in order.  Returns how many were delivered.

        Events emitted by handlers are delivered in a later round of the
        same call.  After ``MAX_ROUNDS`` rounds anything still queued is
        left for the next frame.
        """
        delivered = 0
        for _round in range(self.MAX_ROUNDS):
            if not self._queue:
                break
            batch, self._queue = self._queue, deque()
            for event in batch:
                self._deliver(event)
            delivered += len(batch)
        return delivered

    def _deliver(self, event):
        name = type(event).__name__
        self._stats[name] += 1
        for handler in list(self._subs.get(name, ())):
            try:
                handler(event)
            except Exception as exc:
                self.handler_errors += 1
                print(f"[EVENT] {name} handler {getattr(handler, '__name__', handler)} "
                      f"failed: {exc}")
                traceback.print_exc()

    def clear(self) -> None:
        self._queue.clear()

    def pending(self) -> list[Any]:
        """Queued events, oldest first."""
        return list(self._queue)

    def stats(self) -> dict[str, int]:
        """Delivered-event counts by class name since creation."""
        return dict(self._stats)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"


def _name(event_type: str | type) -> str:
    return event_type if isinstance(event_type, str) else event_type.__name__
