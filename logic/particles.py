"""logic/particles.py — Pixel-space particle pool.

Particles age from 0 up to their ``life``; a particle whose age reaches
its life is dropped on the next ``update``.  Velocities are px/s,
gravity is px/s² (positive pulls down), ``drag`` is applied once per
update.

    pm = ParticleManager(rng=rng)
    pm.emit_burst(x, y, count=12, color=(255, 68, 68), speed=90)    # radial
    pm.emit_burst(x, y, count=5, angle=0.0, spread=math.pi / 2,
                  jitter=False)                                      # fan
    pm.emit_scatter(0, 0, 512, 352, 3, (222, 184, 135),
                    vx=(10, 50), vy=(-5, 5))                         # area
    pm.update(dt)

The pool is capped (``[effects] max_particles``); emits past the cap are
ignored.  Drawing lives in ``scenes/room_draw.draw_particles``.
"""

from __future__ import annotations
import math
import random
from dataclasses import dataclass

from core.tuning import get as _tun


@dataclass(slots=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    color: tuple[int, int, int]
    size: float = 2.0
    gravity: float = 0.0
    drag: float = 0.96
    fade: bool = True
    age: float = 0.0

    @property
    def alive(self) -> bool:
        return self.age < self.life

    @property
    def alpha(self) -> float:
        """Opacity 0..1.  Fading particles thin out linearly with age."""
        if not self.fade or self.life <= 0.0:
            return 1.0
        return max(0.0, 1.0 - self.age / self.life)


class ParticleManager:
    def __init__(self, max_particles: int | None = None, rng=random):
        if max_particles is None:
            max_particles = int(_tun("effects", "max_particles", 400))
        self.limit = max_particles
        self._rng = rng
        self._pool: list[Particle] = []

    @property
    def count(self) -> int:
        return len(self._pool)

    @property
    def particles(self) -> list[Particle]:
        return self._pool

    def emit(self, p: Particle) -> bool:
        if len(self._pool) >= self.limit:
            return False
        self._pool.append(p)
        return True

    def emit_burst(self, x: float, y: float, count: int = 8, *,
                   color: tuple[int, int, int] = (255, 255, 255),
                   speed: float = 60.0, life: float = 0.5, size: float = 2.0,
                   gravity: float = 0.0, drag: float = 0.96,
                   angle: float = 0.0, spread: float = math.tau,
                   fade: bool = True, jitter: bool = True):
        """Fire *count* particles from (x, y) across an arc.

        The arc is centred on *angle* (0 = right, π/2 = down) and is
        *spread* radians wide.  With *jitter* each particle gets a random
        heading in the arc, speed ×0.5–1.5 and life ×0.7–1.3; without it
        headings are evenly spaced and speed/life are exact.
        """
        if count <= 0:
            return
        start = angle - spread / 2.0
        step = spread / count
        for i in range(count):
            if jitter:
                heading = start + self._rng.uniform(0.0, spread)
                v = speed * self._rng.uniform(0.5, 1.5)
                ttl = life * self._rng.uniform(0.7, 1.3)
            else:
                heading = start + step * (i + 0.5)
                v = speed
                ttl = life
            if not self.emit(Particle(x, y, math.cos(heading) * v,
                                      math.sin(heading) * v, ttl, color,
                                      size=size, gravity=gravity, drag=drag,
                                      fade=fade)):
                return

    def emit_scatter(self, x0: float, y0: float, w: float, h: float,
                     count: int, color: tuple[int, int, int], *,
                     vx: tuple[float, float] = (0.0, 0.0),
                     vy: tuple[float, float] = (0.0, 0.0),
                     life: float = 2.0, size: float = 1.0):
        """Drop *count* drifting particles at random spots in a rectangle."""
        u = self._rng.uniform
        for _ in range(count):
            if not self.emit(Particle(x0 + u(0.0, w), y0 + u(0.0, h),
                                      u(*vx), u(*vy), life, color,
                                      size=size, drag=1.0)):
                return

    def update(self, dt: float):
        for p in self._pool:
            p.age += dt
            p.vy += p.gravity * dt
            p.vx *= p.drag
            p.vy *= p.drag
            p.x += p.vx * dt
            p.y += p.vy * dt
        self._pool = [p for p in self._pool if p.alive]

    def clear(self):
        self._pool.clear()
