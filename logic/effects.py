"""logic/effects.py — Visual feedback sink.

Turns gameplay outcomes into effect requests, then services those
requests: particles go to the ``ParticleManager``, shake and flash are
small decaying timers the renderer reads.

    effects = Effects(particles)
    effects.attach(world.res(EventBus))
    ...
    bus.drain()            # outcomes → requests → particles / shake / flash
    effects.update(dt, room)

Everything here is best-effort.  The bus drain already isolates handler
errors, so a broken preset costs one effect, never a frame.
"""

from __future__ import annotations
import math
import random

from core.events import (
    EventBus, CurrencyPickup, HeartPickup, KeyPickup, SwordSlash,
    EnemyHit, EnemyDefeated, PlayerHurt, WalkDust, RoomExited, RoomEntered,
    ParticleRequest, ShakeRequest, FlashRequest, SoundRequest,
)
from core.room import Room
from core.tuning import get as _tun
from logic.particles import ParticleManager


# preset → emit_burst kwargs
PRESETS: dict[str, dict] = {
    "currency": dict(color=(50, 205, 50), speed=60.0, life=0.6, gravity=-20.0),
    "currency_blue": dict(color=(65, 105, 225), speed=60.0, life=0.6, gravity=-20.0),
    "sparkle":  dict(color=(255, 255, 0), speed=60.0, life=0.6, gravity=-20.0),
    "heart":    dict(color=(255, 105, 180), speed=40.0, life=0.8, gravity=50.0),
    "slash":    dict(color=(255, 255, 255), speed=120.0, life=0.3,
                     spread=math.pi / 2, jitter=False),
    "hit":      dict(color=(255, 255, 0), speed=80.0, life=0.3),
    "death":    dict(color=(255, 68, 68), speed=90.0, life=0.6, size=3.0),
    "hurt":     dict(color=(255, 0, 0), speed=70.0, life=0.4),
    "dust":     dict(color=(139, 115, 85), speed=20.0, life=0.4, gravity=-10.0,
                     size=1.5),
}

# Direction index → burst angle (0 = right, π/2 = down)
_FACING_ANGLE = (-math.pi / 2, 0.0, math.pi / 2, math.pi)

YELLOW = (255, 255, 0)
DEATH_RED = (255, 68, 68)
RED = (255, 0, 0)
BLACK = (0, 0, 0)


class Effects:
    """Screen shake, full-screen flash and particle presets."""

    def __init__(self, particles: ParticleManager, rng=random):
        self.particles = particles
        self._rng = rng
        self._bus: EventBus | None = None

        self.shake_intensity = 0.0
        self.shake_duration = 0.0
        self.shake_left = 0.0

        self.flash_color: tuple[int, int, int] = (255, 255, 255)
        self.flash_intensity = 0.0
        self.flash_duration = 0.0
        self.flash_left = 0.0

        self._ambient_timer = 0.0

    # ── wiring ───────────────────────────────────────────────────────

    def attach(self, bus: EventBus):
        self._bus = bus
        bus.subscribe("CurrencyPickup", self._on_currency)
        bus.subscribe("HeartPickup", self._on_heart)
        bus.subscribe("KeyPickup", self._on_key)
        bus.subscribe("SwordSlash", self._on_slash)
        bus.subscribe("EnemyHit", self._on_enemy_hit)
        bus.subscribe("EnemyDefeated", self._on_enemy_defeated)
        bus.subscribe("PlayerHurt", self._on_player_hurt)
        bus.subscribe("WalkDust", self._on_dust)
        bus.subscribe("RoomExited", self._on_room_exited)
        bus.subscribe("RoomEntered", self._on_room_entered)

        bus.subscribe("ParticleRequest", self.spawn_particles)
        bus.subscribe("ShakeRequest", self.shake)
        bus.subscribe("FlashRequest", self.flash)

    def _request(self, *requests):
        if self._bus is None:
            return
        for req in requests:
            self._bus.emit(req)

    # ── outcome → requests ───────────────────────────────────────────

    def _on_currency(self, ev: CurrencyPickup):
        preset = "currency_blue" if ev.value >= 5 else "currency"
        self._request(ParticleRequest(preset, ev.x, ev.y, 8),
                      SoundRequest("currency"))

    def _on_heart(self, ev: HeartPickup):
        self._request(ParticleRequest("heart", ev.x, ev.y, 6),
                      SoundRequest("heart"))

    def _on_key(self, ev: KeyPickup):
        self._request(ParticleRequest("sparkle", ev.x, ev.y, 10),
                      SoundRequest("key"))

    def _on_slash(self, ev: SwordSlash):
        self._request(ParticleRequest("slash", ev.x, ev.y, 5,
                                      angle=_FACING_ANGLE[ev.facing % 4]),
                      SoundRequest("slash"))

    def _on_enemy_hit(self, ev: EnemyHit):
        self._request(ParticleRequest("hit", ev.x, ev.y, 6),
                      ShakeRequest(4.0, 0.15),
                      FlashRequest(YELLOW, 0.2, 0.1),
                      SoundRequest("hit"))

    def _on_enemy_defeated(self, ev: EnemyDefeated):
        self._request(ParticleRequest("death", ev.x, ev.y, 12),
                      ShakeRequest(8.0, 0.2),
                      FlashRequest(DEATH_RED, 0.3, 0.15),
                      SoundRequest("death"))

    def _on_player_hurt(self, ev: PlayerHurt):
        self._request(ParticleRequest("hurt", ev.x, ev.y, 8),
                      ShakeRequest(6.0, 0.3),
                      FlashRequest(RED, 0.4, 0.2),
                      SoundRequest("hurt"))

    def _on_dust(self, ev: WalkDust):
        self._request(ParticleRequest("dust", ev.x, ev.y, 3))

    def _on_room_exited(self, ev: RoomExited):
        self._request(FlashRequest(BLACK, 0.8, ev.duration))

    def _on_room_entered(self, _ev: RoomEntered):
        # Old room's particles would float over the new layout
        self.particles.clear()
        self._ambient_timer = 0.0

    # ── request handlers ─────────────────────────────────────────────

    def spawn_particles(self, req: ParticleRequest):
        kwargs = dict(PRESETS[req.preset])
        if req.angle is not None:
            kwargs["angle"] = req.angle
        self.particles.emit_burst(req.x, req.y, count=req.count, **kwargs)

    def shake(self, req: ShakeRequest):
        # A weaker shake never cuts a stronger one short.
        if req.intensity >= self.current_shake():
            self.shake_intensity = req.intensity
            self.shake_duration = req.duration
            self.shake_left = req.duration

    def flash(self, req: FlashRequest):
        self.flash_color = req.color
        self.flash_intensity = req.intensity
        self.flash_duration = req.duration
        self.flash_left = req.duration

    # ── per-frame ────────────────────────────────────────────────────

    def update(self, dt: float, room: Room | None = None):
        self.shake_left = max(0.0, self.shake_left - dt)
        self.flash_left = max(0.0, self.flash_left - dt)
        self.particles.update(dt)
        if room is not None:
            self._ambient(dt, room)

    def current_shake(self) -> float:
        if self.shake_left <= 0.0 or self.shake_duration <= 0.0:
            return 0.0
        return self.shake_intensity * (self.shake_left / self.shake_duration)

    def shake_offset(self) -> tuple[int, int]:
        mag = self.current_shake()
        if mag <= 0.0:
            return 0, 0
        return (int(self._rng.uniform(-mag, mag)),
                int(self._rng.uniform(-mag, mag)))

    def flash_alpha(self) -> float:
        """0..1 opacity of the full-screen flash right now."""
        if self.flash_left <= 0.0 or self.flash_duration <= 0.0:
            return 0.0
        return self.flash_intensity * (self.flash_left / self.flash_duration)

    def reset(self):
        self.shake_left = 0.0
        self.flash_left = 0.0
        self._ambient_timer = 0.0
        self.particles.clear()

    def _ambient(self, dt: float, room: Room):
        self._ambient_timer += dt
        if self._ambient_timer < float(_tun("effects", "ambient_interval", 2.0)):
            return
        self._ambient_timer = 0.0
        theme = room.theme
        if theme.ambient_color is None:
            return
        if theme.name == "forest":
            # falling leaves from just above the room
            self.particles.emit_scatter(0.0, -10.0, room.width_px, 1.0, 2,
                                        theme.ambient_color,
                                        vx=(-10.0, 10.0), vy=(20.0, 50.0),
                                        life=3.0, size=2.0)
        else:
            # drifting sand anywhere in the room
            self.particles.emit_scatter(0.0, 0.0, room.width_px, room.height_px,
                                        3, theme.ambient_color,
                                        vx=(10.0, 50.0), vy=(-5.0, 5.0),
                                        life=2.0, size=1.0)
