"""logic/player.py — Player controller.

Three independent flags describe the player at any moment:

    moving        directional input held this frame
    attacking     inside a swing (``attack_time`` < attack_duration)
    invulnerable  inside the post-hit window

They combine freely: the player can walk while swinging and swing while
invulnerable.  Timers are advanced by ``logic.timers``; this module
only starts them.

Movement is a momentum integrator: input adds to momentum, momentum
moves the box (X then Y through ``move_and_slide``), then friction
decays it and tiny values snap to zero.
"""

from __future__ import annotations
import math

from core.collision import move_and_slide
from core.constants import DIAGONAL
from core.ecs import World
from core.events import EventBus, SwordSlash, WalkDust
from core.room import Room
from core.tuning import get as _tun
from components import Player, Direction
from logic.input_manager import InputManager


def new_player(room: Room) -> Player:
    """Fresh player centred in the room's safe rectangle."""
    w = float(_tun("player", "width", 16))
    h = float(_tun("player", "height", 16))
    hp = int(_tun("player", "health", 6))
    x, y = room.spawn_point(w, h)
    return Player(x=x, y=y, w=w, h=h, health=hp, max_health=hp,
                  speed=float(_tun("player", "speed", 120.0)))


def reset_player_for_level(p: Player, room: Room):
    """Move *p* to the spawn point and clear transient state.

    Health, currency and keys carry over.
    """
    p.x, p.y = room.spawn_point(p.w, p.h)
    p.mx = p.my = 0.0
    p.moving = False
    p.attacking = False
    p.attack_time = 0.0
    p.attack_cooldown = 0.0
    p.slash_emitted = False
    p.invulnerable = False
    p.invuln_time = 0.0
    p.facing = Direction.DOWN


def start_attack(p: Player) -> bool:
    """Begin a swing if the cooldown allows it.  Returns True on success."""
    if p.attack_cooldown > 0.0:
        return False
    p.attacking = True
    p.attack_time = 0.0
    p.slash_emitted = False
    p.attack_cooldown = float(_tun("player", "attack_cooldown", 0.4))
    return True


def apply_knockback(p: Player, from_x: float, from_y: float):
    """Push *p* away from the point (*from_x*, *from_y*)."""
    strength = float(_tun("player", "knockback", 150.0))
    vx = p.cx - from_x
    vy = p.cy - from_y
    mag = math.hypot(vx, vy)
    if mag < 1e-6:
        # Dead centre: bounce opposite to facing
        vx, vy, mag = -p.facing.dx, -p.facing.dy, 1.0
    p.mx += vx / mag * strength
    p.my += vy / mag * strength


def update_player(world: World, inp: InputManager, dt: float):
    found = world.query_one(Player)
    if found is None:
        return
    _eid, p = found
    room: Room = world.res(Room)
    bus: EventBus = world.res(EventBus)

    # ── Facing (vertical wins over horizontal) ──
    if inp.held("move_up"):
        p.facing = Direction.UP
    elif inp.held("move_down"):
        p.facing = Direction.DOWN
    elif inp.held("move_left"):
        p.facing = Direction.LEFT
    elif inp.held("move_right"):
        p.facing = Direction.RIGHT

    # ── Input → momentum ──
    dx, dy = inp.movement()
    ix, iy = float(dx), float(dy)
    if ix and iy:
        ix *= DIAGONAL
        iy *= DIAGONAL
    p.moving = bool(dx or dy)
    gain = p.speed * float(_tun("player", "accel", 10.0)) * dt
    p.mx += ix * gain
    p.my += iy * gain

    # ── Attack (rising edge, cooldown gated) ──
    if inp.just("attack"):
        start_attack(p)
    window = float(_tun("player", "slash_window", 0.05))
    if p.attacking and not p.slash_emitted and p.attack_time < window:
        p.slash_emitted = True
        if bus:
            bus.emit(SwordSlash(x=p.cx, y=p.cy, facing=int(p.facing)))

    # ── Integrate momentum through the tile grid ──
    res = move_and_slide(room, p.x, p.y, p.w, p.h, p.mx * dt, p.my * dt)
    p.x, p.y = res.x, res.y
    if res.blocked_x:
        p.mx = 0.0
    if res.blocked_y:
        p.my = 0.0

    friction = float(_tun("player", "friction", 0.85))
    eps = float(_tun("player", "stop_epsilon", 1.0))
    p.mx *= friction
    p.my *= friction
    if abs(p.mx) < eps:
        p.mx = 0.0
    if abs(p.my) < eps:
        p.my = 0.0

    # ── Walk dust ──
    if (abs(p.mx) + abs(p.my) > float(_tun("player", "dust_min_speed", 20.0))
            and p.dust_timer <= 0.0):
        p.dust_timer = float(_tun("player", "dust_interval", 0.2))
        if bus:
            bus.emit(WalkDust(x=p.cx, y=p.y + p.h))
