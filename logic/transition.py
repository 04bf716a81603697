"""logic/transition.py — Walking out through a doorway into the next room.

    exit_dir = check_room_exit(world)       # player inside an edge doorway?
    if exit_dir is not None:
        start_transition(world, exit_dir)   # dark flash, simulation holds
    ...
    update_transition(world, dt, rng)       # swap at half time, done at full

Rooms of one level sit on an integer grid.  Leaving the first room
(0, 0) to the east lands in (1, 0), and so on.  The swap builds a fresh
room and population and puts the player on the landing of the opposite
doorway.  Level counters carry across rooms; only a level advance or a
restart resets them.
"""

from __future__ import annotations
import random

from core.constants import DOOR_LANDINGS
from core.ecs import World
from core.events import EventBus, RoomExited, RoomEntered
from core.room import Room, generate_room, theme_for_room
from core.tuning import get as _tun
from components import (
    Player, Progress, RoomTransition, Direction, DevLog, GameClock,
)
from logic.progression import objective_for
from logic.spawner import populate_level


# Exit direction → index into DOOR_LANDINGS of the doorway you come in by
_ARRIVAL = {
    Direction.DOWN: 0,       # top doorway
    Direction.UP: 1,         # bottom doorway
    Direction.RIGHT: 2,      # left doorway
    Direction.LEFT: 3,       # right doorway
}


def check_room_exit(world: World) -> Direction | None:
    """Edge the player's box has reached, if any.

    The border is wall apart from the doorways, so only a player
    standing in a doorway can get within ``exit_buffer`` of an edge.
    """
    found = world.query_one(Player)
    room: Room | None = world.res(Room)
    if found is None or room is None:
        return None
    p = found[1]
    buf = float(_tun("room", "exit_buffer", 8.0))
    if p.x < buf:
        return Direction.LEFT
    if p.x + p.w > room.width_px - buf:
        return Direction.RIGHT
    if p.y < buf:
        return Direction.UP
    if p.y + p.h > room.height_px - buf:
        return Direction.DOWN
    return None


def start_transition(world: World, direction: Direction) -> bool:
    tr: RoomTransition | None = world.res(RoomTransition)
    if tr is None or tr.active:
        return False
    tr.active = True
    tr.timer = 0.0
    tr.swapped = False
    tr.direction = direction
    tr.duration = float(_tun("room", "transition_duration", 0.5))

    found = world.query_one(Player)
    if found:
        found[1].mx = found[1].my = 0.0
    bus: EventBus | None = world.res(EventBus)
    if bus:
        bus.emit(RoomExited(direction=int(direction), duration=tr.duration))
    print(f"[ROOM] leaving ({tr.room_x}, {tr.room_y}) heading {direction.label}")
    return True


def update_transition(world: World, dt: float, rng=random) -> bool:
    """Advance a running transition.  True on the frame the room swaps."""
    tr: RoomTransition | None = world.res(RoomTransition)
    if tr is None or not tr.active:
        return False
    tr.timer += dt
    swapped = False
    if not tr.swapped and tr.timer >= tr.duration / 2.0:
        _enter_next_room(world, tr, rng)
        tr.swapped = swapped = True
    if tr.timer >= tr.duration:
        tr.active = False
        tr.timer = 0.0
        tr.swapped = False
    return swapped


def _enter_next_room(world: World, tr: RoomTransition, rng):
    d = tr.direction
    tr.room_x += d.dx
    tr.room_y += d.dy
    tr.rooms_entered += 1

    progress: Progress = world.res(Progress)
    room = generate_room(theme_for_room(progress.level, tr.room_x, tr.room_y), rng)
    world.set_res(room)
    world.clear_entities(keep=(Player,))

    found = world.query_one(Player)
    if found:
        p = found[1]
        cx, cy = room.tile_center(*DOOR_LANDINGS[_ARRIVAL[d]])
        p.x, p.y = cx - p.w / 2.0, cy - p.h / 2.0
        p.mx = p.my = 0.0
    populate_level(world, progress.level, objective_for(progress.level), rng)

    bus: EventBus | None = world.res(EventBus)
    if bus:
        bus.emit(RoomEntered(room_x=tr.room_x, room_y=tr.room_y,
                             theme=room.theme.name))
    log: DevLog | None = world.res(DevLog)
    if log:
        clock: GameClock | None = world.res(GameClock)
        log.record(0, "level", f"entered room ({tr.room_x}, {tr.room_y})",
                   t=clock.time if clock else 0.0,
                   details={"theme": room.theme.name})
    print(f"[ROOM] entered ({tr.room_x}, {tr.room_y}), {room.theme.name}")
