"""logic/tick.py — Per-frame orchestrator.

One call to ``tick_frame`` is one frame.  The order is fixed:

    1. clamp dt, snapshot input
    2. state handling (pause, confirm on LEVEL_COMPLETE, restart)
    3. PLAYING only:
         advance timers → player → doorway check → enemies
         → interactions → purge → progression
       or, while a room transition runs, only the transition
    4. drain the event bus into the feedback sinks
    5. effects + camera
    6. advance the input's previous-frame buffer (always, even if a
       step above raised)

Rendering is the scene's job and happens after this returns.
"""

from __future__ import annotations
import random

from core.constants import MAX_DT
from core.ecs import World
from core.events import EventBus
from core.room import Room
from components import (
    Player, Progress, GameState, GameClock, Camera, RoomTransition,
)
from logic.camera import update_camera
from logic.effects import Effects
from logic.enemy_ai import update_enemies
from logic.input_manager import InputManager
from logic.interactions import resolve_interactions, end_of_frame_purge
from logic.player import update_player
from logic.progression import evaluate, next_level, restart
from logic.timers import advance_timers
from logic.transition import (
    check_room_exit, start_transition, update_transition,
)


def tick_frame(world: World, inp: InputManager, dt: float,
               rng=random) -> GameState:
    dt = max(0.0, min(dt, MAX_DT))
    inp.begin_frame()
    try:
        progress: Progress = world.res(Progress)
        new_level = False
        room_swapped = False

        if progress.state is GameState.PLAYING and inp.just("pause"):
            progress.paused = not progress.paused
            print(f"[LEVEL] {'paused' if progress.paused else 'resumed'}")

        if progress.state is GameState.LEVEL_COMPLETE:
            if inp.just("confirm"):
                next_level(world, rng)
                new_level = progress.state is GameState.PLAYING
        elif progress.state in (GameState.GAME_OVER, GameState.GAME_WON):
            if inp.just("restart"):
                restart(world, rng)
                new_level = True
        elif not progress.paused:
            room_swapped = simulate(world, inp, dt, rng)

        bus: EventBus | None = world.res(EventBus)
        if bus:
            bus.drain()

        if not progress.paused:
            _update_presentation(world, dt, new_level,
                                 snap=new_level or room_swapped)
        return progress.state
    finally:
        inp.end_frame()


def simulate(world: World, inp: InputManager, dt: float, rng=random) -> bool:
    """One PLAYING step, without input bookkeeping or sinks.

    Returns True on the frame a room transition swaps the room.
    """
    clock: GameClock | None = world.res(GameClock)
    if clock:
        clock.time += dt
    transition: RoomTransition | None = world.res(RoomTransition)
    if transition and transition.active:
        return update_transition(world, dt, rng)

    advance_timers(world, dt)
    update_player(world, inp, dt)
    if transition:
        exit_dir = check_room_exit(world)
        if exit_dir is not None:
            start_transition(world, exit_dir)
    update_enemies(world, dt, rng)
    resolve_interactions(world, rng)
    end_of_frame_purge(world)
    evaluate(world)
    return False


def _update_presentation(world: World, dt: float, new_level: bool,
                          snap: bool = False):
    room: Room | None = world.res(Room)
    effects: Effects | None = world.res(Effects)
    if effects:
        if new_level:
            effects.reset()
        effects.update(dt, room)

    cam: Camera | None = world.res(Camera)
    found = world.query_one(Player)
    if cam and found and room:
        update_camera(cam, found[1], room, snap=snap)
