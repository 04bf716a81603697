"""logic/progression.py — Level objectives and the game-state machine.

    PLAYING ──objective met──▶ LEVEL_COMPLETE ──confirm──▶ PLAYING (level+1)
       │                              │
       │                              └─confirm on last level──▶ GAME_WON
       └──player health ≤ 0──▶ GAME_OVER
    GAME_OVER / GAME_WON ──restart──▶ PLAYING (level 1)

Only this module writes ``Progress.state``.  Health depletion is checked
before the objective, so dying on the frame that clears a level is
still a game over.
"""

from __future__ import annotations
import random

from core.ecs import World
from core.events import EventBus, LevelChanged
from core.room import Room, generate_room, theme_for_level
from core.tuning import get as _tun, table_list
from components import (
    Player, Progress, GameState, Objective, GameClock, Camera, DevLog,
    RoomTransition,
)
from logic.player import new_player, reset_player_for_level
from logic.spawner import populate_level


_DEFAULT_OBJECTIVES = (
    Objective(3, 5, "Defeat 3 enemies and collect 5 rupees"),
    Objective(5, 8, "Defeat 5 enemies and collect 8 rupees"),
    Objective(7, 12, "Defeat 7 enemies and collect 12 rupees"),
    Objective(10, 15, "Defeat 10 enemies and collect 15 rupees"),
    Objective(15, 20, "Final challenge: defeat 15 enemies and collect 20 rupees"),
)


def objectives() -> list[Objective]:
    rows = table_list("levels")
    if not rows:
        return list(_DEFAULT_OBJECTIVES)
    return [Objective(enemies=int(r.get("enemies", 3)),
                      currency=int(r.get("currency", 5)),
                      description=str(r.get("description", "")))
            for r in rows]


def max_level() -> int:
    return len(objectives())


def objective_for(level: int) -> Objective:
    objs = objectives()
    return objs[max(0, min(level, len(objs)) - 1)]


def objective_met(progress: Progress, objective: Objective | None = None) -> bool:
    obj = objective or objective_for(progress.level)
    return (progress.enemies_defeated >= obj.enemies
            and progress.currency_collected >= obj.currency)


def evaluate(world: World) -> GameState:
    """Apply end-of-frame transitions out of PLAYING."""
    progress: Progress = world.res(Progress)
    if progress.state is not GameState.PLAYING:
        return progress.state
    found = world.query_one(Player)
    if found is None:
        return progress.state
    _pid, player = found

    if player.health <= 0:
        _set_state(world, GameState.GAME_OVER)
        print(f"[LEVEL] game over on level {progress.level}, "
              f"score {progress.score}")
    elif objective_met(progress):
        progress.score += progress.level * int(_tun("score", "level", 100))
        _set_state(world, GameState.LEVEL_COMPLETE)
        print(f"[LEVEL] level {progress.level} complete")
    return progress.state


# ── Level lifecycle ─────────────────────────────────────────────────

def start_level(world: World, rng=random):
    """Build a fresh room for the current level and populate it.

    Every entity except the player is dropped; the player is moved to
    the new room's spawn point.  Any doorway walk in progress is
    dropped and the level starts again in its first room.
    """
    progress: Progress = world.res(Progress)
    room = generate_room(theme_for_level(progress.level), rng)
    world.set_res(room)
    world.clear_entities(keep=(Player,))

    found = world.query_one(Player)
    if found is None:
        world.spawn(new_player(room))
    else:
        reset_player_for_level(found[1], room)

    tr: RoomTransition | None = world.res(RoomTransition)
    if tr:
        tr.reset()
    cam: Camera | None = world.res(Camera)
    if cam:
        cam.x = cam.y = 0.0
    populate_level(world, progress.level, objective_for(progress.level), rng)


def next_level(world: World, rng=random) -> GameState:
    """Advance from LEVEL_COMPLETE.  Past the last level → GAME_WON."""
    progress: Progress = world.res(Progress)
    if progress.state is not GameState.LEVEL_COMPLETE:
        return progress.state
    if progress.level >= max_level():
        _set_state(world, GameState.GAME_WON)
        print(f"[LEVEL] all levels cleared, final score {progress.score}")
        return progress.state

    progress.level += 1
    progress.reset_counters()
    found = world.query_one(Player)
    if found:
        p = found[1]
        p.health = min(p.max_health, p.health + int(_tun("player", "level_heal", 2)))
    start_level(world, rng)
    _set_state(world, GameState.PLAYING)
    print(f"[LEVEL] entering level {progress.level} "
          f"({world.res(Room).theme.name})")
    return progress.state


def restart(world: World, rng=random) -> GameState:
    """Back to level 1 with a fresh player."""
    progress: Progress = world.res(Progress)
    progress.level = 1
    progress.score = 0
    progress.paused = False
    progress.reset_counters()
    clock: GameClock | None = world.res(GameClock)
    if clock:
        clock.time = 0.0
    world.clear_entities()
    start_level(world, rng)
    _set_state(world, GameState.PLAYING)
    print("[LEVEL] restarted")
    return progress.state


def new_session(rng=random) -> World:
    """World with all simulation resources and level 1 populated.

    Feedback sinks (effects, audio) are attached by the caller.
    """
    world = World()
    world.set_res(EventBus())
    world.set_res(DevLog())
    world.set_res(GameClock())
    world.set_res(Camera())
    world.set_res(Progress())
    world.set_res(RoomTransition())
    start_level(world, rng)
    return world


def _set_state(world: World, state: GameState):
    progress: Progress = world.res(Progress)
    progress.state = state
    log: DevLog | None = world.res(DevLog)
    clock: GameClock | None = world.res(GameClock)
    if log:
        log.record(0, "level", f"level {progress.level}: {state.value}",
                   t=clock.time if clock else 0.0)
    bus: EventBus | None = world.res(EventBus)
    if bus:
        bus.emit(LevelChanged(level=progress.level, state=state.value))
