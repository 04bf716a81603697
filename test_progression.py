"""test_progression.py — Level objectives, spawning and the state machine.

Run:  python test_progression.py      (or: pytest test_progression.py)
"""
from __future__ import annotations
import sys, random, traceback
from fnmatch import fnmatch
from pathlib import Path

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning, table_list, tomllib
_load_tuning()

from core.ecs import World
from core.room import Room, Theme, open_room, generate_room
from components import (
    Player, Enemy, Collectible, CollectibleKind, Progress, GameState,
    Objective, GameClock,
)
from logic.progression import (
    objective_for, objective_met, max_level, evaluate,
    next_level, restart, new_session,
)
from logic.spawner import populate_level


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def check(cond: bool, label: str, detail: str = ""):
    global _passed, _failed
    if cond:
        _passed += 1
        print(f"  [PASS] {label}")
    else:
        _failed += 1
        print(f"  [FAIL] {label}" + (f": {detail}" if detail else ""))
    assert cond, f"{label} {detail}"


def _player(world: World) -> Player:
    return world.query_one(Player)[1]


def _tile_of(room: Room, ent) -> tuple[int, int]:
    ts = room.tile_size
    return int(ent.cx // ts), int(ent.cy // ts)


def _currency_items(world: World) -> list[Collectible]:
    return [c for c in world.all_of(Collectible) if c.kind is CollectibleKind.CURRENCY]


def _hearts(world: World) -> list[Collectible]:
    return [c for c in world.all_of(Collectible) if c.kind is CollectibleKind.HEART]


# ═══════════════════════════════════════════════════════════════════════
#  Objectives
# ═══════════════════════════════════════════════════════════════════════

def test_objective_table():
    want = [(3, 5), (5, 8), (7, 12), (10, 15), (15, 20)]
    got = [(objective_for(lv).enemies, objective_for(lv).currency)
           for lv in range(1, 6)]
    check(got == want, "five levels with rising objectives", str(got))
    check(max_level() == 5, "five levels in total")
    check(objective_for(99).enemies == 15, "past the end clamps to the last level")


def test_completion_in_any_order():
    orders = ["eeeccccc", "ccccceee", "ecececcc", "cccceeec"]
    shuffler = random.Random(12)
    for _ in range(4):
        seq = list("eeeccccc")
        shuffler.shuffle(seq)
        orders.append("".join(seq))

    world = new_session(random.Random(1))
    progress = world.res(Progress)
    for order in orders:
        progress.state = GameState.PLAYING
        progress.reset_counters()
        states = []
        for step in order:
            if step == "e":
                progress.enemies_defeated += 1
            else:
                progress.currency_collected += 1
            states.append(evaluate(world))
        early = all(s is GameState.PLAYING for s in states[:-1])
        check(early and states[-1] is GameState.LEVEL_COMPLETE,
              f"order {order}: completes exactly when both are met",
              str([s.value for s in states]))


def test_currency_counts_by_value():
    progress = Progress(enemies_defeated=3, currency_collected=4)
    check(not objective_met(progress), "4 of 5 rupees is not enough")
    progress.currency_collected += 5
    check(objective_met(progress), "one blue rupee can finish the count")


def test_game_over_beats_completion():
    world = new_session(random.Random(2))
    progress = world.res(Progress)
    progress.enemies_defeated = 3
    progress.currency_collected = 5
    _player(world).health = 0
    check(evaluate(world) is GameState.GAME_OVER,
          "dying on the clearing frame is still game over")
    _player(world).health = 6
    check(evaluate(world) is GameState.GAME_OVER, "evaluate leaves non-playing states alone")


def test_completion_awards_level_bonus():
    world = new_session(random.Random(3))
    progress = world.res(Progress)
    progress.level = 2
    progress.enemies_defeated = 5
    progress.currency_collected = 8
    evaluate(world)
    check(progress.score == 200, "level bonus is level x 100", f"score={progress.score}")


# ═══════════════════════════════════════════════════════════════════════
#  Level lifecycle
# ═══════════════════════════════════════════════════════════════════════

def test_next_level_rebuilds_room():
    world = new_session(random.Random(4))
    progress = world.res(Progress)
    p = _player(world)
    p.health = 3
    p.currency = 7
    p.x += 50.0
    progress.enemies_defeated = 3
    progress.currency_collected = 5
    progress.state = GameState.LEVEL_COMPLETE
    old_room = world.res(Room)

    check(next_level(world, random.Random(4)) is GameState.PLAYING, "back to playing")
    room = world.res(Room)
    check(progress.level == 2, "level advanced")
    check(progress.enemies_defeated == 0 and progress.currency_collected == 0,
          "counters reset")
    check(room is not old_room and room.theme.name == "desert",
          "fresh desert room for level 2")
    check(p.health == 5, "+2 health between levels", f"hp={p.health}")
    check(p.currency == 7, "wallet carries over")
    check((p.x, p.y) == room.spawn_point(p.w, p.h), "player back at the spawn point")
    check(world.count(Enemy) == 5, "5 enemies for level 2", str(world.count(Enemy)))
    check(len(_currency_items(world)) == 8, "8 rupees for level 2")
    check(len(_hearts(world)) == 1, "1 heart for level 2")


def test_level_heal_is_capped():
    world = new_session(random.Random(5))
    world.res(Progress).state = GameState.LEVEL_COMPLETE
    next_level(world, random.Random(5))
    check(_player(world).health == 6, "full health stays at the max")


def test_next_level_needs_completion():
    world = new_session(random.Random(6))
    progress = world.res(Progress)
    room = world.res(Room)
    check(next_level(world) is GameState.PLAYING and progress.level == 1
          and world.res(Room) is room,
          "next_level outside LEVEL_COMPLETE changes nothing")


def test_final_level_wins():
    world = new_session(random.Random(7))
    progress = world.res(Progress)
    progress.level = 5
    progress.state = GameState.LEVEL_COMPLETE
    check(next_level(world) is GameState.GAME_WON, "clearing level 5 wins the game")
    check(progress.level == 5, "level index stays on the last level")


def test_restart_from_game_over():
    world = new_session(random.Random(8))
    progress = world.res(Progress)
    old = _player(world)
    old.health = 0
    old.currency = 9
    progress.level = 3
    progress.score = 1234
    world.res(GameClock).time = 42.0
    evaluate(world)
    check(progress.state is GameState.GAME_OVER, "game over at 0 HP")

    check(restart(world, random.Random(8)) is GameState.PLAYING, "restart → playing")
    p = _player(world)
    check(p is not old and p.health == 6 and p.currency == 0, "fresh player")
    check(progress.level == 1 and progress.score == 0, "back to level 1 with no score")
    check(world.res(GameClock).time == 0.0, "play clock reset")
    check(world.count(Enemy) == 3 and len(_currency_items(world)) == 5,
          "level 1 repopulated")
    check(world.count(Player) == 1, "exactly one player")


# ═══════════════════════════════════════════════════════════════════════
#  Spawning
# ═══════════════════════════════════════════════════════════════════════

def test_population_layout():
    for seed in range(10):
        world = new_session(random.Random(seed))
        room = world.res(Room)
        cells = []
        for _eid, ent in world.query(Enemy, Collectible):
            c, r = _tile_of(room, ent)
            cells.append((c, r))
            if not room.is_walkable(c, r):
                check(False, f"seed {seed}: entity on a wall tile", str((c, r)))
            if isinstance(ent, Enemy) and room.in_safe_zone(c, r):
                check(False, f"seed {seed}: enemy inside the safe area", str((c, r)))
            if room.is_landing(c, r):
                check(False, f"seed {seed}: spawn on a doorway landing", str((c, r)))
        check(len(cells) == len(set(cells)), f"seed {seed}: one entity per tile")


def test_hearts_and_keys_per_level():
    for level, hearts in ((1, 1), (2, 1), (4, 2), (5, 2)):
        world = World()
        world.set_res(open_room())
        counts = populate_level(world, level, Objective(1, 1), random.Random(level))
        check(counts["hearts"] == hearts, f"level {level}: {hearts} heart(s)",
              str(counts))
        check(counts["keys"] in (0, 1), f"level {level}: at most one key")

    keyed = 0
    for seed in range(200):
        world = World()
        world.set_res(open_room())
        keyed += populate_level(world, 1, Objective(0, 0), random.Random(seed))["keys"]
    check(15 <= keyed <= 65, "keys appear roughly one level in five", f"{keyed}/200")


def test_crowded_room_spawn_terminates():
    world = World()
    room = generate_room(Theme("solid", 1.0, (0, 0, 0), (0, 0, 0)), random.Random(1))
    world.set_res(room)
    counts = populate_level(world, 5, objective_for(5), random.Random(1))
    check(counts["enemies"] == 15 and counts["currency"] == 20,
          "a walled-in room still gets its full population", str(counts))
    on_floor = all(room.is_walkable(*_tile_of(room, ent))
                   for _eid, ent in world.query(Enemy, Collectible))
    check(on_floor, "fallback positions are all walkable")


# ═══════════════════════════════════════════════════════════════════════
#  Packaging
# ═══════════════════════════════════════════════════════════════════════

def test_tuning_file_ships_with_package():
    root = Path(__file__).resolve().parent
    with open(root / "pyproject.toml", "rb") as f:
        tool = tomllib.load(f)["tool"]["setuptools"]
    check("data" in tool["packages"]["find"]["include"],
          "data/ is installed as a package")
    patterns = tool.get("package-data", {}).get("data", [])
    check(any(fnmatch("tuning.toml", p) for p in patterns),
          "tuning.toml is declared as package data", str(patterns))
    check((root / "data" / "tuning.toml").exists(), "tuning file is on disk")
    check(len(table_list("levels")) == max_level(), "level table read from it")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Objective table", test_objective_table),
        ("Completion order", test_completion_in_any_order),
        ("Currency by value", test_currency_counts_by_value),
        ("Game over precedence", test_game_over_beats_completion),
        ("Level bonus", test_completion_awards_level_bonus),
        ("Next level", test_next_level_rebuilds_room),
        ("Heal cap", test_level_heal_is_capped),
        ("Next level gate", test_next_level_needs_completion),
        ("Final level", test_final_level_wins),
        ("Restart", test_restart_from_game_over),
        ("Population layout", test_population_layout),
        ("Hearts + keys", test_hearts_and_keys_per_level),
        ("Crowded spawn", test_crowded_room_spawn_terminates),
        ("Packaged tuning", test_tuning_file_ships_with_package),
    ]

    for name, fn in sections:
        print(f"\n── {name} ──")
        try:
            fn()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name}: unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Progression Tests: {_passed} passed, {_failed} failed  "
          f"(total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
