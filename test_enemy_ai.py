"""test_enemy_ai.py — Enemy wander / chase / stun behaviour.

Scenarios place one player and one or two enemies in a walled open
room and step ``update_enemies`` directly.

Run:  python test_enemy_ai.py      (or: pytest test_enemy_ai.py)
"""
from __future__ import annotations
import sys, math, random, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from core.constants import TILE_WALL
from core.ecs import World
from core.events import EventBus
from core.room import Room, open_room
from components import (
    Player, Enemy, EnemyKind, Direction, Progress, DevLog, GameClock,
)
from logic.enemy_ai import (
    AiState, enemy_state, make_enemy, drop_value, update_enemies,
)
from logic.spawner import pick_enemy_kind
from logic.timers import advance_timers


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

DT = 0.016


def _arena(px: float = 200.0, py: float = 150.0) -> tuple[World, Player]:
    world = World()
    world.set_res(open_room())
    world.set_res(EventBus())
    world.set_res(DevLog())
    world.set_res(GameClock())
    world.set_res(Progress())
    pid = world.spawn(Player(x=px, y=py))
    return world, world.get(pid)


class _FixedRng:
    """Always rolls the same heading and the shortest wander period."""

    def __init__(self, heading: Direction):
        self.heading = heading

    def randrange(self, n: int) -> int:
        return int(self.heading) % n

    def uniform(self, lo: float, hi: float) -> float:
        return lo


def _enemy_at(world: World, cx: float, cy: float,
              kind=EnemyKind.WEAK) -> Enemy:
    e = make_enemy(kind, cx, cy, random.Random(0))
    world.spawn(e)
    return e


# ═══════════════════════════════════════════════════════════════════════
#  Factories
# ═══════════════════════════════════════════════════════════════════════

def test_enemy_kinds():
    weak = make_enemy(EnemyKind.WEAK, 100.0, 100.0)
    strong = make_enemy(EnemyKind.STRONG, 100.0, 100.0)
    check(weak.health == 1 and weak.speed == 60.0 and (weak.w, weak.h) == (16, 16),
          "weak enemy: 1 HP, 60 px/s, 16x16")
    check(strong.health == 2 and strong.speed == 40.0 and (strong.w, strong.h) == (16, 20),
          "strong enemy: 2 HP, 40 px/s, 16x20")
    check(weak.cx == 100.0 and strong.cy == 100.0, "enemies are centred on the spawn point")
    check(1.0 <= weak.wander_period <= 2.0, "wander period rolled in 1-2s")
    check(drop_value(EnemyKind.WEAK) == 1 and drop_value(EnemyKind.STRONG) == 5,
          "drop values 1 and 5")


def test_strong_enemies_from_level_three():
    rng = random.Random(9)
    early = {pick_enemy_kind(lv, rng) for lv in (1, 2) for _ in range(200)}
    check(early == {EnemyKind.WEAK}, "levels 1-2 only spawn weak enemies")
    later = {pick_enemy_kind(3, rng) for _ in range(200)}
    check(later == {EnemyKind.WEAK, EnemyKind.STRONG}, "level 3 mixes both kinds")


# ═══════════════════════════════════════════════════════════════════════
#  Chase
# ═══════════════════════════════════════════════════════════════════════

def test_chase_toward_player():
    world, p = _arena()
    e = _enemy_at(world, p.cx + 60.0, p.cy)
    x0 = e.x
    update_enemies(world, DT, random.Random(1))
    check(e.chasing and enemy_state(e) is AiState.CHASING, "player 60px away is chased")
    check(e.facing is Direction.LEFT, "chaser faces the player")
    check(abs((e.x - x0) + 60.0 * 1.5 * DT) < 1e-9, "chase speed is 1.5x base",
          f"moved {e.x - x0:.4f}")
    log = world.res(DevLog).for_cat("ai")
    check(log and log[-1]["msg"] == "wander → chase", "transition logged")


def test_chase_picks_dominant_axis():
    world, p = _arena()
    e = _enemy_at(world, p.cx + 30.0, p.cy + 50.0)
    update_enemies(world, DT, random.Random(1))
    check(e.facing is Direction.UP, "larger vertical gap → move vertically")

    world, p = _arena()
    e = _enemy_at(world, p.cx - 40.0, p.cy + 20.0)
    update_enemies(world, DT, random.Random(1))
    check(e.facing is Direction.RIGHT, "larger horizontal gap → move horizontally")

    world, p = _arena()
    e = _enemy_at(world, p.cx + 30.0, p.cy - 30.0)
    update_enemies(world, DT, random.Random(1))
    check(e.facing is Direction.DOWN, "equal gaps → vertical wins")


def test_leaving_range_drops_chase():
    world, p = _arena()
    e = _enemy_at(world, p.cx + 60.0, p.cy)
    update_enemies(world, DT, random.Random(1))
    p.x += 200.0
    update_enemies(world, DT, random.Random(1))
    check(not e.chasing and enemy_state(e) is AiState.WANDERING,
          "player out of range → back to wandering")
    msgs = [entry["msg"] for entry in world.res(DevLog).for_cat("ai")]
    check(msgs == ["wander → chase", "chase → wander"], "both transitions logged", str(msgs))


def test_blocked_chase_turns_clockwise():
    world, p = _arena()
    room: Room = world.res(Room)
    room.tiles[5][5] = TILE_WALL            # x 160..192, y 160..192
    p.x, p.y = 222.0, 168.0
    e = Enemy(x=144.0, y=168.0, speed=60.0, facing=Direction.RIGHT)
    world.spawn(e)
    update_enemies(world, DT, random.Random(1))
    check(e.chasing, "enemy is chasing")
    check(e.x == 144.0 and e.y == 168.0, "blocked chaser does not move")
    check(e.facing is Direction.DOWN, "blocked chaser turns clockwise",
          f"facing={e.facing.label}")


# ═══════════════════════════════════════════════════════════════════════
#  Wander + stun
# ═══════════════════════════════════════════════════════════════════════

def test_wander_repicks_direction():
    world, p = _arena(px=40.0, py=40.0)
    e = _enemy_at(world, 400.0, 240.0)
    e.wander_timer = e.wander_period
    x0, y0 = e.x, e.y
    update_enemies(world, DT, random.Random(3))
    check(e.wander_timer == 0.0, "timer resets on re-pick")
    check(1.0 <= e.wander_period <= 2.0, "new period rolled in 1-2s")
    moved = math.hypot(e.x - x0, e.y - y0)
    check(abs(moved - 60.0 * DT) < 1e-9, "wanderer moves at base speed", f"{moved:.4f}")


def test_blocked_wander_forces_repick():
    world, p = _arena(px=400.0, py=250.0)
    e = Enemy(x=32.0, y=150.0, speed=60.0, facing=Direction.LEFT,
              wander_timer=0.0, wander_period=1.5)
    world.spawn(e)
    rng = _FixedRng(Direction.DOWN)
    update_enemies(world, DT, rng)
    check(e.x == 32.0, "wanderer stays flush at the wall")
    check(e.wander_timer == e.wander_period, "blocked wander fills the timer")
    check(e.facing is Direction.LEFT, "no reversal on the blocked frame")

    update_enemies(world, DT, rng)
    check(e.facing is Direction.DOWN and e.wander_timer == 0.0,
          "next frame picks a new heading")
    check(e.y > 150.0, "and walks off along it")


def test_wander_timer_pauses_while_stunned():
    world, _p = _arena()
    e = _enemy_at(world, 400.0, 240.0)
    e.stun_timer = 0.1
    for _ in range(5):
        advance_timers(world, DT)
    check(e.wander_timer == 0.0 and abs(e.stun_timer - 0.02) < 1e-9,
          "stun counts down while the wander timer holds")
    for _ in range(5):
        advance_timers(world, DT)
    check(e.stun_timer == 0.0, "stun clamps at zero")
    check(e.wander_timer > 0.0, "wander timer resumes after the stun")


def test_stunned_enemy_frozen():
    world, p = _arena()
    e = _enemy_at(world, p.cx + 40.0, p.cy)
    e.facing = Direction.RIGHT
    e.stun_timer = 0.3
    x0, y0 = e.x, e.y
    update_enemies(world, DT, random.Random(1))
    check(enemy_state(e) is AiState.STUNNED, "state reads as stunned")
    check((e.x, e.y) == (x0, y0), "stunned enemy does not move")
    check(e.facing is Direction.RIGHT and not e.chasing,
          "stunned enemy does not turn or start chasing")


def test_one_failing_enemy_is_isolated():
    world, _p = _arena(px=40.0, py=40.0)
    bad = Enemy(x=300.0, y=200.0, facing=None)
    bad_id = world.spawn(bad)
    good = _enemy_at(world, 400.0, 240.0)
    good.wander_timer = 0.0
    x0, y0 = good.x, good.y
    update_enemies(world, DT, random.Random(2))
    check((good.x, good.y) != (x0, y0), "healthy enemy still moves")
    errors = world.res(DevLog).for_cat("error")
    check(len(errors) == 1 and errors[0]["eid"] == bad_id,
          "failure logged against the broken enemy", str(errors))


def test_dead_enemy_skipped():
    world, p = _arena()
    e = _enemy_at(world, p.cx + 40.0, p.cy)
    e.health = 0
    x0 = e.x
    update_enemies(world, DT, random.Random(1))
    check(e.x == x0 and not e.chasing, "dead enemy awaiting purge does nothing")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Enemy kinds", test_enemy_kinds),
        ("Kind by level", test_strong_enemies_from_level_three),
        ("Chase", test_chase_toward_player),
        ("Dominant axis", test_chase_picks_dominant_axis),
        ("Leave range", test_leaving_range_drops_chase),
        ("Blocked chase", test_blocked_chase_turns_clockwise),
        ("Wander re-pick", test_wander_repicks_direction),
        ("Blocked wander", test_blocked_wander_forces_repick),
        ("Stun vs wander timer", test_wander_timer_pauses_while_stunned),
        ("Stunned frozen", test_stunned_enemy_frozen),
        ("Isolation", test_one_failing_enemy_is_isolated),
        ("Dead enemy", test_dead_enemy_skipped),
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
    print(f"  Enemy AI Tests: {_passed} passed, {_failed} failed  "
          f"(total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
