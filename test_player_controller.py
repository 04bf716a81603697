"""test_player_controller.py — Player movement, facing and attack timing.

Drives ``update_player`` one frame at a time through a real
``InputManager`` so edge detection is exercised the same way the game
loop does it.

Run:  python test_player_controller.py      (or: pytest test_player_controller.py)
"""
from __future__ import annotations
import sys, math, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from core.ecs import World
from core.events import EventBus, SwordSlash, WalkDust
from core.room import open_room
from components import Player, Direction, Progress, DevLog, GameClock
from logic.input_manager import InputManager
from logic.player import update_player, start_attack, apply_knockback
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


def _arena(x: float = 200.0, y: float = 150.0) -> tuple[World, Player, InputManager]:
    world = World()
    world.set_res(open_room())
    world.set_res(EventBus())
    world.set_res(DevLog())
    world.set_res(GameClock())
    world.set_res(Progress())
    pid = world.spawn(Player(x=x, y=y))
    return world, world.get(pid), InputManager()


def _frame(world: World, inp: InputManager, n: int = 1):
    for _ in range(n):
        inp.begin_frame()
        advance_timers(world, DT)
        update_player(world, inp, DT)
        inp.end_frame()


def _count(world: World, kind: type) -> int:
    return sum(1 for ev in world.res(EventBus).pending() if isinstance(ev, kind))


# ═══════════════════════════════════════════════════════════════════════
#  Facing + movement
# ═══════════════════════════════════════════════════════════════════════

def test_facing_priority():
    world, p, inp = _arena()
    cases = [
        (("move_up", "move_left"), Direction.UP),
        (("move_left", "move_right"), Direction.LEFT),
        (("move_down", "move_right"), Direction.DOWN),
        (("move_right",), Direction.RIGHT),
        (("move_up", "move_down", "move_left", "move_right"), Direction.UP),
    ]
    for controls, want in cases:
        inp.release_all()
        for c in controls:
            inp.press(c)
        _frame(world, inp)
        check(p.facing is want, f"{'+'.join(controls)} faces {want.label}",
              f"got {p.facing.label}")

    inp.release_all()
    _frame(world, inp)
    check(p.facing is Direction.UP, "no input keeps the last facing")


def test_opposing_keys_cancel():
    world, p, inp = _arena()
    inp.press("move_left")
    inp.press("move_right")
    _frame(world, inp, 10)
    check(p.mx == 0.0 and p.x == 200.0, "left + right produces no motion")


def test_momentum_and_friction():
    world, p, inp = _arena()
    inp.press("move_right")
    _frame(world, inp, 30)
    check(p.x > 230.0 and p.mx > 0.0, "holding right builds momentum",
          f"x={p.x:.1f}, mx={p.mx:.1f}")
    check(p.moving, "moving flag set while input is held")

    inp.release("move_right")
    _frame(world, inp, 60)
    check(p.mx == 0.0, "friction snaps small momentum to exactly zero", f"mx={p.mx}")
    check(not p.moving, "moving flag clears without input")
    x = p.x
    _frame(world, inp, 5)
    check(p.x == x, "player at rest stays put")


def test_diagonal_is_normalised():
    world, p, inp = _arena()
    inp.press("move_right")
    _frame(world, inp)
    straight = math.hypot(p.mx, p.my)

    world, p, inp = _arena()
    inp.press("move_up")
    inp.press("move_right")
    _frame(world, inp)
    diag = math.hypot(p.mx, p.my)
    check(abs(p.mx) == abs(p.my), "diagonal splits momentum evenly")
    check(abs(diag - straight) < straight * 0.01,
          "diagonal is no faster than a straight line",
          f"diag={diag:.3f}, straight={straight:.3f}")


def test_knockback_moves_player():
    world, p, inp = _arena()
    apply_knockback(p, p.cx + 10.0, p.cy)
    check(p.mx == -150.0, "knockback adds 150 away from the source", f"mx={p.mx}")
    _frame(world, inp)
    check(p.x < 200.0, "knockback moves the player on the next frame")

    world, p, inp = _arena(x=32.0)
    apply_knockback(p, p.cx + 10.0, p.cy)
    _frame(world, inp)
    check(p.x == 32.0 and p.mx == 0.0, "knockback into a wall stops flush")


# ═══════════════════════════════════════════════════════════════════════
#  Attack
# ═══════════════════════════════════════════════════════════════════════

def test_held_attack_swings_once():
    world, p, inp = _arena()
    inp.press("attack")
    _frame(world, inp)
    check(p.attacking, "pressing attack starts a swing")
    _frame(world, inp, 59)
    check(_count(world, SwordSlash) == 1, "holding attack for 60 frames swings once",
          f"slashes={_count(world, SwordSlash)}")
    check(not p.attacking, "swing has ended")


def test_swing_duration():
    world, p, inp = _arena()
    inp.press("attack")
    _frame(world, inp)
    inp.release("attack")
    _frame(world, inp, 14)
    check(p.attacking, "still swinging after 0.22s")
    _frame(world, inp, 2)
    check(not p.attacking and p.attack_time == 0.0, "swing over after 0.25s")


def test_spam_respects_cooldown():
    world, p, inp = _arena()
    for i in range(20):
        if i % 2 == 0:
            inp.press("attack")
        else:
            inp.release("attack")
        _frame(world, inp)
    check(_count(world, SwordSlash) == 1, "tapping every other frame for 0.32s swings once",
          f"slashes={_count(world, SwordSlash)}")

    for i in range(20, 60):
        if i % 2 == 0:
            inp.press("attack")
        else:
            inp.release("attack")
        _frame(world, inp)
    check(_count(world, SwordSlash) >= 2, "a new swing starts once the cooldown ends")


def test_quick_tap_is_not_lost():
    world, p, inp = _arena()
    inp.press("attack")
    inp.release("attack")
    _frame(world, inp)
    check(p.attacking, "press + release between frames still swings")


def test_start_attack_gate():
    p = Player()
    check(start_attack(p), "first swing allowed")
    check(p.attack_cooldown == 0.4, "cooldown set to 0.4s")
    check(not start_attack(p), "second swing blocked during cooldown")


def test_walk_while_swinging():
    world, p, inp = _arena()
    inp.press("move_right")
    inp.press("attack")
    _frame(world, inp, 10)
    check(p.attacking and p.x > 200.0, "player keeps moving during a swing",
          f"x={p.x:.2f}")


def test_walk_dust():
    world, p, inp = _arena()
    inp.press("move_right")
    _frame(world, inp, 30)
    n = _count(world, WalkDust)
    check(1 <= n <= 4, "dust puffs while walking, throttled", f"puffs={n}")


# ═══════════════════════════════════════════════════════════════════════
#  Timers
# ═══════════════════════════════════════════════════════════════════════

def test_invulnerability_expires():
    world, p, _inp = _arena()
    p.invulnerable = True
    for _ in range(90):
        advance_timers(world, DT)
    check(p.invulnerable, "still invulnerable at 1.44s")
    for _ in range(5):
        advance_timers(world, DT)
    check(not p.invulnerable and p.invuln_time == 0.0, "invulnerability ends by 1.52s")


def test_cooldown_clamps_at_zero():
    world, p, _inp = _arena()
    p.attack_cooldown = 0.01
    advance_timers(world, DT)
    check(p.attack_cooldown == 0.0, "cooldown never goes negative")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Facing priority", test_facing_priority),
        ("Opposing keys", test_opposing_keys_cancel),
        ("Momentum + friction", test_momentum_and_friction),
        ("Diagonal", test_diagonal_is_normalised),
        ("Knockback", test_knockback_moves_player),
        ("Held attack", test_held_attack_swings_once),
        ("Swing duration", test_swing_duration),
        ("Attack spam", test_spam_respects_cooldown),
        ("Quick tap", test_quick_tap_is_not_lost),
        ("Attack gate", test_start_attack_gate),
        ("Walk + swing", test_walk_while_swinging),
        ("Walk dust", test_walk_dust),
        ("Invulnerability expiry", test_invulnerability_expires),
        ("Cooldown clamp", test_cooldown_clamps_at_zero),
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
    print(f"  Player Controller Tests: {_passed} passed, {_failed} failed  "
          f"(total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
