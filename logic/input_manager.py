"""logic/input_manager.py — Control-based, double-buffered input layer.

Sits between raw pygame events and the simulation.  The scene feeds in
raw events; the manager maps them to *controls* and keeps two
snapshots so edge-triggered queries are exact.

Frame order (must not change):

    input.begin_frame()        # snapshot live state → current
    ... simulation reads held()/just() ...
    input.end_frame()          # current → previous

Events arriving between frames only touch the live map.  A key pressed
and released between two snapshots still shows up as held for one
frame, so quick taps of the attack button are never lost.

Usage (in room_scene):

    self.input = InputManager()
    def handle_event(self, event, app):
        self.input.feed(event)

    if self.input.just("attack"):   # rising edge this frame
        ...
    if self.input.held("move_up"):  # continuous hold
        ...
"""

from __future__ import annotations
import pygame


CONTROLS = (
    "move_up", "move_down", "move_left", "move_right",
    "attack", "confirm", "restart", "pause",
)


# ── Default key bindings ────────────────────────────────────────────

_BINDS: dict[str, list[int]] = {
    "move_up":    [pygame.K_w, pygame.K_UP],
    "move_down":  [pygame.K_s, pygame.K_DOWN],
    "move_left":  [pygame.K_a, pygame.K_LEFT],
    "move_right": [pygame.K_d, pygame.K_RIGHT],
    "attack":     [pygame.K_SPACE, pygame.K_x],
    "confirm":    [pygame.K_RETURN, pygame.K_SPACE],
    "restart":    [pygame.K_r],
    "pause":      [pygame.K_ESCAPE, pygame.K_p],
}

# key → controls it drives (space is both attack and confirm)
_KEY_TO_CONTROLS: dict[int, list[str]] = {}
for _control, _keys in _BINDS.items():
    for _key in _keys:
        _KEY_TO_CONTROLS.setdefault(_key, []).append(_control)


# ── InputManager ────────────────────────────────────────────────────

class InputManager:
    """Double-buffered control state.

    ``held`` and ``just`` are pure queries over the two snapshots; only
    ``begin_frame`` / ``end_frame`` move data between buffers.
    """

    def __init__(self):
        # control → set of sources (key codes) currently holding it
        self._live: dict[str, set[int]] = {c: set() for c in CONTROLS}
        # pressed since the last snapshot, even if already released
        self._latched: set[str] = set()
        self._current: frozenset[str] = frozenset()
        self._previous: frozenset[str] = frozenset()

    # ── event side (between frames) ─────────────────────────────

    def feed(self, event: pygame.event.Event):
        """Feed a raw pygame event."""
        if event.type == pygame.KEYDOWN:
            for control in _KEY_TO_CONTROLS.get(event.key, ()):
                self.press(control, event.key)
        elif event.type == pygame.KEYUP:
            for control in _KEY_TO_CONTROLS.get(event.key, ()):
                self.release(control, event.key)

    def press(self, control: str, source: int = 0):
        self._live[control].add(source)
        self._latched.add(control)

    def release(self, control: str, source: int = 0):
        self._live[control].discard(source)

    def release_all(self):
        for sources in self._live.values():
            sources.clear()
        self._latched.clear()

    # ── frame lifecycle ─────────────────────────────────────────

    def begin_frame(self):
        """Snapshot the live map into the current buffer."""
        held = {c for c, sources in self._live.items() if sources}
        self._current = frozenset(held | self._latched)
        self._latched.clear()

    def end_frame(self):
        """Advance the previous-frame shadow copy."""
        self._previous = self._current

    # ── queries ─────────────────────────────────────────────────

    def held(self, control: str) -> bool:
        return control in self._current

    def just(self, control: str) -> bool:
        """True on the first frame a control is held (rising edge)."""
        return control in self._current and control not in self._previous

    def released(self, control: str) -> bool:
        return control in self._previous and control not in self._current

    def movement(self) -> tuple[int, int]:
        """Raw (dx, dy) in {-1, 0, 1}.  Normalisation is the caller's job."""
        dx = 0
        dy = 0
        if self.held("move_up"):
            dy -= 1
        if self.held("move_down"):
            dy += 1
        if self.held("move_left"):
            dx -= 1
        if self.held("move_right"):
            dx += 1
        return dx, dy
