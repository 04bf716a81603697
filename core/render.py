"""core/render.py — Sprite-id render sink.

Game code never picks colours or touches pixels; it asks the sink to
draw a *sprite id* at a room position:

    sink.set_target(surface, ox=-cam.x, oy=-cam.y + HUD_H)
    sink.draw("enemy.octorok", e.x, e.y)
    sink.draw("player.right", p.x, p.y, flip=True)    # faces left
    sink.overlay((255, 0, 0), 0.3)                    # damage flash

``PygameRenderSink`` builds each sprite once from a small rectangle
palette and caches the scaled / flipped variants.  Unknown ids draw as
a magenta box so missing art is obvious but harmless.
"""

from __future__ import annotations
import pygame

from core.constants import TILE_SIZE
from core.room import get_theme

# (x, y, w, h, colour) rects inside a sprite frame
Rect = tuple[int, int, int, int, tuple[int, int, int]]

_TUNIC = (0, 168, 0)
_CAP = (0, 120, 0)
_SKIN = (252, 188, 116)
_BOOT = (139, 69, 19)
_EYE = (20, 20, 20)
_BLADE = (200, 200, 210)
_HILT = (139, 69, 19)

_PLAYER_BASE: list[Rect] = [
    (3, 6, 10, 8, _TUNIC),
    (4, 1, 8, 6, _SKIN),
    (3, 0, 10, 2, _CAP),
    (4, 14, 3, 2, _BOOT),
    (9, 14, 3, 2, _BOOT),
]

_HEART: list[Rect] = [
    (2, 3, 5, 5, (220, 20, 60)), (9, 3, 5, 5, (220, 20, 60)),
    (2, 6, 12, 5, (220, 20, 60)), (4, 11, 8, 2, (220, 20, 60)),
    (6, 13, 4, 2, (220, 20, 60)), (3, 4, 2, 2, (255, 182, 193)),
]


def _rupee(color: tuple[int, int, int]) -> list[Rect]:
    hi = tuple(min(255, c + 80) for c in color)
    return [(6, 1, 4, 14, color), (4, 3, 8, 10, color), (3, 6, 10, 4, color),
            (6, 4, 2, 5, hi)]


SPRITES: dict[str, tuple[tuple[int, int], list[Rect]]] = {
    "player.down":  ((16, 16), _PLAYER_BASE + [(5, 3, 2, 2, _EYE), (9, 3, 2, 2, _EYE)]),
    "player.up":    ((16, 16), _PLAYER_BASE + [(3, 0, 10, 5, _CAP)]),
    "player.right": ((16, 16), _PLAYER_BASE + [(10, 3, 2, 2, _EYE), (2, 2, 2, 4, _CAP)]),
    "sword.v":      ((4, 14), [(1, 0, 2, 10, _BLADE), (0, 10, 4, 1, _HILT), (1, 11, 2, 3, _HILT)]),
    "sword.h":      ((14, 4), [(4, 1, 10, 2, _BLADE), (3, 0, 1, 4, _HILT), (0, 1, 3, 2, _HILT)]),
    "enemy.octorok": ((16, 16), [
        (2, 3, 12, 10, (200, 40, 40)), (4, 1, 8, 14, (200, 40, 40)),
        (4, 5, 3, 3, (255, 255, 255)), (9, 5, 3, 3, (255, 255, 255)),
        (6, 10, 4, 3, (120, 20, 20)),
    ]),
    "enemy.octorok.stunned": ((16, 16), [
        (2, 3, 12, 10, (255, 200, 200)), (4, 1, 8, 14, (255, 200, 200)),
        (4, 6, 3, 1, _EYE), (9, 6, 3, 1, _EYE),
    ]),
    "enemy.moblin": ((16, 20), [
        (3, 6, 10, 12, (205, 133, 63)), (4, 0, 8, 7, (160, 82, 45)),
        (5, 2, 2, 2, (255, 255, 0)), (9, 2, 2, 2, (255, 255, 0)),
        (3, 18, 4, 2, (90, 60, 30)), (9, 18, 4, 2, (90, 60, 30)),
    ]),
    "enemy.moblin.stunned": ((16, 20), [
        (3, 6, 10, 12, (255, 228, 196)), (4, 0, 8, 7, (245, 222, 179)),
        (5, 3, 2, 1, _EYE), (9, 3, 2, 1, _EYE),
    ]),
    "currency.green": ((16, 16), _rupee((0, 200, 0))),
    "currency.blue":  ((16, 16), _rupee((65, 105, 225))),
    "heart":          ((16, 16), _HEART),
    "heart.empty":    ((16, 16), [(r[0], r[1], r[2], r[3], (70, 70, 70)) for r in _HEART]),
    "key": ((16, 16), [
        (1, 3, 6, 6, (255, 215, 0)), (3, 5, 2, 2, (0, 0, 0, 0)),
        (7, 5, 8, 2, (255, 215, 0)), (12, 7, 2, 3, (255, 215, 0)),
        (9, 7, 2, 2, (255, 215, 0)),
    ]),
    "tile.tree": ((32, 32), [
        (13, 20, 6, 12, (101, 67, 33)), (6, 4, 20, 18, (0, 100, 0)),
        (10, 0, 12, 8, (34, 139, 34)), (9, 8, 4, 4, (50, 160, 50)),
    ]),
    "tile.dune": ((32, 32), [
        (2, 18, 28, 8, (210, 180, 140)), (8, 12, 16, 8, (238, 214, 175)),
    ]),
}

_MISSING = ((16, 16), [(0, 0, 16, 16, (255, 0, 255))])


# ── Interface ───────────────────────────────────────────────────────

class RenderSink:
    """What the game draws through.  One implementation per backend."""

    def set_target(self, surface, ox: float = 0.0, oy: float = 0.0):
        pass

    def draw(self, sprite_id: str, x: float, y: float, *,
             scale: float = 1.0, flip: bool = False, alpha: float = 1.0):
        """Draw *sprite_id* with its top-left at room position (x, y)."""
        raise NotImplementedError

    def overlay(self, color: tuple[int, int, int], alpha: float):
        """Tint the whole target (screen flashes)."""
        raise NotImplementedError


class PygameRenderSink(RenderSink):
    def __init__(self):
        self._surface: pygame.Surface | None = None
        self._ox = 0.0
        self._oy = 0.0
        self._cache: dict[tuple[str, float, bool], pygame.Surface] = {}

    def set_target(self, surface: pygame.Surface, ox: float = 0.0, oy: float = 0.0):
        self._surface = surface
        self._ox = ox
        self._oy = oy

    def draw(self, sprite_id: str, x: float, y: float, *,
             scale: float = 1.0, flip: bool = False, alpha: float = 1.0):
        if self._surface is None or alpha <= 0.0:
            return
        img = self._image(sprite_id, scale, flip)
        if alpha < 1.0:
            img = img.copy()
            img.set_alpha(int(alpha * 255))
        self._surface.blit(img, (int(x + self._ox), int(y + self._oy)))

    def overlay(self, color: tuple[int, int, int], alpha: float):
        if self._surface is None or alpha <= 0.0:
            return
        veil = pygame.Surface(self._surface.get_size(), pygame.SRCALPHA)
        veil.fill((*color, int(min(1.0, alpha) * 255)))
        self._surface.blit(veil, (0, 0))

    # ── sprite cache ──

    def _image(self, sprite_id: str, scale: float, flip: bool) -> pygame.Surface:
        key = (sprite_id, scale, flip)
        img = self._cache.get(key)
        if img is not None:
            return img
        img = self._build(sprite_id)
        if scale != 1.0:
            w, h = img.get_size()
            img = pygame.transform.scale(img, (max(1, int(w * scale)),
                                               max(1, int(h * scale))))
        if flip:
            img = pygame.transform.flip(img, True, False)
        self._cache[key] = img
        return img

    def _build(self, sprite_id: str) -> pygame.Surface:
        if sprite_id.startswith("tile.") and sprite_id not in SPRITES:
            return self._build_tile(sprite_id)
        (w, h), rects = SPRITES.get(sprite_id, _MISSING)
        img = pygame.Surface((w, h), pygame.SRCALPHA)
        for rx, ry, rw, rh, color in rects:
            img.fill(color, pygame.Rect(rx, ry, rw, rh))
        return img

    def _build_tile(self, sprite_id: str) -> pygame.Surface:
        # "tile.<theme>.<floor|wall>"
        parts = sprite_id.split(".")
        theme = get_theme(parts[1] if len(parts) > 2 else "forest")
        ts = TILE_SIZE
        img = pygame.Surface((ts, ts), pygame.SRCALPHA)
        if parts[-1] == "wall":
            base = theme.wall_color
            img.fill(base)
            dark = tuple(max(0, c - 40) for c in base)
            light = tuple(min(255, c + 30) for c in base)
            pygame.draw.rect(img, light, (0, 0, ts, 3))
            pygame.draw.rect(img, dark, (0, ts - 3, ts, 3))
            pygame.draw.line(img, dark, (0, ts // 2), (ts, ts // 2))
            pygame.draw.line(img, dark, (ts // 2, 0), (ts // 2, ts // 2))
        else:
            base = theme.floor_color
            img.fill(base)
            detail = tuple(min(255, c + 18) for c in base)
            for dx, dy in ((5, 7), (20, 12), (11, 24), (26, 27)):
                img.fill(detail, (dx, dy, 2, 2))
        return img
