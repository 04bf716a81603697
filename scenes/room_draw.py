"""scenes/room_draw.py — Rendering helpers for the room scene.

All pure-draw functions live here so that RoomScene.draw() stays thin.
World-space drawing goes through a ``RenderSink`` by sprite id; only
the HUD text and particles touch pygame directly.
"""

from __future__ import annotations
import math
import pygame

from core.app import App
from core.constants import TILE_WALL, TILE_TREE, TILE_DUNE, HUD_H
from core.ecs import World
from core.render import RenderSink
from core.room import Room
from components import Player, Enemy, Collectible, CollectibleKind, Direction, GameState
from logic.hud import HudState


# ── Sprite selection ────────────────────────────────────────────────

def sprite_for(ent) -> tuple[str, bool]:
    """Return ``(sprite_id, flip)`` for an entity variant."""
    if isinstance(ent, Player):
        if ent.facing is Direction.LEFT:
            return "player.right", True
        return f"player.{ent.facing.label}", False
    if isinstance(ent, Enemy):
        base = f"enemy.{ent.kind.value}"
        return (base + ".stunned" if ent.stun_timer > 0.0 else base), False
    if isinstance(ent, Collectible):
        if ent.kind is CollectibleKind.CURRENCY:
            return ("currency.blue" if ent.value >= 5 else "currency.green"), False
        return ent.kind.value, False
    raise TypeError(f"no sprite for {type(ent).__name__}")


def tile_sprite(room: Room, col: int, row: int) -> str | None:
    """Overlay sprite for decorated tiles, or None for plain floor/wall."""
    code = room.tile_at(col, row)
    if code == TILE_TREE:
        return "tile.tree"
    if code == TILE_DUNE:
        return "tile.dune"
    return None


# ── Room ────────────────────────────────────────────────────────────

def draw_room(sink: RenderSink, room: Room,
              cam_x: float, cam_y: float, view_w: int, view_h: int):
    ts = room.tile_size
    c0 = max(0, int(cam_x // ts))
    r0 = max(0, int(cam_y // ts))
    c1 = min(room.cols, int((cam_x + view_w) // ts) + 2)
    r1 = min(room.rows, int((cam_y + view_h) // ts) + 2)
    theme = room.theme.name
    for row in range(r0, r1):
        for col in range(c0, c1):
            kind = "wall" if room.tile_at(col, row) == TILE_WALL else "floor"
            sink.draw(f"tile.{theme}.{kind}", col * ts, row * ts)
            deco = tile_sprite(room, col, row)
            if deco:
                sink.draw(deco, col * ts, row * ts)


# ── Entities ────────────────────────────────────────────────────────

def draw_entities(sink: RenderSink, world: World):
    for _eid, ent in world.query(Collectible, Enemy):
        sprite, flip = sprite_for(ent)
        if isinstance(ent, Collectible):
            bob = math.sin(ent.anim_phase) * 2.0
            sink.draw(sprite, ent.x, ent.y + bob, flip=flip)
        else:
            sink.draw(sprite, ent.x, ent.y, flip=flip)

    found = world.query_one(Player)
    if found:
        draw_player(sink, found[1])


def draw_player(sink: RenderSink, p: Player):
    alpha = 1.0
    if p.invulnerable and int(p.invuln_time * 10) % 2 == 1:
        alpha = 0.3
    sprite, flip = sprite_for(p)
    sink.draw(sprite, p.x, p.y, flip=flip, alpha=alpha)

    if not p.attacking:
        return
    if p.facing is Direction.UP:
        sink.draw("sword.v", p.cx - 2, p.y - 14)
    elif p.facing is Direction.DOWN:
        sink.draw("sword.v", p.cx - 2, p.y + p.h)
    elif p.facing is Direction.RIGHT:
        sink.draw("sword.h", p.x + p.w, p.cy - 2)
    else:
        sink.draw("sword.h", p.x - 14, p.cy - 2, flip=True)


# ── Particles ──────────────────────────────────────────────────────

def draw_particles(pm, surface: pygame.Surface, ox: int, oy: int):
    """Render all particles.  (ox, oy) maps room px → surface px."""
    for p in pm.particles:
        sx = ox + int(p.x)
        sy = oy + int(p.y)
        t = p.alpha
        alpha = int(255 * t)
        r, g, b = p.color
        radius = max(1, int(p.size * t if p.fade else p.size))

        if alpha >= 250:
            pygame.draw.circle(surface, (r, g, b), (sx, sy), radius)
        else:
            d = radius * 2 + 2
            dot = pygame.Surface((d, d), pygame.SRCALPHA)
            pygame.draw.circle(dot, (r, g, b, alpha), (d // 2, d // 2), radius)
            surface.blit(dot, (sx - d // 2, sy - d // 2))


# ── HUD ────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, sink: RenderSink, hud: HudState):
    sw = surface.get_width()
    bar = pygame.Surface((sw, HUD_H), pygame.SRCALPHA)
    bar.fill((0, 0, 0, 190))
    surface.blit(bar, (0, 0))

    # Hearts are drawn in screen space, so point the sink at the surface.
    sink.set_target(surface)
    for i in range(hud.max_health):
        sprite = "heart" if i < hud.health else "heart.empty"
        sink.draw(sprite, 6 + i * 14, 2, scale=0.75)
    sink.draw("currency.green", 6, 16, scale=0.75)
    app.draw_text(surface, hud.currency_text, 20, 16, (255, 255, 255), app.font_sm)
    sink.draw("key", 56, 16, scale=0.75)
    app.draw_text(surface, hud.keys_text, 70, 16, (255, 255, 255), app.font_sm)

    app.draw_text(surface, f"Level {hud.level}", sw - 150, 2, (255, 215, 0), app.font_sm)
    app.draw_text(surface,
                  f"Enemies {hud.enemies_defeated}/{hud.enemies_required}  "
                  f"Rupees {hud.currency_collected}/{hud.currency_required}",
                  sw - 230, 16, (200, 200, 255), app.font_sm)


def draw_banner(surface: pygame.Surface, app: App, hud: HudState):
    """Centre-screen message for every non-playing state."""
    lines: list[tuple[str, tuple[int, int, int]]] = []
    if hud.state is GameState.LEVEL_COMPLETE:
        lines = [(f"LEVEL {hud.level} COMPLETE", (255, 215, 0)),
                 ("Press ENTER for the next level", (255, 255, 255))]
    elif hud.state is GameState.GAME_WON:
        lines = [("YOU WIN!", (255, 215, 0)),
                 (f"Score {hud.score}   Time {hud.play_time_text}", (255, 255, 255)),
                 ("Press R to play again", (200, 200, 200))]
    elif hud.state is GameState.GAME_OVER:
        lines = [("GAME OVER", (255, 68, 68)),
                 (f"Level {hud.level}   Score {hud.score}   Time {hud.play_time_text}",
                  (255, 255, 255)),
                 ("Press R to restart", (200, 200, 200))]
    elif hud.paused:
        lines = [("PAUSED", (255, 255, 255))]
    if not lines:
        return

    sw, sh = surface.get_size()
    veil = pygame.Surface((sw, sh), pygame.SRCALPHA)
    veil.fill((0, 0, 0, 150))
    surface.blit(veil, (0, 0))
    y = sh // 2 - len(lines) * 11
    for i, (text, color) in enumerate(lines):
        font = app.font_lg if i == 0 else app.font_sm
        img = font.render(text, True, color)
        surface.blit(img, ((sw - img.get_width()) // 2, y))
        y += img.get_height() + 6
