"""logic/camera.py — Smooth-follow camera with facing look-ahead.

The camera eases toward a target placed ``look_ahead`` px in front of
the player and is clamped so the viewport never shows outside the
room.  Screen shake is not applied here; the renderer adds the shake
offset on top.
"""

from __future__ import annotations

from core.constants import VIEW_W, VIEW_H, HUD_H
from core.room import Room
from core.tuning import get as _tun
from components import Camera, Player


def update_camera(cam: Camera, player: Player, room: Room,
                  view_w: int = VIEW_W, view_h: int = VIEW_H - HUD_H,
                  snap: bool = False):
    look = float(_tun("camera", "look_ahead", 32.0))
    tx = player.cx + player.facing.dx * look - view_w / 2.0
    ty = player.cy + player.facing.dy * look - view_h / 2.0

    if snap:
        cam.x, cam.y = tx, ty
    else:
        k = float(_tun("camera", "smoothing", 0.1))
        cam.x += (tx - cam.x) * k
        cam.y += (ty - cam.y) * k

    cam.x = _clamp(cam.x, 0.0, max(0.0, room.width_px - view_w))
    cam.y = _clamp(cam.y, 0.0, max(0.0, room.height_px - view_h))


def _clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v
