"""scenes/room_scene.py — The one gameplay scene.

Owns the world, the input manager and the three sinks (render,
effects, audio).  Events only feed input; ``update`` runs exactly one
``tick_frame``; ``draw`` reads the world and never mutates it.
"""

from __future__ import annotations
import random
import pygame

from core.app import App
from core.constants import HUD_H
from core.events import EventBus
from core.render import PygameRenderSink, RenderSink
from core.room import Room
from core.scene import Scene
from components import Camera
from logic.audio import AudioSink
from logic.effects import Effects
from logic.hud import hud_state
from logic.input_manager import InputManager
from logic.particles import ParticleManager
from logic.progression import new_session
from logic.tick import tick_frame
from scenes.room_draw import draw_room, draw_entities, draw_particles, draw_hud, draw_banner


class RoomScene(Scene):
    def __init__(self, rng=random, audio: bool = True,
                 render_sink: RenderSink | None = None):
        self.rng = rng
        self.input = InputManager()
        self.world = new_session(rng)

        bus: EventBus = self.world.res(EventBus)
        self.effects = Effects(ParticleManager(rng=rng), rng=rng)
        self.effects.attach(bus)
        self.world.set_res(self.effects)
        self.audio = AudioSink(enabled=audio)
        self.audio.attach(bus)
        self.world.set_res(self.audio)

        self.sink = render_sink or PygameRenderSink()

    # ── Scene API ──

    def on_exit(self, app: App):
        self.input.release_all()

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type == pygame.WINDOWFOCUSLOST:
            # Keys released while unfocused never send KEYUP.
            self.input.release_all()
            return
        self.input.feed(event)

    def update(self, dt: float, app: App):
        tick_frame(self.world, self.input, dt, self.rng)

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((0, 0, 0))
        room: Room = self.world.res(Room)
        cam: Camera = self.world.res(Camera)
        vw, vh = app.view_size
        sx, sy = self.effects.shake_offset()
        ox = int(-cam.x) + sx
        oy = int(-cam.y) + sy + HUD_H

        self.sink.set_target(surface, ox, oy)
        draw_room(self.sink, room, cam.x, cam.y, vw, vh - HUD_H)
        draw_entities(self.sink, self.world)
        draw_particles(self.effects.particles, surface, ox, oy)
        self.sink.overlay(self.effects.flash_color, self.effects.flash_alpha())

        hud = hud_state(self.world)
        if hud is not None:
            draw_hud(surface, app, self.sink, hud)
            draw_banner(surface, app, hud)
