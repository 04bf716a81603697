"""
core/scene.py — Scene interface

A Scene owns one ``World`` and the input/sinks that drive it.  The app
keeps a stack of scenes and only the top one receives events, updates
and draws.  When a scene becomes active its world becomes ``app.world``
so debugging helpers can always reach the live simulation.

    class TitleScene(Scene):
        def handle_event(self, event, app): ...
        def update(self, dt, app): ...
        def draw(self, surface, app): ...
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App
    from core.ecs import World


class Scene:
    world: World | None = None

    def on_enter(self, app: App):
        """Called when this scene becomes active (pushed or revealed)."""
        if self.world is not None:
            app.world = self.world

    def on_exit(self, app: App):
        """Called when this scene is removed or covered."""

    def handle_event(self, event: pygame.event.Event, app: App):
        """Process a single pygame event (between frames)."""

    def update(self, dt: float, app: App):
        """Advance one frame.  *dt* is raw seconds; clamp before use."""

    def draw(self, surface: pygame.Surface, app: App):
        """Draw to the virtual surface."""
