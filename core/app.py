"""
core/app.py — Window, main loop and scene stack

    app = App(title="Room Raider")
    app.push_scene(RoomScene())
    app.run()

The game draws into a fixed ``VIEW_W`` × ``VIEW_H`` virtual surface
which is scaled to whatever size the window has, so the pixel art
keeps its proportions.  The app owns a few global hotkeys (F11
fullscreen, F4 tuning reload); every other event goes to the top scene.
"""

from __future__ import annotations
import pygame
from core.constants import VIEW_W, VIEW_H, WINDOW_SCALE
from core.scene import Scene
from core.ecs import World
from core import tuning


class App:
    def __init__(self, title: str = "Room Raider",
                 width: int = VIEW_W, height: int = VIEW_H,
                 scale: int = WINDOW_SCALE, fps: int = 60):
        pygame.init()
        pygame.display.set_caption(title)
        self._view = pygame.Surface((width, height))
        self._window_size = (width * scale, height * scale)
        self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.dt = 0.0
        self.running = True
        self.fullscreen = False

        self._stack: list[Scene] = []
        # Replaced by each scene's own world when it becomes active
        self.world = World()

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 20, bold=True)

        self._hotkeys = {
            pygame.K_F11: self.toggle_fullscreen,
            pygame.K_F4: tuning.reload,
        }

    @property
    def view_size(self) -> tuple[int, int]:
        return self._view.get_size()

    # -- Scenes --

    @property
    def scene(self) -> Scene | None:
        return self._stack[-1] if self._stack else None

    def push_scene(self, scene: Scene):
        if self.scene:
            self.scene.on_exit(self)
        self._stack.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if not self._stack:
            return
        self._stack.pop().on_exit(self)
        if self.scene:
            self.scene.on_enter(self)

    # -- Loop --

    def run(self):
        while self.running:
            # Unclamped; the scene caps it before simulating.
            self.dt = self.clock.tick(self.fps) / 1000.0
            for event in pygame.event.get():
                if not self._handle_app_event(event) and self.scene:
                    self.scene.handle_event(event, self)

            if self.scene:
                self.scene.update(self.dt, self)
                self.scene.draw(self._view, self)
            self._present()
        pygame.quit()

    def _handle_app_event(self, event: pygame.event.Event) -> bool:
        """Handle window-level events.  Returns True if consumed."""
        if event.type == pygame.QUIT:
            self.running = False
            return True
        if event.type == pygame.KEYDOWN and event.key in self._hotkeys:
            self._hotkeys[event.key]()
            return True
        if event.type == pygame.VIDEORESIZE and not self.fullscreen:
            self._window_size = (event.w, event.h)
            self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
            return True
        return False

    def _present(self):
        pygame.transform.scale(self._view, self.screen.get_size(), self.screen)
        pygame.display.flip()

    def toggle_fullscreen(self):
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)

    # -- Text --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None) -> pygame.Rect:
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (x, y))
