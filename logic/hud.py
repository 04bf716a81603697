"""logic/hud.py — Read-only snapshot of what the HUD shows.

The UI only reads this; nothing flows back into the simulation.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.ecs import World
from components import Player, Progress, GameState, GameClock
from logic.progression import objective_for


@dataclass(frozen=True)
class HudState:
    health: int
    max_health: int
    currency: int
    keys: int
    level: int
    enemies_defeated: int
    enemies_required: int
    currency_collected: int
    currency_required: int
    objective: str
    state: GameState
    paused: bool
    score: int
    play_time: float

    @property
    def currency_text(self) -> str:
        return f"{self.currency:03d}"

    @property
    def keys_text(self) -> str:
        return f"{self.keys:02d}"

    @property
    def play_time_text(self) -> str:
        minutes, seconds = divmod(int(self.play_time), 60)
        return f"{minutes}:{seconds:02d}"


def hud_state(world: World) -> HudState | None:
    found = world.query_one(Player)
    progress: Progress | None = world.res(Progress)
    if found is None or progress is None:
        return None
    p = found[1]
    obj = objective_for(progress.level)
    clock: GameClock | None = world.res(GameClock)
    return HudState(
        health=p.health,
        max_health=p.max_health,
        currency=p.currency,
        keys=p.keys,
        level=progress.level,
        enemies_defeated=progress.enemies_defeated,
        enemies_required=obj.enemies,
        currency_collected=progress.currency_collected,
        currency_required=obj.currency,
        objective=obj.description,
        state=progress.state,
        paused=progress.paused,
        score=progress.score,
        play_time=clock.time if clock else 0.0,
    )
