"""components.items — Collectible entity variant."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from components.spatial import Body


class CollectibleKind(Enum):
    CURRENCY = "rupee"
    HEART = "heart"
    KEY = "key"


@dataclass
class Collectible(Body):
    kind: CollectibleKind = CollectibleKind.CURRENCY
    value: int = 1                # currency only; 1 = green, 5 = blue
    anim_phase: float = 0.0       # radians, drives the bob / spin
    collected: bool = False
