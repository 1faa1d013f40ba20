"""
Data models for the world grid.

Everything a worker can act on is addressed by tile:
- Objects sit on a tile (weeds, stones, twigs, loose items)
- Terrain features are part of the ground (trees, tilled soil, flooring)

A tile should hold at most one of each. Terrain features are a closed set of
variants: Tree, HoeDirt and Flooring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from constants import (
    CHOPPABLE_GROWTH_STAGE,
    SOIL_DRY,
    SOIL_WATERED,
    TREE_HEALTH,
)

Tile = Tuple[int, int]


class ObjectKind(Enum):
    """Family of an object placed on a tile."""
    WEEDS = "weeds"
    STONE = "stone"
    TWIG = "twig"
    ITEM = "item"          # Forage, dropped items - anything loose
    OTHER = "other"        # Machines, chests, fences - never touched


@dataclass
class WorldObject:
    name: str
    kind: ObjectKind = ObjectKind.OTHER
    item_id: str = ""
    stack: int = 1
    can_be_picked_up: bool = False

    def is_weeds(self) -> bool:
        return self.kind == ObjectKind.WEEDS

    def is_stone(self) -> bool:
        """Stone family is matched by name, like "Stone" or "Ice Stone"."""
        return "Stone" in (self.name or "")

    def is_twig(self) -> bool:
        return self.kind == ObjectKind.TWIG

    def is_debris(self) -> bool:
        return self.is_weeds() or self.is_stone() or self.is_twig()

    def get_one(self) -> "WorldObject":
        """Copy of this object with a stack of one (what drops as debris)."""
        return WorldObject(
            name=self.name,
            kind=self.kind,
            item_id=self.item_id,
            stack=1,
            can_be_picked_up=self.can_be_picked_up,
        )


@dataclass
class Crop:
    name: str
    current_phase: int = 0
    phase_count: int = 5           # Phases including the final (harvestable) one
    harvest_item_id: str = ""

    @property
    def fully_grown(self) -> bool:
        return self.current_phase >= self.phase_count - 1


@dataclass
class Tree:
    growth_stage: int = CHOPPABLE_GROWTH_STAGE
    health: float = TREE_HEALTH
    stump: bool = False
    tree_type: str = "oak"

    @property
    def choppable(self) -> bool:
        return self.stump or self.growth_stage >= CHOPPABLE_GROWTH_STAGE


@dataclass
class HoeDirt:
    state: int = SOIL_DRY
    crop: Optional[Crop] = None

    @property
    def is_dry(self) -> bool:
        return self.state == SOIL_DRY

    def water(self) -> None:
        self.state = SOIL_WATERED


@dataclass
class Flooring:
    floor_type: str = "wood"


TerrainFeature = Union[Tree, HoeDirt, Flooring]


@dataclass
class Debris:
    """Item dropped on the ground for the player to collect."""
    tile: Tile
    item_id: str
    count: int = 1
    source: str = ""


@dataclass
class Candidate:
    """A villager who can be hired."""
    name: str
    display_name: str = ""
    sprite: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.name
