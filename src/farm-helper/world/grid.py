"""World grid collaborator and an in-memory implementation.

The worker engine never owns the world. It talks to a WorldGrid: tile-keyed
lookups, removal, debris spawning and the few engine-level primitives that may
fail (outright chop, harvest, inventory pickup).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Tuple

import yaml

from constants import SOIL_DRY, SOIL_WATERED

from .models import (
    Crop,
    Debris,
    Flooring,
    HoeDirt,
    ObjectKind,
    TerrainFeature,
    Tile,
    Tree,
    WorldObject,
)

logger = logging.getLogger(__name__)

MAX_STACK = 999


class WorldGrid(Protocol):
    """What the worker engine needs from the host's world."""

    def iter_objects(self) -> Iterator[Tuple[Tile, WorldObject]]:
        ...

    def iter_features(self) -> Iterator[Tuple[Tile, TerrainFeature]]:
        ...

    def get_object(self, tile: Tile) -> Optional[WorldObject]:
        ...

    def remove_object(self, tile: Tile) -> Optional[WorldObject]:
        ...

    def get_feature(self, tile: Tile) -> Optional[TerrainFeature]:
        ...

    def remove_feature(self, tile: Tile) -> Optional[TerrainFeature]:
        ...

    def spawn_debris(self, tile: Tile, item_id: str, count: int = 1, source: str = "") -> None:
        ...

    def add_to_inventory(self, obj: WorldObject) -> bool:
        ...

    def harvest_crop(self, tile: Tile) -> bool:
        ...

    def chop_tree(self, tile: Tile) -> bool:
        ...

    def place_character(self, name: str, tile: Tile) -> None:
        ...

    def remove_character(self, name: str) -> None:
        ...

    def has_character(self, name: str) -> bool:
        ...


class Inventory:
    """Slot-limited item storage for the hiring player."""

    def __init__(self, capacity: int = 12):
        self.capacity = capacity
        self.slots: List[WorldObject] = []

    def add(self, obj: WorldObject) -> bool:
        """Add an item, stacking onto a matching slot. False when there is no room."""
        for held in self.slots:
            if held.name == obj.name and held.stack + obj.stack <= MAX_STACK:
                held.stack += obj.stack
                return True
        if len(self.slots) >= self.capacity:
            return False
        self.slots.append(WorldObject(
            name=obj.name,
            kind=obj.kind,
            item_id=obj.item_id,
            stack=obj.stack,
            can_be_picked_up=obj.can_be_picked_up,
        ))
        return True

    def count(self, name: str) -> int:
        return sum(held.stack for held in self.slots if held.name == name)


class InMemoryWorldGrid:
    """
    Dictionary-backed WorldGrid used by the headless host and tests.

    Iteration follows insertion order, which is the scan order target
    selection uses to break distance ties.
    """

    def __init__(
        self,
        inventory: Optional[Inventory] = None,
        engine_chop: Optional[Callable[[Tile, Tree], bool]] = None,
    ):
        self.objects: Dict[Tile, WorldObject] = {}
        self.features: Dict[Tile, TerrainFeature] = {}
        self.characters: Dict[str, Tile] = {}
        self.debris: List[Debris] = []
        self.inventory = inventory or Inventory()
        # Engine-level outright chop; the default engine never fells a tree in one hit
        self._engine_chop = engine_chop

    # --- Lookups -----------------------------------------------------------

    def iter_objects(self) -> Iterator[Tuple[Tile, WorldObject]]:
        return iter(list(self.objects.items()))

    def iter_features(self) -> Iterator[Tuple[Tile, TerrainFeature]]:
        return iter(list(self.features.items()))

    def get_object(self, tile: Tile) -> Optional[WorldObject]:
        return self.objects.get(tile)

    def get_feature(self, tile: Tile) -> Optional[TerrainFeature]:
        return self.features.get(tile)

    # --- Mutation ----------------------------------------------------------

    def add_object(self, tile: Tile, obj: WorldObject) -> None:
        self.objects[tile] = obj

    def add_feature(self, tile: Tile, feature: TerrainFeature) -> None:
        self.features[tile] = feature

    def remove_object(self, tile: Tile) -> Optional[WorldObject]:
        return self.objects.pop(tile, None)

    def remove_feature(self, tile: Tile) -> Optional[TerrainFeature]:
        return self.features.pop(tile, None)

    def spawn_debris(self, tile: Tile, item_id: str, count: int = 1, source: str = "") -> None:
        self.debris.append(Debris(tile=tile, item_id=item_id, count=count, source=source))
        logger.debug(f"Debris {item_id} x{count} at {tile}")

    def add_to_inventory(self, obj: WorldObject) -> bool:
        return self.inventory.add(obj)

    def harvest_crop(self, tile: Tile) -> bool:
        """Harvest a grown crop into the inventory. Fails when the inventory is full."""
        dirt = self.features.get(tile)
        if not isinstance(dirt, HoeDirt) or dirt.crop is None or not dirt.crop.fully_grown:
            return False
        crop = dirt.crop
        produce = WorldObject(
            name=crop.name,
            kind=ObjectKind.ITEM,
            item_id=crop.harvest_item_id,
            can_be_picked_up=True,
        )
        if not self.inventory.add(produce):
            return False
        dirt.crop = None
        return True

    def chop_tree(self, tile: Tile) -> bool:
        tree = self.features.get(tile)
        if not isinstance(tree, Tree) or self._engine_chop is None:
            return False
        if not self._engine_chop(tile, tree):
            return False
        self.features.pop(tile, None)
        return True

    # --- Characters --------------------------------------------------------

    def place_character(self, name: str, tile: Tile) -> None:
        self.characters[name] = tile

    def remove_character(self, name: str) -> None:
        self.characters.pop(name, None)

    def has_character(self, name: str) -> bool:
        return name in self.characters

    # --- Layout loading ----------------------------------------------------

    @classmethod
    def from_layout(cls, path: str, inventory_capacity: int = 12) -> "InMemoryWorldGrid":
        """
        Build a grid from a YAML layout file.

        Format:
            objects:
              - {x: 10, y: 12, name: Weeds, kind: weeds}
              - {x: 11, y: 12, name: Stone, kind: stone}
            features:
              - {x: 20, y: 8, type: tree, growth_stage: 5}
              - {x: 14, y: 15, type: dirt, watered: false, crop: {name: Parsnip, phase: 1}}
        """
        data = yaml.safe_load(Path(path).read_text()) or {}
        grid = cls(inventory=Inventory(capacity=inventory_capacity))
        grid.load(data)
        logger.info(
            f"Loaded layout {path}: {len(grid.objects)} objects, {len(grid.features)} features"
        )
        return grid

    def load(self, data: Dict[str, Any]) -> None:
        for entry in data.get("objects") or []:
            tile = (int(entry["x"]), int(entry["y"]))
            kind = ObjectKind(entry.get("kind", "other"))
            self.objects[tile] = WorldObject(
                name=entry.get("name", ""),
                kind=kind,
                item_id=str(entry.get("item_id", "")),
                stack=int(entry.get("stack", 1)),
                can_be_picked_up=bool(entry.get("pickup", kind == ObjectKind.ITEM)),
            )
        for entry in data.get("features") or []:
            tile = (int(entry["x"]), int(entry["y"]))
            self.features[tile] = _feature_from_layout(entry)


def _feature_from_layout(entry: Dict[str, Any]) -> TerrainFeature:
    feature_type = entry.get("type", "")
    if feature_type == "tree":
        tree = Tree(
            growth_stage=int(entry.get("growth_stage", 5)),
            stump=bool(entry.get("stump", False)),
            tree_type=entry.get("tree_type", "oak"),
        )
        if "health" in entry:
            tree.health = float(entry["health"])
        return tree
    if feature_type == "dirt":
        crop = None
        raw_crop = entry.get("crop")
        if raw_crop:
            crop = Crop(
                name=raw_crop.get("name", ""),
                current_phase=int(raw_crop.get("phase", 0)),
                phase_count=int(raw_crop.get("phase_count", 5)),
                harvest_item_id=str(raw_crop.get("item_id", "")),
            )
        return HoeDirt(state=SOIL_WATERED if entry.get("watered") else SOIL_DRY, crop=crop)
    if feature_type == "flooring":
        return Flooring(floor_type=entry.get("floor_type", "wood"))
    raise ValueError(f"Unknown terrain feature type: {feature_type!r}")
