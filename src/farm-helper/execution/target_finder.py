from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Optional

from world.grid import WorldGrid
from world.models import HoeDirt, TerrainFeature, Tile, Tree, WorldObject

from .tasks import TaskKind, expand


@dataclass
class Target:
    x: int
    y: int
    target_type: str              # "weeds", "stone", "twig", "item", "tree", "crop", "harvest"
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def tile(self) -> Tile:
        return (self.x, self.y)


def distance_squared(a: Tile, b: Tile) -> int:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


class TargetFinder:
    """
    Finds the nearest tile a worker may act on.
    Pure function over the world grid - no side effects, no state.
    """

    def find_target(
        self,
        grid: WorldGrid,
        origin: Tile,
        tasks: TaskKind,
        claimed: Collection[Tile] = (),
    ) -> Optional[Tile]:
        """
        Main entry point.

        Args:
            grid: World to scan
            origin: Tile distances are measured from (the worker's position)
            tasks: Task mask; ALL is expanded here
            claimed: Tiles other workers are already heading to

        Returns:
            Nearest eligible tile, or None if nothing qualifies. Ties go to
            the first candidate in scan order (objects, then terrain features).
        """
        candidates = self.candidates(grid, tasks, claimed)
        if not candidates:
            return None
        # min() keeps the first of equal keys, so scan order breaks ties
        nearest = min(candidates, key=lambda t: distance_squared(t.tile, origin))
        return nearest.tile

    def candidates(
        self,
        grid: WorldGrid,
        tasks: TaskKind,
        claimed: Collection[Tile] = (),
    ) -> List[Target]:
        """All eligible targets in scan order."""
        enabled = expand(tasks)
        if not enabled:
            return []
        claimed_tiles = set(claimed)
        targets: List[Target] = []

        # 1. Objects (weeds, stones, twigs, loose items)
        for tile, obj in grid.iter_objects():
            if tile in claimed_tiles:
                continue
            target_type = self._classify_object(obj, enabled)
            if target_type:
                targets.append(Target(
                    x=tile[0],
                    y=tile[1],
                    target_type=target_type,
                    metadata={"name": obj.name},
                ))

        # 2. Terrain features (trees, soil)
        for tile, feature in grid.iter_features():
            if tile in claimed_tiles:
                continue
            target_type = self._classify_feature(feature, enabled)
            if target_type:
                targets.append(Target(
                    x=tile[0],
                    y=tile[1],
                    target_type=target_type,
                    metadata=self._feature_metadata(feature),
                ))

        return targets

    def _classify_object(self, obj: WorldObject, enabled: TaskKind) -> Optional[str]:
        if TaskKind.WEEDS in enabled and obj.is_weeds():
            return "weeds"
        if TaskKind.STONE in enabled and obj.is_stone():
            return "stone"
        if TaskKind.WOOD in enabled and obj.is_twig():
            return "twig"
        if TaskKind.COLLECT in enabled and is_collectable(obj):
            return "item"
        return None

    def _classify_feature(self, feature: TerrainFeature, enabled: TaskKind) -> Optional[str]:
        if isinstance(feature, Tree):
            if TaskKind.WOOD in enabled and feature.choppable:
                return "tree"
            return None
        if isinstance(feature, HoeDirt):
            if feature.crop is None:
                return None
            if TaskKind.WATERING in enabled and feature.is_dry:
                return "crop"
            if TaskKind.COLLECT in enabled and feature.crop.fully_grown:
                return "harvest"
            return None
        # Flooring and anything else is never a target
        return None

    def _feature_metadata(self, feature: TerrainFeature) -> Dict[str, Any]:
        if isinstance(feature, Tree):
            return {"stump": feature.stump, "growth_stage": feature.growth_stage}
        if isinstance(feature, HoeDirt) and feature.crop is not None:
            return {"crop_name": feature.crop.name, "is_watered": not feature.is_dry}
        return {}


def is_collectable(obj: WorldObject) -> bool:
    """Loose items only - debris families belong to the clearing tasks."""
    return obj.can_be_picked_up and not obj.is_debris()
