"""
Action Executor - performs one unit of work on a tile.

Called by the worker state machine once per step while in range of its
target. Every call either finishes the target (DONE) or leaves something for
the next step (IN_PROGRESS): a tree that fell to a stump, a harvest blocked by
a full inventory.

Dispatch order: terrain feature first, then object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from constants import (
    CHOP_DAMAGE,
    CLEARED_STUMP_WOOD_COUNT,
    SOUND_AXE_CHOP,
    SOUND_CUT,
    SOUND_HAMMER,
    SOUND_HARVEST,
    SOUND_PICKUP,
    SOUND_STUMP_CRACK,
    SOUND_TREE_CRACK,
    SOUND_WATERING,
    STUMP_HEALTH,
    STUMP_WOOD_COUNT,
    WOOD_ITEM_ID,
    WORK_FRAMES,
)
from world.grid import WorldGrid
from world.models import HoeDirt, Tile, Tree, WorldObject

from .presentation import Presentation
from .target_finder import is_collectable
from .tasks import TaskKind, expand

logger = logging.getLogger(__name__)


class ActionResult(Enum):
    DONE = "done"
    IN_PROGRESS = "in_progress"


@dataclass
class ActionReport:
    """Outcome of one perform_action call."""
    result: ActionResult
    worked: bool = True           # False when nothing was actually done (no stamina cost)
    detail: str = ""

    @property
    def done(self) -> bool:
        return self.result == ActionResult.DONE


# Tool analog per object family
HEAVY_TOOL = "Pickaxe"
CUTTING_TOOL = "Axe"


class ActionExecutor:
    """
    Usage:
        executor = ActionExecutor(presentation, enable_sound_effects=True)
        report = executor.perform_action(grid, (12, 15), TaskKind.WOOD, "Robin")
        if report.done:
            ...
    """

    def __init__(self, presentation: Presentation, enable_sound_effects: bool = True):
        self.presentation = presentation
        self.enable_sound_effects = enable_sound_effects

    def perform_action(
        self,
        grid: WorldGrid,
        tile: Tile,
        tasks: TaskKind,
        worker: str = "",
    ) -> ActionReport:
        enabled = expand(tasks)
        self.presentation.animate(worker, WORK_FRAMES)

        # 1. Terrain features (soil, trees)
        feature = grid.get_feature(tile)
        if isinstance(feature, HoeDirt):
            report = self._process_soil(grid, tile, feature, enabled)
            if report is not None:
                return report
        elif isinstance(feature, Tree) and TaskKind.WOOD in enabled and feature.choppable:
            return self._process_tree(grid, tile, feature)

        # 2. Objects
        obj = grid.get_object(tile)
        if obj is not None:
            return self._process_object(grid, tile, obj, enabled)

        # Target vanished (cleared by someone else)
        return ActionReport(ActionResult.DONE, worked=False, detail="nothing_at_target")

    def _play(self, cue: str) -> None:
        if self.enable_sound_effects:
            self.presentation.play_sound(cue)

    def _process_soil(
        self,
        grid: WorldGrid,
        tile: Tile,
        dirt: HoeDirt,
        enabled: TaskKind,
    ) -> Optional[ActionReport]:
        if TaskKind.WATERING in enabled and dirt.is_dry:
            dirt.water()
            self._play(SOUND_WATERING)
            return ActionReport(ActionResult.DONE, detail="watered")

        if TaskKind.COLLECT in enabled and dirt.crop is not None and dirt.crop.fully_grown:
            crop_name = dirt.crop.name
            if grid.harvest_crop(tile):
                self._play(SOUND_HARVEST)
                logger.debug(f"Harvested {crop_name} at {tile}")
                return ActionReport(ActionResult.DONE, detail="harvested")
            # Destination full - keep the target and retry next step
            return ActionReport(ActionResult.IN_PROGRESS, worked=False, detail="inventory_full")

        # Anything on top of the soil still gets the object branch
        if TaskKind.WATERING in enabled and grid.get_object(tile) is None:
            return ActionReport(ActionResult.DONE, worked=False, detail="already_watered")

        return None

    def _process_tree(self, grid: WorldGrid, tile: Tile, tree: Tree) -> ActionReport:
        """
        Two-stage felling: standing tree -> stump -> cleared.

        Each call is one axe hit. The engine gets the first try; when it does
        not fell the tree outright we apply our own damage.
        """
        self._play(SOUND_AXE_CHOP)

        felled = False
        try:
            felled = grid.chop_tree(tile)
        except Exception as e:
            logger.warning(f"Engine chop failed at {tile}: {e}")

        if felled:
            return ActionReport(ActionResult.DONE, detail="felled")

        tree.health -= CHOP_DAMAGE
        self.presentation.shake(tile)

        if tree.health <= 0:
            if tree.stump:
                grid.remove_feature(tile)
                grid.spawn_debris(tile, WOOD_ITEM_ID, CLEARED_STUMP_WOOD_COUNT, source="stump")
                self._play(SOUND_STUMP_CRACK)
                logger.debug(f"🪓 Stump cleared at {tile}")
                return ActionReport(ActionResult.DONE, detail="stump_cleared")

            tree.stump = True
            tree.health = STUMP_HEALTH
            grid.spawn_debris(tile, WOOD_ITEM_ID, STUMP_WOOD_COUNT, source="tree")
            self._play(SOUND_TREE_CRACK)
            logger.debug(f"🪓 Tree at {tile} fell to a stump")
            return ActionReport(ActionResult.IN_PROGRESS, detail="stump")

        if grid.get_feature(tile) is None:
            return ActionReport(ActionResult.DONE, detail="felled")
        return ActionReport(ActionResult.IN_PROGRESS, detail=f"health={tree.health:g}")

    def _process_object(
        self,
        grid: WorldGrid,
        tile: Tile,
        obj: WorldObject,
        enabled: TaskKind,
    ) -> ActionReport:
        clearable = (
            (TaskKind.WEEDS in enabled and obj.is_weeds())
            or (TaskKind.STONE in enabled and obj.is_stone())
            or (TaskKind.WOOD in enabled and obj.is_twig())
        )
        if clearable:
            return self._clear_object(grid, tile, obj)

        if TaskKind.COLLECT in enabled and is_collectable(obj):
            return self._collect_object(grid, tile, obj)

        # Not something this worker handles
        return ActionReport(ActionResult.DONE, worked=False, detail="not_actionable")

    def _clear_object(self, grid: WorldGrid, tile: Tile, obj: WorldObject) -> ActionReport:
        if obj.is_stone():
            tool = HEAVY_TOOL
            self._play(SOUND_HAMMER)
        else:
            tool = CUTTING_TOOL
            self._play(SOUND_CUT)

        removed = grid.remove_object(tile)
        if removed is not None:
            drop = removed.get_one()
            grid.spawn_debris(tile, drop.item_id or drop.name, drop.stack, source=drop.name)
        logger.debug(f"Cleared {obj.name} at {tile} with {tool}")
        return ActionReport(ActionResult.DONE, detail=f"cleared:{tool}")

    def _collect_object(self, grid: WorldGrid, tile: Tile, obj: WorldObject) -> ActionReport:
        if not grid.add_to_inventory(obj):
            return ActionReport(ActionResult.IN_PROGRESS, worked=False, detail="inventory_full")
        grid.remove_object(tile)
        self._play(SOUND_PICKUP)
        logger.debug(f"Collected {obj.name} x{obj.stack} at {tile}")
        return ActionReport(ActionResult.DONE, detail="collected")
