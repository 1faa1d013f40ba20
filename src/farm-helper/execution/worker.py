"""
Worker State Machine - one hired villager's step-by-step behaviour.

Per step:
    Resting?            -> recover only
    No target?          -> ask TargetFinder (skipping tiles other workers claimed)
    Target out of range -> move onto it
    Target in range     -> one ActionExecutor call; DONE frees the target

Provides a deterministic loop instead of per-frame AI: every decision is a
function of the worker record and the world grid at the time of the step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from constants import (
    FACE_DOWN,
    FACE_LEFT,
    FACE_RIGHT,
    FACE_UP,
    PROXIMITY_RADIUS,
    WALK_FRAMES,
)
from world.grid import WorldGrid
from world.models import Tile

from .action_executor import ActionExecutor
from .presentation import Presentation
from .stamina import Stamina, StaminaGovernor
from .target_finder import TargetFinder
from .tasks import TaskKind

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Lifecycle state of a worker; exactly one at any step."""
    IDLE = "idle"                # No target
    SEEKING = "seeking"          # Looking for a target
    APPROACHING = "approaching"  # Target set, out of range
    ACTING = "acting"            # In range, working on the target
    RESTING = "resting"          # Out of stamina, pre-empts everything else


class StepResult(Enum):
    """What a single step did (for the fleet's bookkeeping)."""
    RESTED = "rested"
    NO_WORK = "no_work"
    MOVED = "moved"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class Worker:
    name: str
    tasks: TaskKind
    position: Tile
    stamina: Stamina
    display_name: str = ""
    target: Optional[Tile] = None
    state: WorkerState = WorkerState.IDLE
    facing: int = FACE_DOWN
    completed_actions: int = 0

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.name

    @property
    def is_resting(self) -> bool:
        return self.stamina.resting


def tile_distance(a: Tile, b: Tile) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def facing_toward(current: Tile, target: Tile) -> Optional[int]:
    """Facing direction along the dominant axis, or None when already there."""
    dx = target[0] - current[0]
    dy = target[1] - current[1]
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        return FACE_RIGHT if dx > 0 else FACE_LEFT
    return FACE_DOWN if dy > 0 else FACE_UP


class WorkerStateMachine:
    """
    Drives one step of a worker.

    Usage:
        machine = WorkerStateMachine(finder, executor, governor, presentation)
        result = machine.step(worker, grid, claims)
    """

    def __init__(
        self,
        finder: TargetFinder,
        executor: ActionExecutor,
        governor: StaminaGovernor,
        presentation: Presentation,
        proximity_radius: float = PROXIMITY_RADIUS,
    ):
        self.finder = finder
        self.executor = executor
        self.governor = governor
        self.presentation = presentation
        self.proximity_radius = proximity_radius

    def step(self, worker: Worker, grid: WorldGrid, claims: Dict[Tile, str]) -> StepResult:
        """
        Run one step.

        Args:
            worker: Worker to advance
            grid: World to act on
            claims: tile -> worker name for every target currently held;
                    the worker's own claim is ignored
        """
        was_resting = worker.stamina.resting
        if not self.governor.begin_step(worker.stamina, worker.name):
            if worker.stamina.resting:
                if not was_resting and worker.target is not None:
                    # Give the tile back so another worker can take it
                    logger.debug(f"{worker.name}: releasing {worker.target} to rest")
                    worker.target = None
                worker.state = WorkerState.RESTING
            else:
                worker.state = WorkerState.IDLE
            return StepResult.RESTED

        if worker.target is None:
            worker.state = WorkerState.SEEKING
            claimed = [tile for tile, owner in claims.items() if owner != worker.name]
            worker.target = self.finder.find_target(grid, worker.position, worker.tasks, claimed)
            if worker.target is None:
                worker.state = WorkerState.IDLE
                return StepResult.NO_WORK
            logger.debug(f"🎯 {worker.name}: new target {worker.target}")

        target = worker.target
        if tile_distance(worker.position, target) > self.proximity_radius:
            worker.state = WorkerState.APPROACHING
            self._move_towards(worker, grid, target)
            return StepResult.MOVED

        worker.state = WorkerState.ACTING
        report = self.executor.perform_action(grid, target, worker.tasks, worker.name)

        if not report.done:
            logger.debug(f"{worker.name}: {target} in progress ({report.detail})")
            return StepResult.IN_PROGRESS

        worker.target = None
        worker.state = WorkerState.IDLE
        if report.worked:
            self.governor.charge(worker.stamina)
            worker.completed_actions += 1
        logger.debug(
            f"✅ {worker.name}: {target} done ({report.detail}), "
            f"stamina {worker.stamina.current:g}/{worker.stamina.maximum:g}"
        )
        return StepResult.DONE

    def _move_towards(self, worker: Worker, grid: WorldGrid, target: Tile) -> None:
        """Face the target and relocate straight onto it (no pathfinding)."""
        direction = facing_toward(worker.position, target)
        if direction is not None:
            worker.facing = direction
            self.presentation.face(worker.name, direction)

        worker.position = target
        grid.place_character(worker.name, target)
        self.presentation.animate(worker.name, WALK_FRAMES)
        logger.debug(f"🚶 {worker.name}: moved to {target}")
