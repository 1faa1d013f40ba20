"""
Fleet Manager - owns every hired worker for one play session.

Lifecycle:
1. hire() debits the player and spawns a worker next to them
2. update_ticked() steps every worker once per ticks_per_step game ticks
3. dismiss() / end of day / day start remove workers from the farm

Workers only live for one day. Nothing here is persisted.

Design decisions:
- Workers are stepped in hire order, so runs are reproducible
- Claims are read live before each worker's step: a tile taken earlier in the
  same tick is already off-limits to the workers stepped after
- A fault in one worker's step never escapes tick(); the worker is dismissed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from config import Config
from constants import FALLBACK_SPAWN_TILE, SPAWN_OFFSET
from world.economy import Economy
from world.grid import WorldGrid
from world.models import Candidate, Tile

from .action_executor import ActionExecutor
from .presentation import (
    NOTICE_ACHIEVEMENT,
    NOTICE_ERROR,
    NOTICE_NEW_QUEST,
    LoggingPresentation,
    Notice,
    Presentation,
)
from .stamina import Stamina, StaminaGovernor
from .target_finder import TargetFinder
from .tasks import TASK_NAMES, TaskKind, task_kinds, task_names
from .worker import StepResult, Worker, WorkerState, WorkerStateMachine

logger = logging.getLogger(__name__)


class HireResult(Enum):
    SUCCESS = "success"
    ALREADY_HIRED = "already_hired"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_TASKS = "no_tasks"


class ActionFault(Exception):
    """Unexpected error while stepping one worker."""

    def __init__(self, worker: str, cause: BaseException):
        super().__init__(f"{worker}: {type(cause).__name__}: {cause}")
        self.worker = worker
        self.cause = cause


@dataclass
class WorkerStatus:
    """Read-only snapshot of a worker for UI queries."""
    name: str
    display_name: str
    tasks: TaskKind
    stamina: float
    max_stamina: float
    is_resting: bool
    state: WorkerState
    position: Tile
    target: Optional[Tile]
    completed_actions: int

    @classmethod
    def from_worker(cls, worker: Worker) -> "WorkerStatus":
        return cls(
            name=worker.name,
            display_name=worker.display_name,
            tasks=worker.tasks,
            stamina=worker.stamina.current,
            max_stamina=worker.stamina.maximum,
            is_resting=worker.stamina.resting,
            state=worker.state,
            position=worker.position,
            target=worker.target,
            completed_actions=worker.completed_actions,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Format for API consumption."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "tasks": task_names(self.tasks),
            "stamina": self.stamina,
            "max_stamina": self.max_stamina,
            "is_resting": self.is_resting,
            "state": self.state.value,
            "position": list(self.position),
            "target": list(self.target) if self.target else None,
            "completed_actions": self.completed_actions,
        }


@dataclass
class RosterEntry:
    """One row of the hiring list."""
    candidate: Candidate
    hearts: int
    cost: int
    hired: bool


def hire_cost(config: Config, hearts: int, tasks: TaskKind) -> int:
    """
    Price of hiring a candidate for a task mask.

    base + sum(per-task costs), minus min(max_discount, hearts * discount_per_heart),
    truncated to whole gold. Zero when no task is selected.
    """
    kinds = task_kinds(tasks)
    if not kinds:
        return 0

    task_total = sum(config.task_cost(TASK_NAMES[kind]) for kind in kinds)
    hiring_cost = config.base_hiring_cost + task_total

    discount = max(0.0, hearts * config.discount_per_heart)
    if discount > config.max_discount:
        discount = config.max_discount

    # Round away float noise (0.05 * 6 != 0.3) before truncating
    return int(round(hiring_cost * (1.0 - discount), 6))


class FleetManager:
    """
    Usage:
        fleet = FleetManager(grid, farmer, config)
        fleet.hire(Candidate("Robin"), TaskKind.WOOD | TaskKind.STONE, cost)

        # Host loop
        fleet.on_day_started()
        fleet.update_ticked(game_tick)
        fleet.on_time_changed(time_of_day)
    """

    def __init__(
        self,
        grid: WorldGrid,
        economy: Economy,
        config: Optional[Config] = None,
        presentation: Optional[Presentation] = None,
        finder: Optional[TargetFinder] = None,
        executor: Optional[ActionExecutor] = None,
    ):
        self.grid = grid
        self.economy = economy
        self.config = config or Config()
        self.presentation = presentation or LoggingPresentation()
        self.governor = StaminaGovernor(
            rest_threshold=self.config.rest_threshold,
            recovery_per_step=self.config.recovery_per_step,
            action_cost=self.config.action_cost,
        )
        self.machine = WorkerStateMachine(
            finder=finder or TargetFinder(),
            executor=executor or ActionExecutor(
                self.presentation, enable_sound_effects=self.config.enable_sound_effects
            ),
            governor=self.governor,
            presentation=self.presentation,
        )
        self._workers: Dict[str, Worker] = {}    # Insertion (hire) order is step order
        self.step_count = 0
        self._logged_faults: Set[str] = set()

    # --- Queries -----------------------------------------------------------

    def is_hired(self, name: str) -> bool:
        return name in self._workers

    @property
    def has_any_worker(self) -> bool:
        return len(self._workers) > 0

    def worker_names(self) -> List[str]:
        return list(self._workers)

    def active_workers(self) -> List[WorkerStatus]:
        return [WorkerStatus.from_worker(w) for w in self._workers.values()]

    def get_worker_status(self, name: str) -> Optional[WorkerStatus]:
        worker = self._workers.get(name)
        if worker is None:
            return None
        return WorkerStatus.from_worker(worker)

    def claim_table(self) -> Dict[Tile, str]:
        """tile -> worker name for every worker that currently has a target."""
        return {
            worker.target: name
            for name, worker in self._workers.items()
            if worker.target is not None
        }

    # --- Hiring ------------------------------------------------------------

    def quote(self, candidate: str, tasks: TaskKind) -> int:
        return hire_cost(self.config, self.economy.friendship_hearts(candidate), tasks)

    def roster(self, candidates: Iterable[Candidate], tasks: TaskKind) -> List[RosterEntry]:
        """Candidates with their price, best friends first."""
        entries = [
            RosterEntry(
                candidate=candidate,
                hearts=self.economy.friendship_hearts(candidate.name),
                cost=self.quote(candidate.name, tasks),
                hired=self.is_hired(candidate.name),
            )
            for candidate in candidates
        ]
        entries.sort(key=lambda e: e.hearts, reverse=True)
        return entries

    def hire(
        self,
        candidate: Union[Candidate, str],
        tasks: TaskKind,
        total_cost: int,
    ) -> HireResult:
        if total_cost < 0:
            raise ValueError(f"Hiring cost must be non-negative, got {total_cost}")
        if isinstance(candidate, str):
            candidate = Candidate(name=candidate)

        if not task_kinds(tasks):
            logger.info(f"Hire of {candidate.name} rejected: no tasks selected")
            return HireResult.NO_TASKS

        if self.is_hired(candidate.name):
            self.presentation.notify(Notice("message.worker_busy", kind=NOTICE_NEW_QUEST))
            return HireResult.ALREADY_HIRED

        if self.economy.money < total_cost:
            self.presentation.notify(Notice(
                "message.not_enough_money", {"cost": total_cost}, kind=NOTICE_ERROR
            ))
            return HireResult.INSUFFICIENT_FUNDS

        self.economy.debit(total_cost)
        self._spawn(candidate, tasks)

        self.presentation.notify(Notice(
            "message.hired",
            {"name": candidate.display_name, "cost": total_cost},
            kind=NOTICE_ACHIEVEMENT,
        ))
        return HireResult.SUCCESS

    def _spawn(self, candidate: Candidate, tasks: TaskKind) -> Worker:
        if self.economy.on_managed_grid:
            px, py = self.economy.tile
            spawn_tile = (px + SPAWN_OFFSET[0], py + SPAWN_OFFSET[1])
        else:
            spawn_tile = FALLBACK_SPAWN_TILE

        worker = Worker(
            name=candidate.name,
            display_name=candidate.display_name,
            tasks=tasks,
            position=spawn_tile,
            stamina=Stamina(maximum=float(self.economy.max_stamina)),
        )
        self._workers[candidate.name] = worker
        self.grid.place_character(candidate.name, spawn_tile)

        self.presentation.notify(Notice("message.start_work", {"name": candidate.display_name}))
        logger.info(
            f"👷 Worker {candidate.name} spawned at {spawn_tile} with tasks: "
            f"{', '.join(task_names(tasks))} (stamina {worker.stamina.maximum:g})"
        )
        return worker

    # --- Dismissal ---------------------------------------------------------

    def dismiss(self, name: str) -> None:
        """Dismiss one worker. No-op if not hired."""
        self._dismiss(name, Notice("message.dismissed", {"name": name}))

    def _dismiss(self, name: str, notice: Optional[Notice]) -> bool:
        worker = self._workers.pop(name, None)
        if worker is None:
            return False
        self.grid.remove_character(name)
        if notice is not None:
            self.presentation.notify(notice)
        logger.info(f"Worker {name} left ({worker.completed_actions} jobs done)")
        return True

    def dismiss_all(self, notice_key: str) -> None:
        for name in list(self._workers):
            self._dismiss(name, Notice(notice_key, {"name": name}))

    # --- Host events -------------------------------------------------------

    def on_day_started(self) -> None:
        """New day: everyone from yesterday is gone, silently."""
        for name in self._workers:
            self.grid.remove_character(name)
        if self._workers:
            logger.info(f"Day started: cleared {len(self._workers)} workers")
        self._workers.clear()
        self.step_count = 0

    def on_time_changed(self, time_of_day: int) -> None:
        if time_of_day >= self.config.end_of_day and self._workers:
            logger.info(f"🌙 {time_of_day}: end of work day")
            self.dismiss_all("message.finish_work")

    def update_ticked(self, game_tick: int) -> Dict[str, StepResult]:
        """Game update hook; runs worker logic once every ticks_per_step ticks."""
        if not self._workers:
            return {}
        if game_tick % self.config.ticks_per_step != 0:
            return {}
        return self.tick()

    # --- Tick --------------------------------------------------------------

    def tick(self) -> Dict[str, StepResult]:
        """Step every worker once, in hire order. Never raises."""
        if not self._workers:
            return {}

        self.step_count += 1
        results: Dict[str, StepResult] = {}

        for name in list(self._workers):
            worker = self._workers.get(name)
            if worker is None:
                # Dismissed earlier in this tick
                continue
            try:
                result = self.machine.step(worker, self.grid, self.claim_table())
            except Exception as e:
                self._handle_fault(ActionFault(name, e))
                continue

            results[name] = result
            if result == StepResult.NO_WORK:
                self._notify_no_work()

        return results

    def _notify_no_work(self) -> None:
        """Throttled, and only with a single worker so a crowd doesn't spam the HUD."""
        if len(self._workers) != 1:
            return
        elapsed_ticks = self.step_count * self.config.ticks_per_step
        if elapsed_ticks % self.config.no_work_notice_ticks != 0:
            return
        self.presentation.notify(Notice("message.no_work"))

    def _handle_fault(self, fault: ActionFault) -> None:
        message = f"Error in worker logic: {fault}"
        if message not in self._logged_faults:
            self._logged_faults.add(message)
            logger.error(message, exc_info=fault.cause)

        if self.config.dismiss_all_on_fault:
            names = list(self._workers)
        else:
            names = [fault.worker]
        for name in names:
            self._dismiss(name, Notice("message.fault", {"name": name}, kind=NOTICE_ERROR))
