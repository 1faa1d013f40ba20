"""Worker scheduling and execution engine."""

from .action_executor import ActionExecutor, ActionReport, ActionResult
from .fleet_manager import (
    ActionFault,
    FleetManager,
    HireResult,
    RosterEntry,
    WorkerStatus,
    hire_cost,
)
from .presentation import LoggingPresentation, Notice, Presentation
from .stamina import Stamina, StaminaGovernor
from .target_finder import Target, TargetFinder
from .tasks import EVERY_TASK, TaskKind, expand, parse_tasks, task_names
from .worker import StepResult, Worker, WorkerState, WorkerStateMachine

__all__ = [
    "ActionExecutor",
    "ActionReport",
    "ActionResult",
    "ActionFault",
    "FleetManager",
    "HireResult",
    "RosterEntry",
    "WorkerStatus",
    "hire_cost",
    "LoggingPresentation",
    "Notice",
    "Presentation",
    "Stamina",
    "StaminaGovernor",
    "Target",
    "TargetFinder",
    "EVERY_TASK",
    "TaskKind",
    "expand",
    "parse_tasks",
    "task_names",
    "StepResult",
    "Worker",
    "WorkerState",
    "WorkerStateMachine",
]
