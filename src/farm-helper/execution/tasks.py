from __future__ import annotations

from enum import Flag
from typing import Dict, Iterable, List


class TaskKind(Flag):
    """
    Task mask. Members combine with | like any Flag.

    ALL is a synthetic member: it stands for every task kind but is never
    stored as the literal combination of the others. Call expand() before
    testing membership.
    """
    NONE = 0
    WEEDS = 1
    STONE = 2
    WOOD = 4
    WATERING = 8
    COLLECT = 16
    ALL = 32


EVERY_TASK = (
    TaskKind.WEEDS | TaskKind.STONE | TaskKind.WOOD | TaskKind.WATERING | TaskKind.COLLECT
)

# Config/API names for each task kind, in menu order
TASK_NAMES: Dict[TaskKind, str] = {
    TaskKind.WEEDS: "weeds",
    TaskKind.STONE: "stone",
    TaskKind.WOOD: "wood",
    TaskKind.WATERING: "watering",
    TaskKind.COLLECT: "collect",
}

_BY_NAME = {name: kind for kind, name in TASK_NAMES.items()}
_BY_NAME["all"] = TaskKind.ALL


def expand(mask: TaskKind) -> TaskKind:
    """Resolve ALL to the full set; strip the synthetic bit otherwise."""
    if TaskKind.ALL in mask:
        return EVERY_TASK
    return mask & EVERY_TASK


def task_kinds(mask: TaskKind) -> List[TaskKind]:
    """Individual task kinds enabled by the mask, in menu order."""
    expanded = expand(mask)
    return [kind for kind in TASK_NAMES if kind in expanded]


def parse_tasks(names: Iterable[str]) -> TaskKind:
    """Build a mask from names like ["weeds", "stone"] or ["all"]."""
    mask = TaskKind.NONE
    for raw in names:
        name = raw.strip().lower()
        if not name:
            continue
        if name not in _BY_NAME:
            raise ValueError(f"Unknown task: {raw!r}")
        mask |= _BY_NAME[name]
    return mask


def task_names(mask: TaskKind) -> List[str]:
    """Inverse of parse_tasks. ALL is reported as ["all"]."""
    if TaskKind.ALL in mask:
        return ["all"]
    return [TASK_NAMES[kind] for kind in task_kinds(mask)]
