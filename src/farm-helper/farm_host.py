#!/usr/bin/env python3
"""
Farm Helper Host - headless day cycle for the worker engine.

Plays the part of the game: owns the farm grid, the player and the clock, and
raises the three events the fleet listens to (day started, update ticked,
time changed).

Run with: python farm_host.py --layout config/farm_layout.yaml --hire Robin:wood,stone
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from config import Config
from execution.fleet_manager import FleetManager, HireResult
from execution.presentation import Presentation
from execution.tasks import TaskKind, parse_tasks
from world.economy import Farmer
from world.grid import InMemoryWorldGrid
from world.models import Candidate

logger = logging.getLogger(__name__)

LATEST_TIME = 2600  # 2:00 AM, the day always ends here


def advance_clock(time_of_day: int, minutes: int = 10) -> int:
    """Add minutes to an HHMM game time (610 + 50 -> 700)."""
    hours, mins = divmod(time_of_day, 100)
    mins += minutes
    hours += mins // 60
    return hours * 100 + mins % 60


class FarmHost:
    """
    Usage:
        host = FarmHost(grid, farmer, config)
        host.start_day()
        host.fleet.hire("Robin", TaskKind.WOOD, cost)
        host.run_day()
    """

    def __init__(
        self,
        grid: InMemoryWorldGrid,
        farmer: Farmer,
        config: Optional[Config] = None,
        presentation: Optional[Presentation] = None,
    ):
        self.grid = grid
        self.farmer = farmer
        self.config = config or Config()
        self.fleet = FleetManager(grid, farmer, self.config, presentation)
        self.day = 0
        self.game_tick = 0
        self.time_of_day = self.config.day_start

    def start_day(self) -> None:
        self.day += 1
        self.game_tick = 0
        self.time_of_day = self.config.day_start
        self.fleet.on_day_started()
        logger.info(f"☀️ Day {self.day} started")

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            self.game_tick += 1
            self.fleet.update_ticked(self.game_tick)
            if self.game_tick % self.config.ticks_per_time_step == 0:
                self.time_of_day = advance_clock(self.time_of_day)
                self.fleet.on_time_changed(self.time_of_day)

    def run_day(self, max_ticks: Optional[int] = None, stop_when_idle: bool = False) -> int:
        """
        Advance until the end of the day (or max_ticks). Returns ticks run.

        With stop_when_idle the run also ends once every worker has left.
        """
        start = self.game_tick
        while self.time_of_day < LATEST_TIME:
            if max_ticks is not None and self.game_tick - start >= max_ticks:
                break
            if stop_when_idle and not self.fleet.has_any_worker:
                break
            self.advance()
        return self.game_tick - start

    def hire(self, name: str, tasks: TaskKind) -> Tuple[HireResult, int]:
        cost = self.fleet.quote(name, tasks)
        return self.fleet.hire(Candidate(name=name), tasks, cost), cost


def parse_hire(entry: str) -> Tuple[str, TaskKind]:
    """Parse "Robin:wood,stone" into ("Robin", WOOD | STONE)."""
    name, _, tasks = entry.partition(":")
    if not name or not tasks:
        raise ValueError(f"Expected NAME:task[,task...], got {entry!r}")
    return name.strip(), parse_tasks(tasks.split(","))


def parse_hearts(entries: Sequence[str]) -> Dict[str, int]:
    hearts: Dict[str, int] = {}
    for entry in entries:
        name, _, level = entry.partition("=")
        hearts[name.strip()] = int(level)
    return hearts


def setup_logging(config: Config) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Farm Helper headless host")
    parser.add_argument("--config", "-c", default="./config/settings.yaml",
                        help="Path to config file")
    parser.add_argument("--layout", "-l", required=True,
                        help="Farm layout YAML (objects and terrain features)")
    parser.add_argument("--hire", action="append", default=[],
                        help="Worker to hire, e.g. Robin:wood,stone (repeatable)")
    parser.add_argument("--hearts", action="append", default=[],
                        help="Friendship level, e.g. Robin=4 (repeatable)")
    parser.add_argument("--money", type=int, default=1000,
                        help="Player's starting gold")
    parser.add_argument("--stamina", type=float, default=270.0,
                        help="Player's max stamina (workers copy it)")
    parser.add_argument("--max-ticks", type=int, default=None,
                        help="Stop after this many game ticks")
    args = parser.parse_args(argv)

    config = Config.from_yaml(args.config)
    setup_logging(config)

    if not Path(args.layout).exists():
        logger.error(f"Layout not found: {args.layout}")
        return 2

    grid = InMemoryWorldGrid.from_layout(args.layout)
    farmer = Farmer(
        money=args.money,
        stamina_capacity=args.stamina,
        hearts=parse_hearts(args.hearts),
    )
    host = FarmHost(grid, farmer, config)
    host.start_day()

    for entry in args.hire:
        name, tasks = parse_hire(entry)
        result, cost = host.hire(name, tasks)
        logger.info(f"Hire {name} for {cost}g: {result.value}")

    ticks = host.run_day(max_ticks=args.max_ticks, stop_when_idle=True)

    print("\n" + "=" * 60)
    print("   🌾 Farm Helper - Day Summary")
    print("=" * 60)
    print(f"   Ticks run: {ticks} (time {host.time_of_day})")
    print(f"   Gold left: {farmer.money}")
    print(f"   Objects left: {len(grid.objects)}  Features left: {len(grid.features)}")
    print(f"   Debris dropped: {sum(d.count for d in grid.debris)}")
    for status in host.fleet.active_workers():
        print(f"   {status.name}: {status.state.value}, "
              f"stamina {status.stamina:g}/{status.max_stamina:g}, "
              f"{status.completed_actions} jobs")
    print("=" * 60 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
