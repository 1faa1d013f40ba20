import logging

import pytest

from config import Config
from execution.action_executor import ActionExecutor
from execution.fleet_manager import FleetManager, HireResult, hire_cost
from execution.presentation import LoggingPresentation
from execution.tasks import TaskKind
from execution.worker import StepResult
from world.economy import Farmer
from world.grid import InMemoryWorldGrid
from world.models import Candidate, Crop, HoeDirt, ObjectKind, WorldObject


def weeds():
    return WorldObject(name="Weeds", kind=ObjectKind.WEEDS)


def make_fleet(grid=None, farmer=None, config=None, executor=None):
    grid = grid if grid is not None else InMemoryWorldGrid()
    farmer = farmer or Farmer(money=1000)
    presentation = LoggingPresentation()
    fleet = FleetManager(grid, farmer, config or Config(), presentation, executor=executor)
    return fleet, presentation


def notice_keys(presentation):
    return [n.key for n in presentation.notices]


class BrokenExecutor(ActionExecutor):
    """Raises for one worker, behaves normally for everyone else."""

    def __init__(self, presentation, broken="Robin"):
        super().__init__(presentation)
        self.broken = broken

    def perform_action(self, grid, tile, tasks, worker=""):
        if worker == self.broken:
            raise RuntimeError("boom")
        return super().perform_action(grid, tile, tasks, worker)


# --- Cost ------------------------------------------------------------------

def test_cost_with_friendship_discount():
    """100 base + 30 weeds at 4 hearts (20% off) = 104."""
    assert hire_cost(Config(), 4, TaskKind.WEEDS) == 104


def test_cost_no_tasks_is_zero():
    assert hire_cost(Config(), 0, TaskKind.NONE) == 0


def test_cost_discount_capped():
    # 130 * (1 - 0.8)
    assert hire_cost(Config(), 20, TaskKind.WEEDS) == 26


def test_cost_truncation_ignores_float_noise():
    # 0.05 * 6 is 0.30000000000000004; 130 * 0.7 must still be 91
    assert hire_cost(Config(), 6, TaskKind.WEEDS) == 91


def test_cost_monotonic_in_tasks():
    config = Config()
    single = hire_cost(config, 2, TaskKind.WEEDS)
    double = hire_cost(config, 2, TaskKind.WEEDS | TaskKind.STONE)
    every = hire_cost(config, 2, TaskKind.ALL)
    assert single <= double <= every
    assert every == int(round((100 + 30 + 50 + 100 + 150 + 0) * 0.9, 6))


# --- Hiring ----------------------------------------------------------------

def test_hire_spawns_next_to_player():
    farmer = Farmer(money=1000, position=(30, 20))
    fleet, presentation = make_fleet(farmer=farmer)

    result = fleet.hire(Candidate("Robin"), TaskKind.WOOD, 200)

    assert result == HireResult.SUCCESS
    assert farmer.money == 800
    status = fleet.get_worker_status("Robin")
    assert status.position == (31, 20)
    assert status.stamina == status.max_stamina == 270.0
    assert fleet.grid.has_character("Robin")
    assert "message.hired" in notice_keys(presentation)


def test_hire_off_farm_uses_fallback_tile():
    farmer = Farmer(money=1000, location="Mine")
    fleet, _ = make_fleet(farmer=farmer)

    fleet.hire("Robin", TaskKind.WOOD, 100)

    assert fleet.get_worker_status("Robin").position == (64, 15)


def test_hire_twice_already_hired():
    farmer = Farmer(money=1000)
    fleet, presentation = make_fleet(farmer=farmer)

    assert fleet.hire("Robin", TaskKind.WOOD, 100) == HireResult.SUCCESS
    assert fleet.hire("Robin", TaskKind.STONE, 100) == HireResult.ALREADY_HIRED
    assert farmer.money == 900
    assert fleet.worker_names() == ["Robin"]
    assert "message.worker_busy" in notice_keys(presentation)


def test_hire_insufficient_funds():
    farmer = Farmer(money=50)
    fleet, presentation = make_fleet(farmer=farmer)

    assert fleet.hire("Robin", TaskKind.WEEDS, 130) == HireResult.INSUFFICIENT_FUNDS
    assert farmer.money == 50
    assert not fleet.is_hired("Robin")
    assert "message.not_enough_money" in notice_keys(presentation)


def test_hire_negative_cost_rejected():
    farmer = Farmer(money=100)
    fleet, _ = make_fleet(farmer=farmer)

    with pytest.raises(ValueError):
        fleet.hire("Robin", TaskKind.WEEDS, -500)

    assert farmer.money == 100
    assert not fleet.is_hired("Robin")


def test_hire_without_tasks():
    farmer = Farmer(money=1000)
    fleet, _ = make_fleet(farmer=farmer)

    assert fleet.hire("Robin", TaskKind.NONE, 0) == HireResult.NO_TASKS
    assert farmer.money == 1000
    assert not fleet.has_any_worker


def test_roster_best_friends_first():
    farmer = Farmer(money=1000, hearts={"Linus": 2, "Robin": 5, "Abigail": 2})
    fleet, _ = make_fleet(farmer=farmer)
    fleet.hire("Linus", TaskKind.WEEDS, 0)

    candidates = [Candidate("Linus"), Candidate("Robin"), Candidate("Abigail")]
    roster = fleet.roster(candidates, TaskKind.WEEDS)

    assert [e.candidate.name for e in roster] == ["Robin", "Linus", "Abigail"]
    assert roster[0].cost == hire_cost(fleet.config, 5, TaskKind.WEEDS)
    assert roster[1].hired


# --- Dismissal -------------------------------------------------------------

def test_dismiss_is_idempotent():
    fleet, presentation = make_fleet()
    fleet.hire("Robin", TaskKind.WOOD, 100)

    fleet.dismiss("Robin")
    fleet.dismiss("Robin")

    assert not fleet.is_hired("Robin")
    assert not fleet.grid.has_character("Robin")
    assert notice_keys(presentation).count("message.dismissed") == 1


def test_day_start_clears_everyone():
    fleet, presentation = make_fleet()
    for name in ("Robin", "Linus", "Abigail"):
        fleet.hire(name, TaskKind.WEEDS, 100)
    presentation.notices.clear()

    fleet.on_day_started()

    assert not fleet.has_any_worker
    assert fleet.grid.characters == {}
    assert fleet.tick() == {}
    # Silent: no dismissal notices
    assert list(presentation.notices) == []


def test_end_of_day_dismisses_everyone():
    fleet, presentation = make_fleet()
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.STONE, 100)

    fleet.on_time_changed(1750)
    assert fleet.has_any_worker

    fleet.on_time_changed(1800)
    assert not fleet.has_any_worker
    assert notice_keys(presentation).count("message.finish_work") == 2


# --- Ticking ---------------------------------------------------------------

def test_update_ticked_cadence():
    fleet, _ = make_fleet()
    fleet.hire("Robin", TaskKind.WEEDS, 100)

    for game_tick in range(1, 121):
        fleet.update_ticked(game_tick)

    assert fleet.step_count == 2


def test_no_steps_without_workers():
    fleet, _ = make_fleet()

    assert fleet.update_ticked(60) == {}
    assert fleet.step_count == 0


def test_claims_visible_within_the_same_tick():
    """Second worker sees the tile the first one claimed moments earlier."""
    grid = InMemoryWorldGrid()
    grid.add_object((70, 15), weeds())
    fleet, _ = make_fleet(grid=grid)
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.WEEDS, 100)

    results = fleet.tick()

    assert results == {"Robin": StepResult.MOVED, "Linus": StepResult.NO_WORK}
    assert fleet.claim_table() == {(70, 15): "Robin"}


def test_workers_split_targets():
    grid = InMemoryWorldGrid()
    grid.add_object((70, 15), weeds())
    grid.add_object((71, 15), weeds())
    fleet, _ = make_fleet(grid=grid)
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.WEEDS, 100)

    fleet.tick()

    targets = {s.name: s.target for s in fleet.active_workers()}
    assert targets == {"Robin": (70, 15), "Linus": (71, 15)}

    fleet.tick()
    assert grid.objects == {}


def test_weeds_on_watered_soil_get_cleared():
    """Watered soil under weeds must not hold the worker on that tile forever."""
    grid = InMemoryWorldGrid()
    grid.add_feature((65, 15), HoeDirt(state=1, crop=Crop("Parsnip")))
    grid.add_object((65, 15), weeds())
    grid.add_object((80, 15), weeds())
    fleet, _ = make_fleet(grid=grid)
    fleet.hire("Robin", TaskKind.WEEDS | TaskKind.WATERING, 100)

    for _ in range(20):
        fleet.tick()

    assert grid.objects == {}
    assert fleet.get_worker_status("Robin").completed_actions == 2


def test_fault_dismisses_only_the_offender(caplog):
    grid = InMemoryWorldGrid()
    grid.add_object((66, 15), weeds())
    grid.add_object((66, 16), weeds())
    presentation = LoggingPresentation()
    fleet = FleetManager(
        grid, Farmer(money=1000), Config(), presentation,
        executor=BrokenExecutor(presentation),
    )
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.WEEDS, 100)

    with caplog.at_level(logging.ERROR, logger="execution.fleet_manager"):
        results = fleet.tick()

    assert "Robin" not in results
    assert results["Linus"] == StepResult.DONE
    assert fleet.worker_names() == ["Linus"]
    assert "message.fault" in notice_keys(presentation)
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 1


def test_fault_logged_once(caplog):
    """The same fault repeating does not flood the log."""
    presentation = LoggingPresentation()
    grid = InMemoryWorldGrid()
    grid.add_object((66, 15), weeds())
    fleet = FleetManager(
        grid, Farmer(money=1000), Config(), presentation,
        executor=BrokenExecutor(presentation),
    )

    with caplog.at_level(logging.ERROR, logger="execution.fleet_manager"):
        for _ in range(3):
            fleet.hire("Robin", TaskKind.WEEDS, 100)
            fleet.tick()
            assert not fleet.is_hired("Robin")

    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 1


def test_fault_can_dismiss_everyone():
    grid = InMemoryWorldGrid()
    grid.add_object((66, 15), weeds())
    presentation = LoggingPresentation()
    fleet = FleetManager(
        grid, Farmer(money=1000), Config(dismiss_all_on_fault=True), presentation,
        executor=BrokenExecutor(presentation),
    )
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.WEEDS, 100)

    fleet.tick()

    assert not fleet.has_any_worker
    assert notice_keys(presentation).count("message.fault") == 2


def test_no_work_notice_throttled():
    """One idle worker gets a notice every 300 ticks (5 steps), not every step."""
    fleet, presentation = make_fleet()
    fleet.hire("Robin", TaskKind.WEEDS, 100)

    for _ in range(10):
        assert fleet.tick() == {"Robin": StepResult.NO_WORK}

    assert notice_keys(presentation).count("message.no_work") == 2


def test_no_work_notice_silent_with_crowd():
    fleet, presentation = make_fleet()
    fleet.hire("Robin", TaskKind.WEEDS, 100)
    fleet.hire("Linus", TaskKind.WEEDS, 100)

    for _ in range(10):
        fleet.tick()

    assert "message.no_work" not in notice_keys(presentation)


def test_status_to_dict():
    fleet, _ = make_fleet()
    fleet.hire(Candidate("Robin", display_name="Robin the Carpenter"), TaskKind.ALL, 100)

    data = fleet.get_worker_status("Robin").to_dict()

    assert data["display_name"] == "Robin the Carpenter"
    assert data["tasks"] == ["all"]
    assert data["state"] == "idle"
    assert data["target"] is None
    assert fleet.get_worker_status("Linus") is None
