import pytest

import farm_host
from config import Config
from execution.fleet_manager import HireResult
from execution.tasks import TaskKind
from farm_host import FarmHost, advance_clock, parse_hearts, parse_hire
from world.economy import Farmer
from world.grid import InMemoryWorldGrid
from world.models import ObjectKind, WorldObject


def test_advance_clock():
    assert advance_clock(600) == 610
    assert advance_clock(650) == 700
    assert advance_clock(1750, minutes=20) == 1810


def test_parse_hire():
    assert parse_hire("Robin:wood,stone") == ("Robin", TaskKind.WOOD | TaskKind.STONE)
    assert parse_hire("Linus:all") == ("Linus", TaskKind.ALL)
    with pytest.raises(ValueError):
        parse_hire("Robin")
    with pytest.raises(ValueError):
        parse_hire("Robin:fishing")


def test_parse_hearts():
    assert parse_hearts(["Robin=4", " Linus =2"]) == {"Robin": 4, "Linus": 2}


def test_day_runs_until_workers_go_home():
    grid = InMemoryWorldGrid()
    grid.add_object((70, 15), WorldObject(name="Weeds", kind=ObjectKind.WEEDS))
    farmer = Farmer(money=1000)
    host = FarmHost(grid, farmer, Config(ticks_per_time_step=10))
    host.start_day()

    result, cost = host.hire("Robin", TaskKind.WEEDS)
    assert result == HireResult.SUCCESS
    assert farmer.money == 1000 - cost

    ticks = host.run_day(stop_when_idle=True)

    assert host.time_of_day == 1800
    assert ticks == 72 * 10
    assert not host.fleet.has_any_worker
    assert grid.objects == {}


def test_next_day_starts_fresh():
    host = FarmHost(InMemoryWorldGrid(), Farmer(money=1000))
    host.start_day()
    host.hire("Robin", TaskKind.WOOD)
    host.advance(120)

    host.start_day()

    assert host.day == 2
    assert host.time_of_day == 600
    assert host.game_tick == 0
    assert not host.fleet.has_any_worker


def test_main_runs_a_day(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(farm_host, "setup_logging", lambda config: None)
    layout = tmp_path / "layout.yaml"
    layout.write_text(
        "objects:\n"
        "  - {x: 66, y: 15, name: Weeds, kind: weeds}\n"
        "  - {x: 70, y: 15, name: Stone, kind: stone}\n"
    )

    code = farm_host.main([
        "--config", str(tmp_path / "missing.yaml"),
        "--layout", str(layout),
        "--hire", "Robin:weeds,stone",
        "--hearts", "Robin=4",
        "--max-ticks", "600",
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "Day Summary" in out
    assert "Objects left: 0" in out
    # 100 + 30 + 50 at 20% off
    assert "Gold left: 856" in out


def test_main_missing_layout(tmp_path, monkeypatch):
    monkeypatch.setattr(farm_host, "setup_logging", lambda config: None)

    code = farm_host.main([
        "--config", str(tmp_path / "missing.yaml"),
        "--layout", str(tmp_path / "nope.yaml"),
    ])

    assert code == 2
