"""Tests for session assembly and the headless runner."""
from __future__ import annotations

import pytest

from lunar_colony.__main__ import main
from lunar_colony.config import GameConfig
from lunar_colony.game import ENERGY_CHECK_INTERVAL, build_game
from lunar_colony.signals import ALERT, GAME_WON
from lunar_colony.types import OXYGEN, WATER


def test_default_session():
    engine = build_game(GameConfig(seed=1))
    world = engine.world
    assert [a.name for a in world.agents.astronauts] == ["Astronaut"]
    assert world.agents.selected is world.agents.astronauts[0]
    assert world.agents.rover.position == (12.0, 0.0, 0.0)
    assert world.navigation.available
    assert world.outcome is None


def test_without_crowd():
    engine = build_game(GameConfig(seed=1), with_crowd=False)
    assert not engine.world.navigation.available
    assert engine.world.agents.selected.walk_to((5.0, 0.0, 5.0)) is False


def test_rock_count_scatters():
    engine = build_game(GameConfig(seed=4), rock_count=6)
    assert len(engine.world.rocks.get_rocks()) == 6


def test_death_ends_the_session():
    engine = build_game(GameConfig(seed=1), stop_on_outcome=True)
    world = engine.world
    world.agents.selected.set_resource(OXYGEN, 0.0)
    engine.run(100)
    assert world.outcome == "lost"
    assert engine.clock.tick_number == 1


def test_outcome_is_sticky():
    engine = build_game(GameConfig(seed=1))
    world = engine.world
    world.agents.selected.set_resource(OXYGEN, 0.0)
    engine.run(5)
    assert world.outcome == "lost"
    world.bus.publish(GAME_WON)
    engine.step()
    assert world.outcome == "lost"


def test_periodic_energy_alert():
    engine = build_game(GameConfig(seed=1))
    world = engine.world
    world.placement.place_model_on_click("laboratory", (30.0, 0.0, 30.0))
    alerts = []
    world.bus.subscribe(ALERT, lambda name, data: alerts.append(data["message"]))
    engine.run(int(ENERGY_CHECK_INTERVAL) + 1, dt=1.0)
    assert "Low energy: build more solar panels" in alerts


def test_resource_stats_snapshot():
    engine = build_game(GameConfig(seed=1))
    world = engine.world
    world.placement.place_model_on_click("solar_panel", (-40.0, 0.0, -40.0))
    world.placement.place_model_on_click("base_large", (40.0, 0.0, 40.0))
    engine.run(10, dt=1.0)
    stats = world.get_resource_stats()
    assert stats.has_enough_energy
    assert stats.water > 0.0
    assert stats.energy_required == pytest.approx(1.0)


class TestMain:
    def test_runs_and_prints_stats(self, capsys):
        assert main(["--seconds", "1", "--rocks", "0", "--seed", "1", "--log-level", "WARNING"]) == 0
        out = capsys.readouterr().out
        assert "rocks" in out
        assert WATER in out

    def test_rejects_bad_log_level(self):
        with pytest.raises(SystemExit):
            main(["--log-level", "LOUD"])
