"""Tests for rock spawning and digging."""
from __future__ import annotations

import random

import pytest

from lunar_colony import vec
from lunar_colony.agent import DIG_ANIMATION, IDLE_ANIMATION
from lunar_colony.config import GameConfig
from lunar_colony.game import build_game
from lunar_colony.navigation import Navigation
from lunar_colony.registry import AgentRegistry
from lunar_colony.resources import ResourceManager
from lunar_colony.rocks import LARGE, SMALL, RockManager
from lunar_colony.signals import ROCK_DUG
from lunar_colony.tasks import TaskQueue


def _world(seed: int = 1):
    engine = build_game(GameConfig(seed=seed))
    return engine, engine.world


class TestDigging:
    def test_dig_completes_after_dig_time(self):
        engine, world = _world()
        astronaut = world.agents.selected
        rock = world.rocks.create_rock((3.0, 0.0, 0.0), SMALL)
        before = world.resources.get_available_rocks()
        assert world.rocks.start_digging(astronaut, rock)

        for _ in range(4):
            engine.step(1.0)
        assert world.resources.get_available_rocks() == before
        assert rock in world.rocks.get_rocks()
        assert astronaut.animation == DIG_ANIMATION

        engine.step(1.0)
        assert world.resources.get_available_rocks() == before + 1
        assert rock not in world.rocks.get_rocks()
        assert astronaut.animation == IDLE_ANIMATION

    def test_large_rock_value(self):
        engine, world = _world()
        rock = world.rocks.create_rock((4.0, 0.0, 0.0), LARGE)
        before = world.resources.get_available_rocks()
        world.rocks.start_digging(world.agents.selected, rock)
        for _ in range(13):
            engine.step(1.0)
        assert world.resources.get_available_rocks() == before + 3

    def test_rock_dug_signal(self):
        engine, world = _world()
        received = []
        world.bus.subscribe(ROCK_DUG, lambda name, data: received.append(data["value"]))
        rock = world.rocks.create_rock((3.0, 0.0, 0.0), SMALL)
        world.rocks.start_digging(world.agents.selected, rock)
        for _ in range(6):
            engine.step(1.0)
        assert received == [1]

    def test_start_digging_is_idempotent(self):
        engine, world = _world()
        rock = world.rocks.create_rock((3.0, 0.0, 0.0), SMALL)
        assert world.rocks.start_digging(world.agents.selected, rock)
        assert world.rocks.start_digging(world.agents.selected, rock) is False
        assert rock.is_being_dug

    def test_cancelled_walk_releases_rock(self):
        engine, world = _world()
        astronaut = world.agents.selected
        rock = world.rocks.create_rock((40.0, 0.0, 0.0), SMALL)
        world.rocks.start_digging(astronaut, rock)
        engine.step(0.1)
        astronaut.walk_to((-20.0, 0.0, 0.0))
        assert rock.is_being_dug is False

    def test_rock_removed_mid_dig_is_not_credited(self):
        engine, world = _world()
        rock = world.rocks.create_rock((3.0, 0.0, 0.0), SMALL)
        world.rocks.start_digging(world.agents.selected, rock)
        engine.step(1.0)
        before = world.resources.get_available_rocks()
        assert world.rocks.remove_rock(rock)
        for _ in range(6):
            engine.step(1.0)
        assert world.resources.get_available_rocks() == before

    def test_dig_dropped_without_navigation(self):
        engine = build_game(GameConfig(seed=1), with_crowd=False)
        world = engine.world
        rock = world.rocks.create_rock((3.0, 0.0, 0.0), SMALL)
        assert world.rocks.start_digging(world.agents.selected, rock) is False
        assert rock.is_being_dug is False


class TestSpawning:
    def test_scatter_split_and_spacing(self):
        engine, world = _world(seed=3)
        rocks = world.rocks.scatter_rocks_across_map(10)
        assert len(rocks) == 10
        assert [r.size for r in rocks].count(SMALL) == 7
        min_x, max_x, min_z, max_z = world.navigation.terrain.bounds
        pad = world.config.rocks.padding
        for i, rock in enumerate(rocks):
            x, _, z = rock.position
            assert min_x + pad <= x <= max_x - pad
            assert min_z + pad <= z <= max_z - pad
            for other in rocks[i + 1:]:
                assert vec.horizontal_distance(rock.position, other.position) >= world.config.rocks.min_spacing
            for agent in world.agents.movers():
                assert vec.horizontal_distance(rock.position, agent.position) >= world.config.rocks.min_spacing

    def test_scatter_is_reproducible_with_seed(self):
        _, first = _world(seed=9)
        _, second = _world(seed=9)
        a = [r.position for r in first.rocks.scatter_rocks_across_map(5)]
        b = [r.position for r in second.rocks.scatter_rocks_across_map(5)]
        assert a == b

    def test_rocks_that_never_fit_are_skipped(self):
        engine, world = _world()
        world.rocks.create_rock((0.0, 0.0, 30.0))
        # A tiny burst around an occupied point has nowhere to go.
        created = world.rocks.explode_rocks((0.0, 0.0, 30.0), 3, 1.0)
        assert created == []

    def test_explode_rocks_stay_in_radius(self):
        engine, world = _world()
        center = (100.0, 0.0, 100.0)
        created = world.rocks.explode_rocks(center, 4, 30.0)
        assert 0 < len(created) <= 4
        for rock in created:
            assert vec.horizontal_distance(rock.position, center) <= 30.0

    def test_scatter_without_terrain(self):
        nav = Navigation()
        manager = RockManager(nav, ResourceManager(), AgentRegistry(), TaskQueue(), rng=random.Random(1))
        assert manager.scatter_rocks_across_map(5) == []

    def test_obstacle_registered_and_removed(self):
        engine, world = _world()
        rock = world.rocks.create_rock((30.0, 0.0, 0.0), LARGE)
        crowd = world.navigation.crowd
        assert crowd.agent(rock.obstacle).params.radius == pytest.approx(3.0)
        handle = rock.obstacle
        world.rocks.remove_rock(rock)
        assert crowd.agent(handle) is None
        assert world.rocks.remove_rock(rock) is False


class TestQueries:
    def test_find_rock_near(self):
        engine, world = _world()
        rock = world.rocks.create_rock((30.0, 0.0, 0.0))
        assert world.rocks.find_rock_near((30.5, 0.0, 0.0)) is rock
        assert world.rocks.find_rock_near((35.0, 0.0, 0.0)) is None
        assert world.rocks.find_rock_near((35.0, 0.0, 0.0), tolerance=6.0) is rock

    def test_dispose_removes_everything(self):
        engine, world = _world()
        world.rocks.scatter_rocks_across_map(5)
        world.rocks.dispose()
        assert world.rocks.get_rocks() == []
