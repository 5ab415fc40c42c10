"""Tests for the Navigation wrapper and the open-field crowd."""

import pytest

from lunar_colony import vec
from lunar_colony.crowd import OpenFieldCrowd
from lunar_colony.navigation import AgentParams, Navigation
from lunar_colony.terrain import FlatTerrain

WALKER = AgentParams(radius=1.0, height=2.0, max_speed=2.0, max_acceleration=8.0,
                     collision_query_range=10.0, path_optimization_range=10.0,
                     separation_weight=1.0)


class BrokenCrowd(OpenFieldCrowd):
    """Reports the origin for every closest-point query."""

    def get_closest_point(self, position):
        return (0.0, 0.0, 0.0)


def test_agent_params_validation():
    with pytest.raises(ValueError):
        AgentParams(radius=-1.0, height=1.0, max_speed=1.0, max_acceleration=1.0,
                    collision_query_range=1.0, path_optimization_range=1.0, separation_weight=1.0)


class TestNavigation:
    def test_unavailable_without_crowd(self):
        nav = Navigation(FlatTerrain())
        assert not nav.available
        assert nav.add_agent((0.0, 0.0, 0.0), WALKER) is None
        nav.step(1.0)

    def test_attach_crowd_makes_available(self):
        terrain = FlatTerrain()
        nav = Navigation(terrain)
        nav.attach_crowd(OpenFieldCrowd(terrain))
        assert nav.available

    def test_closest_point_uses_crowd(self):
        terrain = FlatTerrain(100.0, height=1.0)
        nav = Navigation(terrain, OpenFieldCrowd(terrain))
        assert nav.closest_point((80.0, 0.0, 10.0)) == (50.0, 1.0, 10.0)

    def test_degenerate_answer_falls_back_to_raw_point(self):
        terrain = FlatTerrain(100.0, height=3.0)
        nav = Navigation(terrain, BrokenCrowd(terrain))
        assert nav.closest_point((10.0, 0.0, 5.0)) == (10.0, 3.0, 5.0)

    def test_closest_point_without_crowd_snaps_to_ground(self):
        nav = Navigation(FlatTerrain(height=2.0))
        assert nav.closest_point((4.0, 9.0, 4.0)) == (4.0, 2.0, 4.0)

    def test_snap_to_ground_with_lift(self):
        nav = Navigation(FlatTerrain(height=1.0))
        assert nav.snap_to_ground((0.0, 5.0, 0.0), lift=0.05) == (0.0, 1.05, 0.0)

    def test_obstacle_is_zero_speed_agent(self):
        terrain = FlatTerrain()
        crowd = OpenFieldCrowd(terrain)
        nav = Navigation(terrain, crowd)
        handle = nav.add_obstacle((5.0, 0.0, 5.0), radius=2.0, height=3.0)
        assert crowd.agent(handle).is_obstacle

    def test_full_crowd_refuses_agent(self):
        terrain = FlatTerrain()
        nav = Navigation(terrain, OpenFieldCrowd(terrain, max_agents=1))
        assert nav.add_agent((0.0, 0.0, 0.0), WALKER) is not None
        assert nav.add_agent((1.0, 0.0, 0.0), WALKER) is None

    def test_remove_none_handle_is_noop(self):
        terrain = FlatTerrain()
        nav = Navigation(terrain, OpenFieldCrowd(terrain))
        nav.remove_agent(None)


class TestOpenFieldCrowd:
    def test_agent_reaches_goal(self):
        terrain = FlatTerrain()
        crowd = OpenFieldCrowd(terrain)
        handle = crowd.add_agent((0.0, 0.0, 0.0), WALKER)
        crowd.agent_goto(handle, (10.0, 0.0, 0.0))
        for _ in range(600):
            crowd.update(1 / 60)
        assert vec.distance(crowd.get_agent_position(handle), (10.0, 0.0, 0.0)) < 0.5

    def test_speed_never_exceeds_max(self):
        terrain = FlatTerrain()
        crowd = OpenFieldCrowd(terrain)
        handle = crowd.add_agent((0.0, 0.0, 0.0), WALKER)
        crowd.agent_goto(handle, (100.0, 0.0, 0.0))
        for _ in range(120):
            crowd.update(1 / 60)
            assert vec.length(crowd.get_agent_velocity(handle)) <= WALKER.max_speed + 1e-9

    def test_obstacle_pushes_agent_out(self):
        terrain = FlatTerrain()
        crowd = OpenFieldCrowd(terrain)
        obstacle = crowd.add_agent((5.0, 0.0, 0.0), AgentParams(2.0, 2.0, 0.0, 0.0, 2.0, 2.0, 1.0))
        handle = crowd.add_agent((0.0, 0.0, 0.0), WALKER)
        crowd.agent_goto(handle, (5.0, 0.0, 0.0))
        for _ in range(600):
            crowd.update(1 / 60)
        position = crowd.get_agent_position(handle)
        assert vec.horizontal_distance(position, crowd.get_agent_position(obstacle)) >= 3.0 - 1e-9

    def test_obstacles_ignore_goto(self):
        crowd = OpenFieldCrowd(FlatTerrain())
        handle = crowd.add_agent((5.0, 0.0, 0.0), AgentParams(2.0, 2.0, 0.0, 0.0, 2.0, 2.0, 1.0))
        crowd.agent_goto(handle, (0.0, 0.0, 0.0))
        crowd.update(1.0)
        assert crowd.get_agent_position(handle) == (5.0, 0.0, 0.0)

    def test_teleport_resets_motion(self):
        crowd = OpenFieldCrowd(FlatTerrain())
        handle = crowd.add_agent((0.0, 0.0, 0.0), WALKER)
        crowd.agent_goto(handle, (10.0, 0.0, 0.0))
        crowd.update(0.5)
        crowd.agent_teleport(handle, (-3.0, 0.0, 0.0))
        crowd.update(0.5)
        assert crowd.get_agent_position(handle) == (-3.0, 0.0, 0.0)
        assert crowd.get_agent_velocity(handle) == vec.ZERO

    def test_removed_agent_reports_nothing(self):
        crowd = OpenFieldCrowd(FlatTerrain())
        handle = crowd.add_agent((0.0, 0.0, 0.0), WALKER)
        crowd.remove_agent(handle)
        assert crowd.get_agent_position(handle) is None
        assert len(crowd) == 0
