"""Tests for building placement, removal and the landing pad."""
from __future__ import annotations

import pytest

from lunar_colony import vec
from lunar_colony.config import GameConfig
from lunar_colony.game import build_game
from lunar_colony.placement import BoundingBox, slope_of, surface_basis
from lunar_colony.signals import BUILDING_PLACED, BUILDING_REMOVED, GAME_WON
from lunar_colony.terrain import HeightmapTerrain
from lunar_colony.types import ENERGY, ROCKS, WATER


def _world(**kwargs):
    engine = build_game(GameConfig(seed=1), **kwargs)
    return engine, engine.world


class TestGeometry:
    def test_flat_basis_is_identity(self):
        right, up, forward = surface_basis(vec.UP)
        assert right == pytest.approx((1.0, 0.0, 0.0))
        assert up == pytest.approx((0.0, 1.0, 0.0))
        assert forward == pytest.approx((0.0, 0.0, 1.0))

    def test_tilted_basis_is_orthonormal(self):
        right, up, forward = surface_basis((-0.3, 1.0, 0.2))
        for axis in (right, up, forward):
            assert vec.length(axis) == pytest.approx(1.0)
        assert vec.dot(right, up) == pytest.approx(0.0, abs=1e-12)
        assert vec.dot(forward, up) == pytest.approx(0.0, abs=1e-12)
        assert vec.dot(right, forward) == pytest.approx(0.0, abs=1e-12)

    def test_slope(self):
        assert slope_of(vec.UP) == 0.0
        assert slope_of((-1.0, 1.0, 0.0)) == pytest.approx(0.785398, abs=1e-6)

    def test_bounding_box_overlap_is_inclusive(self):
        a = BoundingBox.around((0.0, 0.0, 0.0), (4.0, 2.0, 4.0))
        b = BoundingBox.around((4.0, 0.0, 0.0), (4.0, 2.0, 4.0))
        c = BoundingBox.around((4.1, 0.0, 0.0), (4.0, 2.0, 4.0))
        assert a.intersects(b)
        assert not a.intersects(c)


class TestConfirm:
    def test_place_producer(self):
        engine, world = _world()
        placed = []
        world.bus.subscribe(BUILDING_PLACED, lambda name, data: placed.append(data["building"]))
        building = world.placement.place_model_on_click("base_large", (40.0, 0.0, 40.0))
        assert building is not None
        assert world.resources.get_available_rocks() == 7.0
        record = world.resources.record(building)
        assert record.resource == WATER
        assert record.radius == pytest.approx(15.0)
        assert record.energy_consumption == 1.0
        assert building.service_area.radius == pytest.approx(15.0)
        assert world.navigation.crowd.agent(building.obstacle).is_obstacle
        assert world.navigation.crowd.agent(building.obstacle).params.radius == pytest.approx(5.0)
        engine.step()
        assert placed == [building]

    def test_energy_building_has_no_service_area(self):
        engine, world = _world()
        building = world.placement.place_model_on_click("solar_panel", (40.0, 0.0, 40.0))
        assert building.service_area is None
        assert world.resources.record(building).resource == ENERGY

    def test_non_producer_is_not_registered(self):
        engine, world = _world()
        building = world.placement.place_model_on_click("living_quarters", (40.0, 0.0, 40.0))
        assert building is not None
        assert world.resources.record(building) is None
        assert building.obstacle is not None

    def test_overlap_rejected_without_charge(self):
        engine, world = _world()
        world.placement.place_model_on_click("solar_panel", (40.0, 0.0, 40.0))
        rocks = world.resources.get_available_rocks()
        assert world.placement.place_model_on_click("solar_panel", (43.0, 0.0, 40.0)) is None
        assert world.resources.get_available_rocks() == rocks
        assert len(world.buildings) == 1

    def test_preview_follow_then_confirm(self):
        engine, world = _world()
        placement = world.placement
        assert placement.arm("solar_panel")
        preview = placement.update_preview((50.0, 99.0, -50.0))
        assert preview.valid
        assert preview.position == (50.0, 0.0, -50.0)
        building = placement.confirm_placement()
        assert building.position == (50.0, 0.0, -50.0)
        assert placement.preview is None

    def test_confirm_invalid_preview_does_nothing(self):
        engine, world = _world()
        placement = world.placement
        placement.arm("solar_panel")
        placement.update_preview((1.0, 0.0, 1.0))
        assert placement.preview.reason == "too close to an astronaut"
        assert placement.confirm_placement() is None
        assert placement.preview is not None

    def test_confirm_rechecks_clearance(self):
        engine, world = _world()
        placement = world.placement
        placement.arm("solar_panel")
        assert placement.update_preview((30.0, 0.0, 30.0)).valid
        world.agents.selected.teleport((30.0, 0.0, 30.0))
        assert placement.confirm_placement() is None
        assert placement.preview.reason == "too close to an astronaut"
        assert world.resources.get_available_rocks() == 10.0
        assert world.buildings == []

    def test_confirm_rechecks_new_rock(self):
        engine, world = _world()
        placement = world.placement
        placement.arm("solar_panel")
        placement.update_preview((60.0, 0.0, 0.0))
        world.rocks.create_rock((61.0, 0.0, 0.0))
        assert placement.confirm_placement() is None
        assert placement.preview.reason == "too close to a rock"

    def test_rock_cost_checked_at_confirm(self):
        engine, world = _world()
        placement = world.placement
        placement.arm("laboratory")
        placement.update_preview((40.0, 0.0, 40.0))
        world.resources.consume_rocks(8)
        assert placement.confirm_placement() is None
        assert world.resources.get_available_rocks() == 2.0
        assert world.buildings == []


class TestValidity:
    @pytest.mark.parametrize("point, reason", [
        ((1.0, 0.0, 1.0), "too close to an astronaut"),
        ((14.0, 0.0, 0.0), "too close to the rover"),
    ])
    def test_clearance(self, point, reason):
        engine, world = _world()
        placement = world.placement
        placement.arm("solar_panel")
        assert placement.update_preview(point).reason == reason

    def test_rock_clearance(self):
        engine, world = _world()
        world.rocks.create_rock((60.0, 0.0, 0.0))
        placement = world.placement
        placement.arm("solar_panel")
        assert placement.update_preview((62.0, 0.0, 0.0)).reason == "too close to a rock"
        assert placement.update_preview((64.0, 0.0, 0.0)).valid

    def test_off_terrain(self):
        engine, world = _world()
        placement = world.placement
        placement.arm("solar_panel")
        preview = placement.update_preview((1000.0, 0.0, 0.0))
        assert not preview.valid
        assert preview.position is None

    def test_steep_slope(self):
        steep = HeightmapTerrain([[0.0, 100.0], [0.0, 100.0]], cell_size=100.0)
        engine, world = _world(terrain=steep, astronauts=(), rover_position=None)
        placement = world.placement
        placement.arm("solar_panel")
        assert placement.update_preview((0.0, 0.0, 0.0)).reason == "slope too steep"

    def test_gentle_slope_aligns_to_normal(self):
        gentle = HeightmapTerrain([[0.0, 10.0], [0.0, 10.0]], cell_size=100.0)
        engine, world = _world(terrain=gentle, astronauts=(), rover_position=None)
        building = world.placement.place_model_on_click("solar_panel", (10.0, 0.0, 0.0))
        assert building is not None
        assert building.position[1] == pytest.approx(6.0)
        _, up, _ = building.basis
        assert up[0] < 0.0
        assert up == pytest.approx(vec.normalize((-0.1, 1.0, 0.0)))


class TestArming:
    def test_arming_same_building_cancels(self):
        engine, world = _world()
        assert world.placement.arm("solar_panel")
        assert world.placement.arm("solar_panel") is False
        assert world.placement.preview is None

    def test_arming_other_building_switches(self):
        engine, world = _world()
        world.placement.arm("solar_panel")
        assert world.placement.arm("laboratory")
        assert world.placement.preview.spec.key == "laboratory"

    def test_unaffordable_cannot_arm(self):
        engine, world = _world()
        assert world.placement.can_afford("landing_pad") is False
        assert world.placement.arm("landing_pad") is False

    def test_unknown_building(self):
        engine, world = _world()
        assert world.placement.arm("castle") is False
        assert world.placement.can_afford("castle") is False

    def test_cancel(self):
        engine, world = _world()
        assert world.placement.cancel_placement() is False
        world.placement.arm("solar_panel")
        assert world.placement.cancel_placement() is True


class TestRemoval:
    def test_remove_releases_everything(self):
        engine, world = _world()
        removed = []
        world.bus.subscribe(BUILDING_REMOVED, lambda name, data: removed.append(data["building"]))
        building = world.placement.place_model_on_click("laboratory", (40.0, 0.0, 40.0))
        handle = building.obstacle
        assert world.placement.remove_building(building)
        assert world.resources.record(building) is None
        assert world.navigation.crowd.agent(handle) is None
        assert building.disposed
        assert building.service_area is None
        assert world.buildings == []
        assert world.placement.remove_building(building) is False
        engine.step()
        assert removed == [building]

    def test_building_at(self):
        engine, world = _world()
        building = world.placement.place_model_on_click("solar_panel", (40.0, 0.0, 40.0))
        assert world.placement.building_at((42.0, 0.0, 41.0)) is building
        assert world.placement.building_at((0.0, 0.0, 0.0)) is None


class TestRefills:
    def _water_plant(self):
        engine, world = _world()
        world.placement.place_model_on_click("solar_panel", (-40.0, 0.0, -40.0))
        plant = world.placement.place_model_on_click("base_large", (10.0, 0.0, 10.0))
        for _ in range(20):
            engine.step(1.0)
        return engine, world, plant

    def test_check_refill_options(self):
        engine, world, plant = self._water_plant()
        options = world.placement.check_refill_options(plant)
        assert options.can_refill_astronaut
        assert options.can_refill_rover

    def test_refill_astronaut(self):
        engine, world, plant = self._water_plant()
        astronaut = world.agents.selected
        astronaut.set_resource(WATER, 90.0)
        assert world.placement.refill_astronaut_from_building(plant) == pytest.approx(10.0)
        assert astronaut.get_resources()[WATER] == pytest.approx(100.0)

    def test_refill_out_of_range(self):
        engine, world = _world()
        world.placement.place_model_on_click("solar_panel", (-40.0, 0.0, -40.0))
        plant = world.placement.place_model_on_click("base_large", (80.0, 0.0, 80.0))
        engine.step(1.0)
        assert world.placement.check_refill_options(plant).can_refill_astronaut is False
        assert world.placement.refill_astronaut_from_building(plant) == 0.0
        assert world.placement.refill_rover_from_building(plant) == 0.0

    def test_refill_rover(self):
        engine, world, plant = self._water_plant()
        assert world.placement.refill_rover_from_building(plant) > 0.0
        assert world.agents.rover.has_resources(WATER)


class TestLandingPad:
    def test_rocket_lands_then_victory(self):
        engine, world = _world()
        world.resources.add_rocks(30)
        won = []
        world.bus.subscribe(GAME_WON, lambda name, data: won.append(data["building"]))
        pad = world.placement.place_model_on_click("landing_pad", (60.0, 0.0, 60.0))
        assert pad is not None
        assert world.resources.get_available_rocks() == 10.0

        for _ in range(5):
            engine.step(1.0)
        assert not pad.has_rocket
        engine.step(1.0)
        assert pad.has_rocket

        for _ in range(4):
            engine.step(1.0)
        assert won == []
        engine.step(1.0)
        assert won == [pad]
        assert world.outcome == "won"

    def test_removed_pad_never_wins(self):
        engine, world = _world()
        world.resources.add_rocks(30)
        pad = world.placement.place_model_on_click("landing_pad", (60.0, 0.0, 60.0))
        engine.step(1.0)
        world.placement.remove_building(pad)
        for _ in range(15):
            engine.step(1.0)
        assert not pad.has_rocket
        assert world.outcome is None


def test_initial_rocks_from_config():
    engine, world = _world()
    assert world.resources.get_available_resource(ROCKS) == 10.0
