"""Building placement: preview validity, confirmation, removal and refills."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lunar_colony import vec
from lunar_colony.catalog import BuildingCatalog, BuildingSpec
from lunar_colony.config import EconomyConfig, PlacementConfig
from lunar_colony.navigation import AgentHandle, Navigation
from lunar_colony.registry import AgentRegistry
from lunar_colony.resources import ResourceManager
from lunar_colony.rocks import RockManager
from lunar_colony.signals import BUILDING_PLACED, BUILDING_REMOVED, GAME_WON, SignalBus
from lunar_colony.tasks import TaskQueue
from lunar_colony.types import ENERGY, FOOD, OXYGEN, WATER, Vec3

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut

log = logging.getLogger(__name__)

Basis = tuple[Vec3, Vec3, Vec3]

RADIUS_COLORS: dict[str, tuple[float, float, float]] = {
    OXYGEN: (0.2, 0.6, 1.0),
    FOOD: (0.9, 0.6, 0.2),
    WATER: (0.2, 0.4, 0.9),
}

_FORWARD: Vec3 = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class BoundingBox:
    minimum: Vec3
    maximum: Vec3

    @classmethod
    def around(cls, position: Vec3, size: tuple[float, float, float]) -> BoundingBox:
        """Box centred on *position* horizontally, standing on it vertically."""
        w, h, d = size
        x, y, z = position
        return cls((x - w / 2, y, z - d / 2), (x + w / 2, y + h, z + d / 2))

    def intersects(self, other: BoundingBox) -> bool:
        return all(
            self.minimum[i] <= other.maximum[i] and other.minimum[i] <= self.maximum[i]
            for i in range(3)
        )


@dataclass(frozen=True)
class ServiceArea:
    center: Vec3
    radius: float
    color: tuple[float, float, float]


@dataclass(frozen=True)
class RefillOptions:
    can_refill_astronaut: bool
    can_refill_rover: bool


@dataclass(eq=False)
class Building:
    """A placed building.

    Attributes:
        spec: Catalogue definition.
        position: Ground position of the footprint centre.
        basis: ``(right, up, forward)`` aligned to the terrain normal.
        bounding_box: Axis-aligned box used for overlap checks.
        service_area: Refill radius indicator, for life-support producers.
        obstacle: Crowd obstacle handle.
        has_rocket: Landing pads only; set once the rocket touches down.
        disposed: Set on removal.
    """

    spec: BuildingSpec
    position: Vec3
    basis: Basis
    bounding_box: BoundingBox
    service_area: ServiceArea | None = None
    obstacle: AgentHandle | None = None
    has_rocket: bool = False
    disposed: bool = False

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def resource(self) -> str | None:
        return self.spec.resource

    def __repr__(self) -> str:
        return f"Building({self.spec.key!r}, {self.position})"


@dataclass
class Preview:
    """The armed building following the pointer."""

    spec: BuildingSpec
    position: Vec3 | None = None
    basis: Basis = ((1.0, 0.0, 0.0), vec.UP, _FORWARD)
    valid: bool = False
    reason: str | None = "no position"


def surface_basis(normal: Vec3) -> Basis:
    """Right/up/forward axes with up along *normal*. Flat ground gives the identity."""
    up = vec.normalize(normal)
    right = vec.normalize(vec.cross(up, _FORWARD))
    forward = vec.normalize(vec.cross(right, up))
    return (right, up, forward)


def slope_of(normal: Vec3) -> float:
    cos_angle = vec.dot(vec.normalize(normal), vec.UP)
    return math.acos(max(-1.0, min(1.0, cos_angle)))


class PlacementController:
    def __init__(
        self,
        catalog: BuildingCatalog,
        resources: ResourceManager,
        rocks: RockManager,
        agents: AgentRegistry,
        navigation: Navigation,
        tasks: TaskQueue,
        bus: SignalBus | None = None,
        config: PlacementConfig | None = None,
        economy: EconomyConfig | None = None,
        buildings: list[Building] | None = None,
    ) -> None:
        self.catalog = catalog
        self.resources = resources
        self.rocks = rocks
        self.agents = agents
        self.navigation = navigation
        self.tasks = tasks
        self.bus = bus
        self.config = config or PlacementConfig()
        self.economy = economy or resources.config
        self.buildings: list[Building] = buildings if buildings is not None else []
        self.preview: Preview | None = None
        self.won = False

    def _alert(self, message: str, level: str = "warning") -> None:
        if self.bus is not None:
            self.bus.alert(message, level)

    def can_afford(self, key: str) -> bool:
        if not self.catalog.has(key):
            return False
        return self.resources.get_available_rocks() >= self.catalog.get(key).rocks_needed

    # -- preview --------------------------------------------------------

    def arm(self, key: str) -> bool:
        """Start previewing *key*. Arming the building already armed cancels it."""
        if self.preview is not None and self.preview.spec.key == key:
            self.cancel_placement()
            return False
        if not self.catalog.has(key):
            log.warning("unknown building %r", key)
            return False
        if not self.can_afford(key):
            log.warning("cannot afford %r", key)
            self._alert(f"Not enough rocks for {self.catalog.get(key).name}")
            return False
        self.preview = Preview(spec=self.catalog.get(key))
        return True

    def cancel_placement(self) -> bool:
        if self.preview is None:
            return False
        self.preview = None
        return True

    def validate(self, spec: BuildingSpec, position: Vec3, normal: Vec3) -> str | None:
        """Reason *spec* cannot stand at *position*, or None if it can."""
        if slope_of(normal) > self.config.max_slope:
            return "slope too steep"
        box = BoundingBox.around(position, spec.size)
        if any(box.intersects(b.bounding_box) for b in self.buildings):
            return "overlaps a building"
        for astronaut in self.agents.on_foot():
            if vec.horizontal_distance(position, astronaut.position) < self.config.astronaut_clearance:
                return "too close to an astronaut"
        rover = self.agents.rover
        if rover is not None and vec.horizontal_distance(position, rover.position) < self.config.rover_clearance:
            return "too close to the rover"
        for rock in self.rocks.get_rocks():
            if vec.horizontal_distance(position, rock.position) < self.config.rock_clearance:
                return "too close to a rock"
        return None

    def update_preview(self, point: Vec3) -> Preview | None:
        """Move the armed building to the ground under *point*."""
        preview = self.preview
        if preview is None:
            return None
        x, z = point[0], point[2]
        ground = self.navigation.ground_height(x, z)
        if ground is None or self.navigation.terrain is None:
            preview.position = None
            preview.valid = False
            preview.reason = "off terrain"
            return preview
        normal = self.navigation.terrain.normal_at(x, z)
        preview.position = (x, ground, z)
        preview.basis = surface_basis(normal)
        preview.reason = self.validate(preview.spec, preview.position, normal)
        preview.valid = preview.reason is None
        return preview

    def confirm_placement(self) -> Building | None:
        preview = self.preview
        if preview is None:
            return None
        if not preview.valid or preview.position is None:
            log.warning("invalid placement for %s: %s", preview.spec.name, preview.reason)
            return None
        # Agents and rocks may have moved since the preview was last updated.
        x, _, z = preview.position
        normal = self.navigation.terrain.normal_at(x, z) if self.navigation.terrain is not None else vec.UP
        preview.reason = self.validate(preview.spec, preview.position, normal)
        preview.valid = preview.reason is None
        if not preview.valid:
            log.warning("invalid placement for %s: %s", preview.spec.name, preview.reason)
            return None
        if not self.resources.consume_rocks(preview.spec.rocks_needed):
            log.warning("not enough rocks for %s", preview.spec.name)
            self._alert(f"Not enough rocks for {preview.spec.name}")
            return None
        self.preview = None
        return self._build(preview.spec, preview.position, preview.basis)

    def place_model_on_click(self, key: str, point: Vec3) -> Building | None:
        """Arm, position and confirm in one step."""
        self.cancel_placement()
        if not self.arm(key):
            return None
        preview = self.update_preview(point)
        building = self.confirm_placement()
        if building is None:
            log.warning("could not place %s: %s", key, preview.reason if preview else "not armed")
            self.cancel_placement()
        return building

    def _build(self, spec: BuildingSpec, position: Vec3, basis: Basis) -> Building:
        building = Building(
            spec=spec,
            position=position,
            basis=basis,
            bounding_box=BoundingBox.around(position, spec.size),
        )
        if spec.resource is not None:
            radius = spec.width * self.economy.service_radius_factor
            self.resources.register_building(
                building,
                spec.resource,
                self.economy.production_rates[spec.resource],
                radius,
                spec.energy_consumption,
            )
            if spec.resource != ENERGY:
                building.service_area = ServiceArea(position, radius, RADIUS_COLORS[spec.resource])
        half = spec.width / 2.0
        building.obstacle = self.navigation.add_obstacle(
            position, half, spec.size[1],
            collision_query_range=half,
            path_optimization_range=5.0,
            separation_weight=3.0,
            visual=building,
        )
        self.buildings.append(building)
        log.info("placed %s at %s", spec.name, position)
        if self.bus is not None:
            self.bus.publish(BUILDING_PLACED, building=building)
        if spec.key == self.config.landing_pad:
            self.tasks.schedule("rocket_descent", self.config.rocket_descent,
                                lambda: self._rocket_landed(building))
        return building

    def _rocket_landed(self, pad: Building) -> None:
        if pad.disposed:
            return
        pad.has_rocket = True
        log.info("rocket landed on %s", pad.name)
        self._alert("The Artemis rocket has landed", "info")
        self.tasks.schedule("victory", self.config.victory_delay, lambda: self._declare_victory(pad))

    def _declare_victory(self, pad: Building) -> None:
        if self.won or pad.disposed:
            return
        self.won = True
        log.info("colony complete: rocket ready on %s", pad.name)
        if self.bus is not None:
            self.bus.publish(GAME_WON, building=pad)

    # -- removal --------------------------------------------------------

    def remove_building(self, building: Building) -> bool:
        if building not in self.buildings:
            return False
        self.buildings.remove(building)
        self.resources.unregister_building(building)
        self.navigation.remove_agent(building.obstacle)
        building.obstacle = None
        building.service_area = None
        building.disposed = True
        log.info("removed %s", building.name)
        if self.bus is not None:
            self.bus.publish(BUILDING_REMOVED, building=building)
        return True

    def building_at(self, point: Vec3) -> Building | None:
        for building in self.buildings:
            box = building.bounding_box
            if box.minimum[0] <= point[0] <= box.maximum[0] and box.minimum[2] <= point[2] <= box.maximum[2]:
                return building
        return None

    # -- refills --------------------------------------------------------

    def check_refill_options(self, building: Building) -> RefillOptions:
        return RefillOptions(
            can_refill_astronaut=self.resources.can_refill_astronaut_from_building(building) is not None,
            can_refill_rover=self.resources.can_refill_rover_from_building(building) is not None,
        )

    def refill_astronaut_from_building(self, building: Building) -> float:
        astronaut: Astronaut | None = self.resources.can_refill_astronaut_from_building(building)
        if astronaut is None:
            self._alert(f"No astronaut in range of {building.name}")
            return 0.0
        amount = self.resources.refill_astronaut_from_building(building)
        if amount <= 0:
            self._alert(f"{building.name} has nothing to give")
        return amount

    def refill_rover_from_building(self, building: Building) -> float:
        if self.resources.can_refill_rover_from_building(building) is None:
            self._alert(f"Rover not in range of {building.name}")
            return 0.0
        amount = self.resources.refill_rover_from_building(building)
        if amount <= 0:
            self._alert(f"{building.name} has nothing to give")
        return amount
