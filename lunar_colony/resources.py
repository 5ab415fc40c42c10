"""ResourceManager: building production, energy gating and refills."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from lunar_colony import energy, vec
from lunar_colony.config import EconomyConfig
from lunar_colony.signals import ENERGY_RESTORED, ENERGY_SHORTAGE, SignalBus
from lunar_colony.store import ProductionRecord, ResourceStore
from lunar_colony.types import ENERGY, FOOD, LIFE_SUPPORT, OXYGEN, ROCKS, WATER, Vec3

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut
    from lunar_colony.game import GameWorld
    from lunar_colony.registry import AgentRegistry
    from lunar_colony.rover import Rover
    from lunar_colony.types import TickContext

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceStats:
    energy: float
    oxygen: float
    food: float
    water: float
    rocks: float
    energy_production: float
    energy_required: float
    energy_consumption: float
    oxygen_production: float
    food_production: float
    water_production: float
    has_enough_energy: bool


class ResourceManager:
    """Facade over the global store and the building production records.

    None of the public operations raise on shortage: consumption returns
    what was actually available and rock purchases return False.
    """

    def __init__(
        self,
        store: ResourceStore | None = None,
        config: EconomyConfig | None = None,
        agents: AgentRegistry | None = None,
    ) -> None:
        self.config = config or EconomyConfig()
        self.store = store or ResourceStore(self.config.initial_resources)
        self.agents = agents

    # -- registration ---------------------------------------------------

    def register_building(
        self,
        building: Any,
        resource: str,
        rate: float,
        radius: float,
        energy_consumption: float = 0.0,
    ) -> ProductionRecord:
        if resource == ENERGY:
            energy_consumption = 0.0
        record = ProductionRecord(
            building=building,
            resource=resource,
            rate=rate,
            radius=radius,
            energy_consumption=energy_consumption,
            is_active=resource == ENERGY,
        )
        self.store.records[building] = record
        log.debug("registered %s producing %s at %.2f/s", building, resource, rate)
        return record

    def unregister_building(self, building: Any) -> bool:
        """Drop *building*'s record. Unknown buildings are ignored."""
        return self.store.records.pop(building, None) is not None

    def record(self, building: Any) -> ProductionRecord | None:
        return self.store.records.get(building)

    def get_building_resource_type(self, building: Any) -> str | None:
        record = self.store.records.get(building)
        return record.resource if record is not None else None

    # -- energy ---------------------------------------------------------

    @property
    def energy_production(self) -> float:
        return energy.total_production(self.store.records.values())

    @property
    def energy_required(self) -> float:
        return energy.total_required(self.store.records.values())

    @property
    def has_enough_energy(self) -> bool:
        return self.energy_production >= self.energy_required

    def update(self, dt: float) -> None:
        """Advance production by *dt* seconds."""
        for building in [b for b in self.store.records if getattr(b, "disposed", False)]:
            del self.store.records[building]

        records = list(self.store.records.values())
        if self.has_enough_energy:
            for record in records:
                record.is_active = True
        else:
            energy.allocate(records, self.energy_production)

        for record in records:
            if record.is_active:
                self.store.add(record.resource, record.rate * dt)

    # -- store ----------------------------------------------------------

    def consume_resource(self, resource: str, amount: float) -> float:
        return self.store.take(resource, amount)

    def add_resource(self, resource: str, amount: float) -> float:
        return self.store.add(resource, amount)

    def get_available_resource(self, resource: str) -> float:
        return self.store.get(resource)

    def add_rocks(self, amount: float) -> None:
        self.store.add(ROCKS, amount)

    def consume_rocks(self, amount: float) -> bool:
        """Deduct *amount* rocks if all of them are available."""
        if self.store.get(ROCKS) < amount:
            return False
        self.store.take(ROCKS, amount)
        return True

    def get_available_rocks(self) -> float:
        return self.store.get(ROCKS)

    # -- refills --------------------------------------------------------

    def _serves(self, building: Any) -> ProductionRecord | None:
        record = self.store.records.get(building)
        if record is None or not record.is_active or record.resource not in LIFE_SUPPORT:
            return None
        return record

    def is_entity_in_range(self, position: Vec3, building: Any) -> bool:
        record = self.store.records.get(building)
        if record is None:
            return False
        return vec.distance(position, building.position) <= record.radius

    def can_refill_astronaut_from_building(self, building: Any) -> Astronaut | None:
        """Nearest living astronaut inside an active building's service radius."""
        record = self._serves(building)
        if record is None or self.agents is None:
            return None
        best = None
        best_dist = 0.0
        for astronaut in self.agents.living():
            d = vec.distance(astronaut.position, building.position)
            if d <= record.radius and (best is None or d < best_dist):
                best, best_dist = astronaut, d
        return best

    def refill_astronaut_from_building(self, building: Any) -> float:
        astronaut = self.can_refill_astronaut_from_building(building)
        if astronaut is None:
            return 0.0
        resource = self.store.records[building].resource
        wanted = min(self.config.astronaut_refill, astronaut.pool.room(resource))
        drawn = self.consume_resource(resource, wanted)
        astronaut.refill(resource, drawn)
        log.debug("refilled %s with %.1f %s", astronaut.name, drawn, resource)
        return drawn

    def can_refill_rover_from_building(self, building: Any) -> Rover | None:
        record = self._serves(building)
        if record is None or self.agents is None or self.agents.rover is None:
            return None
        rover = self.agents.rover
        if vec.distance(rover.position, building.position) > record.radius:
            return None
        return rover

    def refill_rover_from_building(self, building: Any) -> float:
        """Fill the rover, then top up each astronaut riding in it."""
        rover = self.can_refill_rover_from_building(building)
        if rover is None:
            return 0.0
        resource = self.store.records[building].resource
        wanted = min(self.config.rover_refill, rover.pool.room(resource))
        total = self.consume_resource(resource, wanted)
        rover.refill_resource(resource, total)
        for occupant in rover.occupants:
            wanted = min(self.config.occupant_refill, occupant.pool.room(resource))
            drawn = self.consume_resource(resource, wanted)
            occupant.refill(resource, drawn)
            total += drawn
        return total

    # -- stats ----------------------------------------------------------

    def _active_rate(self, resource: str) -> float:
        return sum(r.rate for r in self.store.records.values() if r.resource == resource and r.is_active)

    def get_resource_stats(self) -> ResourceStats:
        records = self.store.records.values()
        return ResourceStats(
            energy=self.store.get(ENERGY),
            oxygen=self.store.get(OXYGEN),
            food=self.store.get(FOOD),
            water=self.store.get(WATER),
            rocks=self.store.get(ROCKS),
            energy_production=self.energy_production,
            energy_required=self.energy_required,
            energy_consumption=sum(
                r.energy_consumption for r in records if r.is_active and not r.is_energy
            ),
            oxygen_production=self._active_rate(OXYGEN),
            food_production=self._active_rate(FOOD),
            water_production=self._active_rate(WATER),
            has_enough_energy=self.has_enough_energy,
        )


def make_economy_system(
    resources: ResourceManager,
    bus: SignalBus | None = None,
) -> Callable[[GameWorld, TickContext], None]:
    """Return a system that runs production and reports energy transitions."""
    was_enough = True

    def economy_system(world: GameWorld, ctx: TickContext) -> None:
        nonlocal was_enough
        resources.update(ctx.dt)
        enough = resources.has_enough_energy
        if enough == was_enough:
            return
        was_enough = enough
        if enough:
            log.info("energy supply restored")
            if bus is not None:
                bus.publish(ENERGY_RESTORED)
        else:
            log.warning(
                "energy shortage: %.1f produced, %.1f required",
                resources.energy_production, resources.energy_required,
            )
            if bus is not None:
                bus.publish(
                    ENERGY_SHORTAGE,
                    production=resources.energy_production,
                    required=resources.energy_required,
                )
                bus.alert("Not enough energy: some buildings are shut down")

    return economy_system
