"""The colony rover: a vehicle with its own supply pool."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from lunar_colony.agent import NavigationAgent, WalkState
from lunar_colony.config import RoverConfig
from lunar_colony.navigation import Navigation
from lunar_colony.pools import ResourcePool
from lunar_colony.targets import WalkTarget
from lunar_colony.types import Vec3

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut


class Rover(NavigationAgent):
    """Carries astronauts and up to ``capacity`` of each resource. Never dies."""

    is_alive = True

    def __init__(
        self,
        name: str,
        position: Vec3,
        navigation: Navigation,
        config: RoverConfig | None = None,
    ) -> None:
        config = config or RoverConfig()
        super().__init__(
            name,
            position,
            navigation,
            config.agent,
            arrival_distance=config.arrival_distance,
            stuck_threshold=config.stuck_threshold,
            stuck_epsilon=config.stuck_epsilon,
            settle_distance=config.settle_distance,
            settle_speed=config.settle_speed,
            turn_rate=config.heading_smoothing,
        )
        self.config = config
        self.pool = ResourcePool.empty(config.capacity)
        self.occupants: list[Astronaut] = []

    def drive_to(
        self,
        target: WalkTarget | Vec3,
        callback: Callable[[], None] | None = None,
    ) -> bool:
        return self.walk_to(target, callback, arrival_distance=self.config.arrival_distance)

    def update_walk(self, dt: float) -> WalkState | None:
        outcome = super().update_walk(dt)
        for occupant in self.occupants:
            occupant.position = self.position
        return outcome

    def add_occupant(self, astronaut: Astronaut) -> None:
        if astronaut not in self.occupants:
            self.occupants.append(astronaut)

    def remove_occupant(self, astronaut: Astronaut) -> None:
        if astronaut in self.occupants:
            self.occupants.remove(astronaut)

    def get_resources(self) -> dict[str, float]:
        return self.pool.snapshot()

    def consume_resource(self, resource: str, amount: float) -> float:
        return self.pool.take(resource, amount)

    def refill_resource(self, resource: str, amount: float) -> float:
        return self.pool.add(resource, amount)

    def has_resources(self, resource: str | None = None) -> bool:
        return self.pool.has_any(resource)
