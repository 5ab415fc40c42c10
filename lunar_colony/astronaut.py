"""Astronaut: life support, death, and rover boarding."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from lunar_colony import vec
from lunar_colony.agent import NavigationAgent
from lunar_colony.config import AstronautConfig
from lunar_colony.navigation import Navigation
from lunar_colony.pools import ResourcePool
from lunar_colony.targets import InteractAt
from lunar_colony.types import FOOD, LIFE_SUPPORT, OXYGEN, WATER, Vec3

if TYPE_CHECKING:
    from lunar_colony.rocks import Rock
    from lunar_colony.rover import Rover

log = logging.getLogger(__name__)

SUFFOCATION = "suffocation"
STARVATION = "starvation and dehydration"


class Astronaut(NavigationAgent):
    def __init__(
        self,
        name: str,
        position: Vec3,
        navigation: Navigation,
        config: AstronautConfig | None = None,
    ) -> None:
        config = config or AstronautConfig()
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
            turn_rate=config.turn_rate,
        )
        self.config = config
        self.pool = ResourcePool.full(config.capacity)
        self.is_alive = True
        self.cause_of_death: str | None = None
        self.rover: Rover | None = None
        self._critical: set[str] = set()

    def can_walk(self) -> bool:
        if not self.is_alive:
            log.debug("%s is dead; walk dropped", self.name)
            return False
        if self.rover is not None:
            log.debug("%s is inside the rover; walk dropped", self.name)
            return False
        return True

    # -- resources ------------------------------------------------------

    def get_resources(self) -> dict[str, float]:
        return self.pool.snapshot()

    def set_resource(self, resource: str, value: float) -> None:
        self.pool.set(resource, value)

    def refill(self, resource: str, amount: float) -> float:
        return self.pool.add(resource, amount)

    def consume(self, dt: float) -> None:
        """Use up life support for *dt* seconds.

        While embarked the rover's supply is drawn first.
        """
        for resource, rate in self.config.consumption_rates.items():
            needed = rate * dt
            if self.rover is not None:
                needed -= self.rover.consume_resource(resource, needed)
            self.pool.take(resource, needed)

    def check_critical(self) -> list[str]:
        """Resources that dropped below their threshold since the last check."""
        crossed = []
        for resource in LIFE_SUPPORT:
            threshold = self.config.critical_thresholds.get(resource)
            if threshold is None:
                continue
            if self.pool.get(resource) < threshold:
                if resource not in self._critical:
                    self._critical.add(resource)
                    crossed.append(resource)
            else:
                self._critical.discard(resource)
        return crossed

    def is_critical(self, resource: str) -> bool:
        return resource in self._critical

    def check_death(self) -> str | None:
        """Kill the astronaut if a lethal condition holds.

        Returns the cause only on the transition; a dead astronaut is never
        processed again.
        """
        if not self.is_alive:
            return None
        cause = None
        if self.pool.get(OXYGEN) <= 0.0:
            cause = SUFFOCATION
        elif self.pool.get(FOOD) <= 0.0 and self.pool.get(WATER) <= 0.0:
            cause = STARVATION
        if cause is None:
            return None
        self.stop_walk()
        if self.rover is not None:
            self.rover.remove_occupant(self)
            self.rover = None
        self.is_alive = False
        self.cause_of_death = cause
        log.info("%s died of %s", self.name, cause)
        return cause

    # -- walking --------------------------------------------------------

    def walk_to_rover(self, rover: Rover, callback: Callable[[], None] | None = None) -> bool:
        target = InteractAt(
            position=rover.position,
            radius=self.config.rover_interaction_radius,
            action=lambda agent: self.enter_rover(rover),
            kind="rover",
        )
        return self.walk_to(target, callback)

    def walk_to_rock(
        self,
        rock: Rock,
        action: Callable[[NavigationAgent], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> bool:
        target = InteractAt(
            position=rock.position,
            radius=rock.kind.interaction_radius,
            action=action,
            kind="rock",
            on_cancel=on_cancel,
        )
        return self.walk_to(target)

    # -- rover ----------------------------------------------------------

    def enter_rover(self, rover: Rover) -> bool:
        if self.rover is not None or not self.is_alive:
            return False
        self.stop_walk()
        self.rover = rover
        rover.add_occupant(self)
        self.position = rover.position
        log.info("%s boarded %s", self.name, rover.name)
        return True

    def exit_rover(self) -> bool:
        """Step out beside the rover, to its right."""
        rover = self.rover
        if rover is None:
            return False
        side = vec.scale(vec.right_of(rover.yaw), self.config.exit_distance)
        exit_point = self.navigation.snap_to_ground(vec.add(rover.position, side), self.config.exit_lift)
        rover.remove_occupant(self)
        self.rover = None
        self.position = exit_point
        self.handle = self.navigation.add_agent(exit_point, self.params, self)
        self.teleport(exit_point)
        log.info("%s left %s", self.name, rover.name)
        return True
