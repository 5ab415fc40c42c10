"""Harvestable rocks: spawning, digging and removal."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lunar_colony import vec
from lunar_colony.agent import DIG_ANIMATION, IDLE_ANIMATION, NavigationAgent
from lunar_colony.config import RockConfig, RockKind
from lunar_colony.navigation import AgentHandle, Navigation
from lunar_colony.registry import AgentRegistry
from lunar_colony.resources import ResourceManager
from lunar_colony.signals import ROCK_DUG, SignalBus
from lunar_colony.tasks import TaskQueue
from lunar_colony.types import Vec3

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut

log = logging.getLogger(__name__)

SMALL = "small"
LARGE = "large"


@dataclass(eq=False)
class Rock:
    """A diggable rock node.

    Attributes:
        position: Ground position.
        size: ``"small"`` or ``"large"``.
        kind: Size parameters (value, dig time, radii).
        obstacle: Crowd obstacle handle, None when navigation was unavailable.
        is_being_dug: Set while an astronaut is assigned to it.
    """

    position: Vec3
    size: str
    kind: RockKind
    obstacle: AgentHandle | None = None
    is_being_dug: bool = False

    @property
    def rock_value(self) -> int:
        return self.kind.value

    @property
    def dig_time(self) -> float:
        return self.kind.dig_time


class RockManager:
    def __init__(
        self,
        navigation: Navigation,
        resources: ResourceManager,
        agents: AgentRegistry,
        tasks: TaskQueue,
        config: RockConfig | None = None,
        rng: random.Random | None = None,
        bus: SignalBus | None = None,
        buildings: list[Any] | None = None,
    ) -> None:
        self.navigation = navigation
        self.resources = resources
        self.agents = agents
        self.tasks = tasks
        self.config = config or RockConfig()
        self.rng = rng or random.Random()
        self.bus = bus
        self.buildings = buildings if buildings is not None else []
        self._rocks: list[Rock] = []

    def get_rocks(self) -> list[Rock]:
        return list(self._rocks)

    def __contains__(self, rock: Rock) -> bool:
        return rock in self._rocks

    def _kind(self, size: str) -> RockKind:
        return self.config.small if size == SMALL else self.config.large

    def _sizes(self, count: int) -> list[str]:
        small = math.floor(count * self.config.small_fraction)
        return [SMALL] * small + [LARGE] * (count - small)

    def is_clear(self, position: Vec3) -> bool:
        """True if *position* keeps the minimum spacing from everything placed."""
        spacing = self.config.min_spacing
        occupied = [a.position for a in self.agents.on_foot()]
        if self.agents.rover is not None:
            occupied.append(self.agents.rover.position)
        occupied.extend(r.position for r in self._rocks)
        occupied.extend(b.position for b in self.buildings)
        return all(vec.horizontal_distance(position, p) >= spacing for p in occupied)

    def _try_spawn(self, size: str, trials: int, sample: Any) -> Rock | None:
        for _ in range(trials):
            x, z = sample()
            y = self.navigation.ground_height(x, z)
            if y is None:
                continue
            position = (x, y, z)
            if self.is_clear(position):
                return self.create_rock(position, size)
        return None

    def scatter_rocks_across_map(self, count: int) -> list[Rock]:
        """Spread *count* rocks over the terrain. Positions that never clear are skipped."""
        if self.navigation.terrain is None:
            log.warning("no terrain; cannot scatter rocks")
            return []
        min_x, max_x, min_z, max_z = self.navigation.terrain.bounds
        pad = self.config.padding

        def sample() -> tuple[float, float]:
            return (self.rng.uniform(min_x + pad, max_x - pad),
                    self.rng.uniform(min_z + pad, max_z - pad))

        created = []
        for size in self._sizes(count):
            rock = self._try_spawn(size, self.config.map_trials, sample)
            if rock is not None:
                created.append(rock)
        log.info("scattered %d of %d rocks", len(created), count)
        return created

    def explode_rocks(self, center: Vec3, count: int, radius: float) -> list[Rock]:
        """Throw *count* rocks into a disc of *radius* around *center*."""

        def sample() -> tuple[float, float]:
            angle = self.rng.uniform(0.0, 2.0 * math.pi)
            dist = self.rng.uniform(0.0, radius)
            return (center[0] + math.cos(angle) * dist,
                    center[2] + math.sin(angle) * dist)

        created = []
        for size in self._sizes(count):
            rock = self._try_spawn(size, self.config.burst_trials, sample)
            if rock is not None:
                created.append(rock)
        return created

    def create_rock(self, position: Vec3, size: str = SMALL) -> Rock:
        kind = self._kind(size)
        rock = Rock(position=position, size=size, kind=kind)
        rock.obstacle = self.navigation.add_obstacle(
            position, kind.obstacle_radius, kind.height, visual=rock,
        )
        self._rocks.append(rock)
        return rock

    def find_rock_near(self, position: Vec3, tolerance: float = 1.0) -> Rock | None:
        best = None
        best_dist = tolerance
        for rock in self._rocks:
            d = vec.horizontal_distance(position, rock.position)
            if d <= best_dist:
                best, best_dist = rock, d
        return best

    def start_digging(self, astronaut: Astronaut, rock: Rock) -> bool:
        """Send *astronaut* to dig *rock*. No-op if the rock is already claimed."""
        if rock.is_being_dug or rock not in self._rocks:
            return False
        rock.is_being_dug = True
        started = astronaut.walk_to_rock(
            rock,
            action=lambda agent: self._begin_dig(agent, rock),
            on_cancel=lambda: self._release(rock),
        )
        if not started:
            rock.is_being_dug = False
        return started

    def _release(self, rock: Rock) -> None:
        rock.is_being_dug = False

    def _begin_dig(self, agent: NavigationAgent, rock: Rock) -> None:
        agent.face(rock.position)
        agent.animation = DIG_ANIMATION
        self.tasks.schedule("dig", rock.dig_time, lambda: self._finish_dig(agent, rock))

    def _finish_dig(self, agent: NavigationAgent, rock: Rock) -> None:
        if agent.animation == DIG_ANIMATION:
            agent.animation = IDLE_ANIMATION
        if rock not in self._rocks:
            return
        self.resources.add_rocks(rock.rock_value)
        self.remove_rock(rock)
        log.info("%s dug a %s rock (+%d)", agent.name, rock.size, rock.rock_value)
        if self.bus is not None:
            self.bus.publish(ROCK_DUG, agent=agent, rock=rock, value=rock.rock_value)

    def remove_rock(self, rock: Rock) -> bool:
        if rock not in self._rocks:
            return False
        self._rocks.remove(rock)
        self.navigation.remove_agent(rock.obstacle)
        rock.obstacle = None
        rock.is_being_dug = False
        return True

    def dispose(self) -> None:
        for rock in list(self._rocks):
            self.remove_rock(rock)
