"""GameWorld composition root and the default system pipeline."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Sequence

from lunar_colony.astronaut import Astronaut
from lunar_colony.catalog import BuildingCatalog, make_default_catalog
from lunar_colony.config import GameConfig
from lunar_colony.crowd import OpenFieldCrowd
from lunar_colony.engine import Engine
from lunar_colony.handlers import register_handlers
from lunar_colony.navigation import CrowdNavigator, Navigation, Terrain
from lunar_colony.placement import Building, PlacementController
from lunar_colony.queue import CommandQueue, make_command_system
from lunar_colony.registry import AgentRegistry
from lunar_colony.resources import ResourceManager, ResourceStats, make_economy_system
from lunar_colony.rocks import RockManager
from lunar_colony.rover import Rover
from lunar_colony.signals import GAME_OVER, GAME_WON, SignalBus, make_signal_system
from lunar_colony.systems import make_life_support_system, make_navigation_system
from lunar_colony.tasks import TaskQueue, make_task_system
from lunar_colony.terrain import FlatTerrain
from lunar_colony.types import Vec3

log = logging.getLogger(__name__)

ENERGY_CHECK_INTERVAL = 5.0

DEFAULT_ASTRONAUTS: tuple[tuple[str, Vec3], ...] = (("Astronaut", (0.0, 0.0, 0.0)),)
DEFAULT_ROVER_POSITION: Vec3 = (12.0, 0.0, 0.0)


@dataclass
class GameWorld:
    """Everything one session owns. Components receive only what they use."""

    config: GameConfig
    navigation: Navigation
    resources: ResourceManager
    agents: AgentRegistry
    rocks: RockManager
    placement: PlacementController
    tasks: TaskQueue
    bus: SignalBus
    queue: CommandQueue
    catalog: BuildingCatalog
    rng: random.Random
    buildings: list[Building] = field(default_factory=list)
    outcome: str | None = None

    def enqueue(self, cmd: Any) -> None:
        self.queue.enqueue(cmd)

    def get_resource_stats(self) -> ResourceStats:
        return self.resources.get_resource_stats()


def build_game(
    config: GameConfig | None = None,
    *,
    terrain: Terrain | None = None,
    crowd: CrowdNavigator | None = None,
    with_crowd: bool = True,
    astronauts: Sequence[tuple[str, Vec3]] = DEFAULT_ASTRONAUTS,
    rover_position: Vec3 | None = DEFAULT_ROVER_POSITION,
    rock_count: int = 0,
    stop_on_outcome: bool = False,
) -> Engine:
    """Assemble a session and return its engine; the world is ``engine.world``.

    Pass ``with_crowd=False`` to start without navigation (walk commands are
    then dropped until a crowd is attached).
    """
    config = config or GameConfig()
    rng = random.Random(config.seed)
    terrain = terrain if terrain is not None else FlatTerrain()
    if crowd is None and with_crowd:
        crowd = OpenFieldCrowd(terrain)
    navigation = Navigation(terrain, crowd)

    agents = AgentRegistry()
    bus = SignalBus()
    tasks = TaskQueue()
    queue = CommandQueue()
    catalog = make_default_catalog()
    buildings: list[Building] = []
    resources = ResourceManager(config=config.economy, agents=agents)
    rocks = RockManager(
        navigation, resources, agents, tasks,
        config=config.rocks, rng=rng, bus=bus, buildings=buildings,
    )
    placement = PlacementController(
        catalog, resources, rocks, agents, navigation, tasks,
        bus=bus, config=config.placement, economy=config.economy, buildings=buildings,
    )
    world = GameWorld(
        config=config,
        navigation=navigation,
        resources=resources,
        agents=agents,
        rocks=rocks,
        placement=placement,
        tasks=tasks,
        bus=bus,
        queue=queue,
        catalog=catalog,
        rng=rng,
        buildings=buildings,
    )

    for name, position in astronauts:
        agents.add_astronaut(Astronaut(name, navigation.snap_to_ground(position), navigation, config.astronaut))
    if rover_position is not None:
        agents.set_rover(Rover("Rover", navigation.snap_to_ground(rover_position), navigation, config.rover))
    if rock_count > 0:
        rocks.scatter_rocks_across_map(rock_count)

    engine = Engine(world, fps=config.fps)

    def finish(outcome: str) -> None:
        if world.outcome is None:
            world.outcome = outcome
            if stop_on_outcome:
                engine.stop()

    bus.subscribe(GAME_OVER, lambda name, data: finish("lost"))
    bus.subscribe(GAME_WON, lambda name, data: finish("won"))

    def check_energy() -> None:
        if not resources.has_enough_energy:
            bus.alert("Low energy: build more solar panels")

    tasks.schedule_every("energy_check", ENERGY_CHECK_INTERVAL, check_energy)

    register_handlers(queue)
    engine.add_system(make_command_system(queue))
    engine.add_system(make_economy_system(resources, bus))
    engine.add_system(make_navigation_system(navigation, agents))
    engine.add_system(make_life_support_system(agents, bus))
    engine.add_system(make_task_system(tasks))
    engine.add_system(make_signal_system(bus))
    log.debug("game built with %d astronaut(s)", len(agents.astronauts))
    return engine
