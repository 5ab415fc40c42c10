"""lunar_colony - a frame-driven lunar base simulation."""

from lunar_colony.agent import NavigationAgent, WalkState
from lunar_colony.astronaut import Astronaut
from lunar_colony.catalog import BuildingCatalog, BuildingSpec, make_default_catalog
from lunar_colony.config import GameConfig
from lunar_colony.engine import Engine
from lunar_colony.game import GameWorld, build_game
from lunar_colony.navigation import Navigation
from lunar_colony.placement import Building, PlacementController
from lunar_colony.resources import ResourceManager
from lunar_colony.rocks import Rock, RockManager
from lunar_colony.rover import Rover
from lunar_colony.targets import InteractAt, MoveTo
from lunar_colony.types import TickContext

__all__ = [
    "Engine",
    "GameWorld",
    "GameConfig",
    "build_game",
    "TickContext",
    "ResourceManager",
    "NavigationAgent",
    "WalkState",
    "MoveTo",
    "InteractAt",
    "Astronaut",
    "Rover",
    "Navigation",
    "Rock",
    "RockManager",
    "Building",
    "BuildingSpec",
    "BuildingCatalog",
    "make_default_catalog",
    "PlacementController",
]
