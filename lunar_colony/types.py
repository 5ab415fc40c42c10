"""Shared type aliases and constants for the colony simulation."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

Vec3 = tuple[float, float, float]

OXYGEN = "oxygen"
FOOD = "food"
WATER = "water"
ENERGY = "energy"
ROCKS = "rocks"

# Resources a building can produce.
PRODUCIBLE = (OXYGEN, FOOD, WATER, ENERGY)
# Resources carried in an astronaut's or rover's personal pool.
LIFE_SUPPORT = (OXYGEN, FOOD, WATER)
# Everything held in the global store.
STORED = (OXYGEN, FOOD, WATER, ENERGY, ROCKS)


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]
    random: _random.Random


if TYPE_CHECKING:
    from lunar_colony.game import GameWorld

System = Callable[["GameWorld", TickContext], None]
