"""Player commands. ``astronaut=None`` means the selected astronaut."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from lunar_colony.types import Vec3

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut
    from lunar_colony.placement import Building
    from lunar_colony.rocks import Rock


@dataclass(frozen=True)
class WalkTo:
    position: Vec3
    astronaut: Astronaut | None = None


@dataclass(frozen=True)
class DriveTo:
    position: Vec3


@dataclass(frozen=True)
class BoardRover:
    astronaut: Astronaut | None = None


@dataclass(frozen=True)
class LeaveRover:
    astronaut: Astronaut | None = None


@dataclass(frozen=True)
class DigRock:
    rock: Rock
    astronaut: Astronaut | None = None


@dataclass(frozen=True)
class ArmPlacement:
    key: str


@dataclass(frozen=True)
class MovePreview:
    position: Vec3


@dataclass(frozen=True)
class ConfirmPlacement:
    pass


@dataclass(frozen=True)
class CancelPlacement:
    pass


@dataclass(frozen=True)
class PlaceBuilding:
    key: str
    position: Vec3


@dataclass(frozen=True)
class RemoveBuilding:
    building: Building


@dataclass(frozen=True)
class RefillAstronaut:
    building: Building


@dataclass(frozen=True)
class RefillRover:
    building: Building


@dataclass(frozen=True)
class SelectAstronaut:
    astronaut: Astronaut
