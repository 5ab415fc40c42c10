"""Building definitions and the catalogue the build menu reads from."""
from __future__ import annotations

from dataclasses import dataclass

from lunar_colony.types import ENERGY, FOOD, OXYGEN, PRODUCIBLE, WATER


@dataclass(frozen=True)
class BuildingSpec:
    """Immutable building definition.

    Attributes:
        key: Catalogue identifier.
        name: Display name.
        resource: Resource produced, or None for non-producing buildings.
        energy_consumption: Energy drawn per second while producing.
        rocks_needed: Rock cost deducted on placement.
        size: Footprint ``(width, height, depth)`` in world units.
    """

    key: str
    name: str
    resource: str | None = None
    energy_consumption: float = 0.0
    rocks_needed: int = 0
    size: tuple[float, float, float] = (8.0, 5.0, 8.0)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("BuildingSpec key must be non-empty")
        if self.resource is not None and self.resource not in PRODUCIBLE:
            raise ValueError(f"unknown resource {self.resource!r}")
        if self.energy_consumption < 0:
            raise ValueError(f"energy_consumption must be >= 0, got {self.energy_consumption}")
        if self.rocks_needed < 0:
            raise ValueError(f"rocks_needed must be >= 0, got {self.rocks_needed}")
        if min(self.size) <= 0:
            raise ValueError(f"size must be positive, got {self.size}")

    @property
    def width(self) -> float:
        """Largest horizontal extent."""
        return max(self.size[0], self.size[2])


class BuildingCatalog:
    def __init__(self) -> None:
        self._specs: dict[str, BuildingSpec] = {}

    def define(self, spec: BuildingSpec) -> None:
        """Register a building. Overwrites if key exists."""
        self._specs[spec.key] = spec

    def get(self, key: str) -> BuildingSpec:
        """Raises KeyError if not defined."""
        return self._specs[key]

    def has(self, key: str) -> bool:
        return key in self._specs

    def names(self) -> list[str]:
        return list(self._specs)

    def affordable(self, rocks: float) -> list[str]:
        """Keys of every building whose rock cost is covered by *rocks*."""
        return [k for k, s in self._specs.items() if s.rocks_needed <= rocks]


def make_default_catalog() -> BuildingCatalog:
    catalog = BuildingCatalog()
    catalog.define(BuildingSpec(
        key="base_large", name="Water processing plant",
        resource=WATER, energy_consumption=1.0, rocks_needed=3,
        size=(10.0, 6.0, 10.0),
    ))
    catalog.define(BuildingSpec(
        key="building_pod", name="Restaurant",
        resource=FOOD, energy_consumption=1.0, rocks_needed=3,
        size=(8.0, 5.0, 8.0),
    ))
    catalog.define(BuildingSpec(
        key="laboratory", name="Oxygen plant",
        resource=OXYGEN, energy_consumption=2.0, rocks_needed=4,
        size=(8.0, 6.0, 8.0),
    ))
    catalog.define(BuildingSpec(
        key="solar_panel", name="Solar Panel",
        resource=ENERGY, rocks_needed=2,
        size=(6.0, 3.0, 4.0),
    ))
    catalog.define(BuildingSpec(
        key="living_quarters", name="Living Quarters",
        energy_consumption=1.0, rocks_needed=5,
        size=(10.0, 5.0, 8.0),
    ))
    catalog.define(BuildingSpec(
        key="landing_pad", name="Artemis landing pad",
        rocks_needed=30,
        size=(16.0, 1.0, 16.0),
    ))
    return catalog
