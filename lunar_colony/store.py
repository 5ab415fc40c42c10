"""Global resource totals and per-building production records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lunar_colony.types import ENERGY, FOOD, OXYGEN, STORED, WATER

PRIORITY: dict[str, int] = {OXYGEN: 3, WATER: 2, FOOD: 1, ENERGY: 0}


@dataclass(eq=False)
class ProductionRecord:
    """Production state for one registered building.

    Attributes:
        building: The placed building this record belongs to.
        resource: Resource produced.
        rate: Units produced per second while active.
        radius: Service radius in world units.
        energy_consumption: Energy required per second; 0 for energy producers.
        is_active: Whether the building produced during the last update.
    """

    building: Any
    resource: str
    rate: float
    radius: float
    energy_consumption: float = 0.0
    is_active: bool = False

    @property
    def priority(self) -> int:
        return PRIORITY[self.resource]

    @property
    def is_energy(self) -> bool:
        return self.resource == ENERGY


class ResourceStore:
    """Accumulated quantities for the session. Never negative."""

    def __init__(self, initial: dict[str, float] | None = None) -> None:
        self.accumulated: dict[str, float] = {name: 0.0 for name in STORED}
        if initial:
            for name, amount in initial.items():
                self.accumulated[name] = max(0.0, float(amount))
        self.records: dict[Any, ProductionRecord] = {}

    def get(self, name: str) -> float:
        return self.accumulated.get(name, 0.0)

    def add(self, name: str, amount: float) -> float:
        amount = max(0.0, amount)
        self.accumulated[name] = self.accumulated.get(name, 0.0) + amount
        return amount

    def take(self, name: str, amount: float) -> float:
        """Remove up to *amount*; returns what was actually removed."""
        available = self.accumulated.get(name, 0.0)
        taken = min(available, max(0.0, amount))
        self.accumulated[name] = available - taken
        return taken

    def snapshot(self) -> dict[str, float]:
        return dict(self.accumulated)
