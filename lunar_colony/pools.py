"""Personal resource pools carried by astronauts and the rover."""
from __future__ import annotations

from dataclasses import dataclass, field

from lunar_colony.types import LIFE_SUPPORT


@dataclass
class ResourcePool:
    """Per-resource levels, each clamped to ``[0, capacity]``.

    Attributes:
        capacity: Upper bound for every resource.
        levels: Mapping of resource name -> current level.
    """

    capacity: float
    levels: dict[str, float] = field(default_factory=dict)

    @classmethod
    def full(cls, capacity: float, names: tuple[str, ...] = LIFE_SUPPORT) -> ResourcePool:
        return cls(capacity, {name: capacity for name in names})

    @classmethod
    def empty(cls, capacity: float, names: tuple[str, ...] = LIFE_SUPPORT) -> ResourcePool:
        return cls(capacity, {name: 0.0 for name in names})

    def get(self, name: str) -> float:
        return self.levels.get(name, 0.0)

    def set(self, name: str, value: float) -> None:
        self.levels[name] = max(0.0, min(value, self.capacity))

    def room(self, name: str) -> float:
        return self.capacity - self.get(name)

    def add(self, name: str, amount: float) -> float:
        """Add up to *amount*; returns the amount that fit."""
        added = min(max(0.0, amount), self.room(name))
        self.levels[name] = self.get(name) + added
        return added

    def take(self, name: str, amount: float) -> float:
        """Remove up to *amount*; returns the amount removed."""
        taken = min(max(0.0, amount), self.get(name))
        self.levels[name] = self.get(name) - taken
        return taken

    def has_any(self, name: str | None = None) -> bool:
        if name is not None:
            return self.get(name) > 0.0
        return any(v > 0.0 for v in self.levels.values())

    def snapshot(self) -> dict[str, float]:
        return dict(self.levels)
