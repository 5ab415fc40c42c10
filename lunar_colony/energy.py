"""Priority allocation of a limited energy supply."""
from __future__ import annotations

from typing import Iterable

from lunar_colony.store import ProductionRecord


def total_production(records: Iterable[ProductionRecord]) -> float:
    return sum(r.rate for r in records if r.is_energy)


def total_required(records: Iterable[ProductionRecord]) -> float:
    return sum(r.energy_consumption for r in records if not r.is_energy)


def allocate(records: Iterable[ProductionRecord], available: float) -> list[ProductionRecord]:
    """Mark consumers active in priority order while *available* covers them.

    Higher priority first; equal priorities keep registration order. A
    consumer that does not fit stays inactive and cheaper ones after it are
    still tried. Energy producers are always active. Returns the active
    consumers in allocation order.
    """
    consumers = []
    for record in records:
        if record.is_energy:
            record.is_active = True
        else:
            consumers.append(record)

    remaining = available
    active: list[ProductionRecord] = []
    for record in sorted(consumers, key=lambda r: -r.priority):
        if remaining - record.energy_consumption >= 0:
            remaining -= record.energy_consumption
            record.is_active = True
            active.append(record)
        else:
            record.is_active = False
    return active
