"""Walk goals: a bare point, or a point to reach and then act on."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from lunar_colony.types import Vec3

if TYPE_CHECKING:
    from lunar_colony.agent import NavigationAgent


@dataclass(frozen=True)
class MoveTo:
    position: Vec3


@dataclass(frozen=True)
class InteractAt:
    """Travel to within *radius* of *position*, then call ``action(agent)``.

    ``on_cancel`` runs instead if the walk is stopped or replaced before
    the interaction fires.
    """

    position: Vec3
    radius: float
    action: Callable[[NavigationAgent], None]
    kind: str = "building"
    on_cancel: Callable[[], None] | None = None


WalkTarget = Union[MoveTo, InteractAt]


def as_target(target: WalkTarget | Vec3) -> WalkTarget:
    if isinstance(target, (MoveTo, InteractAt)):
        return target
    return MoveTo(tuple(target))  # type: ignore[arg-type]
