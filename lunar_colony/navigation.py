"""Navigation capability: crowd pathfinding and terrain collaborator contracts.

The crowd/navmesh engine is consumed as a black box through
:class:`CrowdNavigator`. :class:`Navigation` wraps it together with the
terrain and is what agents, rocks and placement talk to. Either part may be
missing early in a session; callers check :attr:`Navigation.available`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from lunar_colony import vec
from lunar_colony.types import Vec3

log = logging.getLogger(__name__)

AgentHandle = int


@dataclass(frozen=True)
class AgentParams:
    """Crowd agent parameters. ``max_speed == 0`` marks a static obstacle."""

    radius: float
    height: float
    max_speed: float
    max_acceleration: float
    collision_query_range: float
    path_optimization_range: float
    separation_weight: float

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError(f"radius must be >= 0, got {self.radius}")
        if self.max_speed < 0:
            raise ValueError(f"max_speed must be >= 0, got {self.max_speed}")


class CrowdNavigator(Protocol):
    def get_closest_point(self, position: Vec3) -> Vec3 | None: ...
    def add_agent(self, position: Vec3, params: AgentParams, visual: Any = None) -> AgentHandle: ...
    def agent_goto(self, handle: AgentHandle, target: Vec3) -> None: ...
    def agent_teleport(self, handle: AgentHandle, position: Vec3) -> None: ...
    def remove_agent(self, handle: AgentHandle) -> None: ...
    def update(self, dt: float) -> None: ...
    def get_agent_position(self, handle: AgentHandle) -> Vec3 | None: ...
    def get_agent_velocity(self, handle: AgentHandle) -> Vec3 | None: ...


class Terrain(Protocol):
    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """``(min_x, max_x, min_z, max_z)``"""
        ...

    def height_at(self, x: float, z: float) -> float | None: ...
    def normal_at(self, x: float, z: float) -> Vec3: ...


class Navigation:
    """Terrain plus an optional crowd, shared by every mobile agent."""

    def __init__(self, terrain: Terrain | None = None, crowd: CrowdNavigator | None = None) -> None:
        self.terrain = terrain
        self.crowd = crowd

    @property
    def available(self) -> bool:
        return self.crowd is not None

    def attach_crowd(self, crowd: CrowdNavigator | None) -> None:
        self.crowd = crowd

    def ground_height(self, x: float, z: float) -> float | None:
        if self.terrain is None:
            return None
        return self.terrain.height_at(x, z)

    def snap_to_ground(self, position: Vec3, lift: float = 0.0) -> Vec3:
        """Put *position* on the terrain surface; unchanged if there is none."""
        gy = self.ground_height(position[0], position[2])
        if gy is None:
            return position
        return vec.with_y(position, gy + lift)

    def closest_point(self, position: Vec3) -> Vec3:
        """Nearest walkable point, or *position* itself if the query fails.

        The result is always dropped onto the terrain surface.
        """
        point: Vec3 | None = None
        if self.crowd is not None:
            point = self.crowd.get_closest_point(position)
        if point is None or vec.is_degenerate(point):
            log.debug("closest point query failed for %s, using raw position", position)
            point = position
        return self.snap_to_ground(point)

    def add_agent(self, position: Vec3, params: AgentParams, visual: Any = None) -> AgentHandle | None:
        if self.crowd is None:
            return None
        handle = self.crowd.add_agent(position, params, visual)
        if handle < 0:
            log.warning("crowd refused agent at %s", position)
            return None
        return handle

    def add_obstacle(
        self,
        position: Vec3,
        radius: float,
        height: float,
        *,
        collision_query_range: float = 2.0,
        path_optimization_range: float = 2.0,
        separation_weight: float = 1.0,
        visual: Any = None,
    ) -> AgentHandle | None:
        """Register a zero-speed agent so moving agents route around *position*."""
        params = AgentParams(
            radius=radius,
            height=height,
            max_speed=0.0,
            max_acceleration=0.0,
            collision_query_range=collision_query_range,
            path_optimization_range=path_optimization_range,
            separation_weight=separation_weight,
        )
        return self.add_agent(position, params, visual)

    def remove_agent(self, handle: AgentHandle | None) -> None:
        if handle is None or self.crowd is None:
            return
        self.crowd.remove_agent(handle)

    def step(self, dt: float) -> None:
        if self.crowd is not None:
            self.crowd.update(dt)
