"""OpenFieldCrowd - a minimal crowd simulation for headless runs and tests.

Agents steer in a straight line toward their goal on the ground plane,
limited by max speed and max acceleration, and slow down on approach.
Zero-speed agents are obstacles: moving agents that overlap one are pushed
back out to the sum of both radii. There is no navmesh; every point inside
the terrain bounds is walkable.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any

from lunar_colony import vec
from lunar_colony.navigation import AgentHandle, AgentParams, Terrain
from lunar_colony.types import Vec3

# Desired speed per unit of remaining distance when arriving.
_ARRIVE_GAIN = 2.0


@dataclass
class CrowdAgent:
    position: Vec3
    params: AgentParams
    velocity: Vec3 = vec.ZERO
    goal: Vec3 | None = None
    visual: Any = None

    @property
    def is_obstacle(self) -> bool:
        return self.params.max_speed == 0.0


class OpenFieldCrowd:
    def __init__(self, terrain: Terrain | None = None, max_agents: int = 50) -> None:
        self._terrain = terrain
        self._max_agents = max_agents
        self._agents: dict[AgentHandle, CrowdAgent] = {}
        self._ids = itertools.count()

    def __len__(self) -> int:
        return len(self._agents)

    def agent(self, handle: AgentHandle) -> CrowdAgent | None:
        return self._agents.get(handle)

    def get_closest_point(self, position: Vec3) -> Vec3 | None:
        if self._terrain is None:
            return position
        min_x, max_x, min_z, max_z = self._terrain.bounds
        x = min(max(position[0], min_x), max_x)
        z = min(max(position[2], min_z), max_z)
        y = self._terrain.height_at(x, z)
        if y is None:
            return None
        return (x, y, z)

    def add_agent(self, position: Vec3, params: AgentParams, visual: Any = None) -> AgentHandle:
        if len(self._agents) >= self._max_agents:
            return -1
        handle = next(self._ids)
        self._agents[handle] = CrowdAgent(position=position, params=params, visual=visual)
        return handle

    def agent_goto(self, handle: AgentHandle, target: Vec3) -> None:
        agent = self._agents.get(handle)
        if agent is not None and not agent.is_obstacle:
            agent.goal = target

    def agent_teleport(self, handle: AgentHandle, position: Vec3) -> None:
        agent = self._agents.get(handle)
        if agent is not None:
            agent.position = position
            agent.velocity = vec.ZERO
            agent.goal = None

    def remove_agent(self, handle: AgentHandle) -> None:
        self._agents.pop(handle, None)

    def get_agent_position(self, handle: AgentHandle) -> Vec3 | None:
        agent = self._agents.get(handle)
        return agent.position if agent is not None else None

    def get_agent_velocity(self, handle: AgentHandle) -> Vec3 | None:
        agent = self._agents.get(handle)
        return agent.velocity if agent is not None else None

    def update(self, dt: float) -> None:
        if dt <= 0:
            return
        obstacles = [a for a in self._agents.values() if a.is_obstacle]
        for agent in self._agents.values():
            if agent.is_obstacle:
                continue
            self._steer(agent, dt)
            self._separate(agent, obstacles)
            if self._terrain is not None:
                gy = self._terrain.height_at(agent.position[0], agent.position[2])
                if gy is not None:
                    agent.position = vec.with_y(agent.position, gy)

    def _steer(self, agent: CrowdAgent, dt: float) -> None:
        desired = vec.ZERO
        if agent.goal is not None:
            to_goal = vec.horizontal(vec.sub(agent.goal, agent.position))
            dist = vec.length(to_goal)
            if dist > 1e-6:
                speed = min(agent.params.max_speed, dist * _ARRIVE_GAIN)
                desired = vec.scale(vec.normalize(to_goal), speed)
        change = vec.sub(desired, agent.velocity)
        max_change = agent.params.max_acceleration * dt
        if vec.length(change) > max_change:
            change = vec.scale(vec.normalize(change), max_change)
        agent.velocity = vec.add(agent.velocity, change)
        agent.position = vec.add(agent.position, vec.scale(agent.velocity, dt))

    def _separate(self, agent: CrowdAgent, obstacles: list[CrowdAgent]) -> None:
        for obstacle in obstacles:
            offset = vec.horizontal(vec.sub(agent.position, obstacle.position))
            dist = vec.length(offset)
            min_dist = agent.params.radius + obstacle.params.radius
            if dist >= min_dist:
                continue
            direction = vec.normalize(offset) if dist > 1e-9 else (1.0, 0.0, 0.0)
            agent.position = vec.add(agent.position, vec.scale(direction, min_dist - dist))
