"""NavigationAgent: walk commands, arrival detection and stuck recovery."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from lunar_colony import vec
from lunar_colony.navigation import AgentHandle, AgentParams, Navigation
from lunar_colony.targets import InteractAt, WalkTarget, as_target
from lunar_colony.types import Vec3

log = logging.getLogger(__name__)

IDLE_ANIMATION = "Idle"
WALK_ANIMATION = "Walking"
DIG_ANIMATION = "Digging"

_MOVING_SPEED = 1e-3


class WalkState(Enum):
    """Walk lifecycle. ARRIVED, INTERACTING and STUCK are outcomes."""

    IDLE = "idle"
    WALKING = "walking"
    ARRIVED = "arrived"
    INTERACTING = "interacting"
    STUCK = "stuck"


class NavigationAgent:
    """A mobile entity driven through the crowd capability.

    At most one walk is active. A new :meth:`walk_to` while walking
    cancels the current one first. The crowd handle exists only while
    the agent is registered with the crowd; :meth:`stop_walk` releases it.
    """

    def __init__(
        self,
        name: str,
        position: Vec3,
        navigation: Navigation,
        params: AgentParams,
        *,
        arrival_distance: float = 2.0,
        stuck_threshold: float = 5.0,
        stuck_epsilon: float = 0.1,
        settle_distance: float = 1.0,
        settle_speed: float = 0.1,
        turn_rate: float = 0.2,
    ) -> None:
        self.name = name
        self.position: Vec3 = position
        self.navigation = navigation
        self.params = params
        self.arrival_distance = arrival_distance
        self.stuck_threshold = stuck_threshold
        self.stuck_epsilon = stuck_epsilon
        self.settle_distance = settle_distance
        self.settle_speed = settle_speed
        self.turn_rate = turn_rate

        self.handle: AgentHandle | None = None
        self.loaded = True
        self.yaw = 0.0
        self.animation = IDLE_ANIMATION
        self.state = WalkState.IDLE
        self.last_outcome: WalkState | None = None
        self.stationary_time = 0.0

        self._target: WalkTarget | None = None
        self._destination: Vec3 | None = None
        self._callback: Callable[[], None] | None = None
        self._goal_distance = arrival_distance

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def is_walking(self) -> bool:
        return self.state is WalkState.WALKING

    @property
    def target(self) -> WalkTarget | None:
        return self._target

    @property
    def destination(self) -> Vec3 | None:
        """Navigable point the crowd is steering toward."""
        return self._destination

    def can_walk(self) -> bool:
        return True

    def walk_to(
        self,
        target: WalkTarget | Vec3,
        callback: Callable[[], None] | None = None,
        arrival_distance: float | None = None,
    ) -> bool:
        """Start walking toward *target*. Returns False if the command is dropped."""
        if not self.loaded:
            log.warning("%s is not loaded; walk dropped", self.name)
            return False
        if not self.can_walk():
            return False
        if not self.navigation.available:
            log.warning("navigation unavailable; walk for %s dropped", self.name)
            return False

        if self.is_walking:
            self.stop_walk()

        goal = as_target(target)
        destination = self.navigation.closest_point(goal.position)
        if self.handle is None:
            self.handle = self.navigation.add_agent(self.position, self.params, self)
        if self.handle is None:
            log.warning("%s could not join the crowd; walk dropped", self.name)
            return False
        self.navigation.crowd.agent_goto(self.handle, destination)  # type: ignore[union-attr]

        self._target = goal
        self._destination = destination
        self._callback = callback
        self._goal_distance = self.arrival_distance if arrival_distance is None else arrival_distance
        self.stationary_time = 0.0
        self.state = WalkState.WALKING
        self.animation = WALK_ANIMATION
        log.debug("%s walking to %s", self.name, destination)
        return True

    def stop_walk(self) -> None:
        """Cancel the current walk and leave the crowd."""
        target = self._target
        was_walking = self.is_walking
        self._release()
        if was_walking and isinstance(target, InteractAt) and target.on_cancel is not None:
            target.on_cancel()

    def _release(self) -> None:
        self.navigation.remove_agent(self.handle)
        self.handle = None
        self._target = None
        self._destination = None
        self._callback = None
        self.stationary_time = 0.0
        self.state = WalkState.IDLE
        self.animation = IDLE_ANIMATION

    def teleport(self, position: Vec3) -> None:
        self.position = position
        if self.handle is not None and self.navigation.crowd is not None:
            self.navigation.crowd.agent_teleport(self.handle, position)

    def face(self, point: Vec3) -> None:
        direction = vec.horizontal(vec.sub(point, self.position))
        if direction != vec.ZERO:
            self.yaw = vec.yaw_of(direction)

    def update_walk(self, dt: float) -> WalkState | None:
        """Follow the crowd for one frame and test for arrival.

        Returns the outcome when the walk ends this frame, else None.
        """
        if not self.is_walking or self.handle is None or self.navigation.crowd is None:
            return None
        crowd = self.navigation.crowd

        previous = self.position
        reported = crowd.get_agent_position(self.handle)
        if reported is not None:
            self.position = reported
        velocity = crowd.get_agent_velocity(self.handle) or vec.ZERO
        speed = vec.length(vec.horizontal(velocity))
        if speed > _MOVING_SPEED:
            self.yaw = vec.slerp_yaw(self.yaw, vec.yaw_of(velocity), self.turn_rate)

        if dt > 0:
            if vec.distance(previous, self.position) < self.stuck_epsilon * dt:
                self.stationary_time += dt
            else:
                self.stationary_time = 0.0

        target = self._target
        dist = vec.distance(self.position, self._destination)  # type: ignore[arg-type]
        if isinstance(target, InteractAt):
            if dist <= target.radius or (dist < self.settle_distance and speed < self.settle_speed):
                return self._finish(WalkState.INTERACTING)
            if (
                self.stationary_time > self.stuck_threshold
                and vec.distance(self.position, target.position) <= 2.0 * target.radius
            ):
                log.info("%s stuck near %s target; interacting anyway", self.name, target.kind)
                return self._finish(WalkState.STUCK)
        elif dist < self._goal_distance:
            return self._finish(WalkState.ARRIVED)
        return None

    def _finish(self, outcome: WalkState) -> WalkState:
        target = self._target
        callback = self._callback
        self._release()
        self.last_outcome = outcome
        if isinstance(target, InteractAt):
            target.action(self)
        if callback is not None:
            callback()
        return outcome
