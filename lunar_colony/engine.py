"""Engine - frame loop, pacing, and lifecycle hooks."""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from lunar_colony.clock import Clock
from lunar_colony.types import System, TickContext

if TYPE_CHECKING:
    from lunar_colony.game import GameWorld


class Engine:
    """Runs every registered system once per frame, in registration order.

    ``dt`` is captured once at the start of a frame and handed to every
    system through the :class:`TickContext`.
    """

    def __init__(self, world: GameWorld, fps: int = 60) -> None:
        self._clock = Clock(fps)
        self._world = world
        self._systems: list[System] = []
        self._start_hooks: list[Callable[[GameWorld, TickContext], None]] = []
        self._stop_hooks: list[Callable[[GameWorld, TickContext], None]] = []
        self._stop_requested: bool = False

    @property
    def world(self) -> GameWorld:
        return self._world

    @property
    def clock(self) -> Clock:
        return self._clock

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def on_start(self, hook: Callable[[GameWorld, TickContext], None]) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Callable[[GameWorld, TickContext], None]) -> None:
        self._stop_hooks.append(hook)

    def stop(self) -> None:
        self._stop_requested = True

    def _context(self, dt: float) -> TickContext:
        return self._clock.context(dt, self.stop, self._world.rng)

    def _tick(self, dt: float) -> None:
        self._clock.advance(dt)
        ctx = self._context(dt)
        for system in self._systems:
            system(self._world, ctx)
            if self._stop_requested:
                break

    def step(self, dt: float | None = None) -> None:
        self._stop_requested = False
        self._tick(self._clock.dt if dt is None else dt)

    def run(self, n: int, dt: float | None = None) -> None:
        frame_dt = self._clock.dt if dt is None else dt
        self._stop_requested = False
        for hook in self._start_hooks:
            hook(self._world, self._context(0.0))

        for _ in range(n):
            self._tick(frame_dt)
            if self._stop_requested:
                break

        for hook in self._stop_hooks:
            hook(self._world, self._context(0.0))

    def run_forever(self) -> None:
        """Real-time loop: ``dt`` is the measured time since the last frame."""
        self._stop_requested = False
        for hook in self._start_hooks:
            hook(self._world, self._context(0.0))

        target = self._clock.dt
        last = time.monotonic()
        while not self._stop_requested:
            start = time.monotonic()
            self._tick(start - last)
            last = start
            if self._stop_requested:
                break
            sleep_time = target - (time.monotonic() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)

        for hook in self._stop_hooks:
            hook(self._world, self._context(0.0))
