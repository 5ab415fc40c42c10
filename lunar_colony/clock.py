"""Clock and TickContext for the frame-driven engine."""

import random
from typing import Callable

from lunar_colony.types import TickContext


class Clock:
    """Counts frames and accumulates simulated time.

    Frames carry a variable ``dt``; ``fps`` only fixes the nominal frame time
    used when the caller does not supply one.
    """

    def __init__(self, fps: int) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._fps = fps
        self._dt = 1.0 / fps
        self._tick_number = 0
        self._elapsed = 0.0

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def advance(self, dt: float) -> int:
        if dt < 0:
            raise ValueError("dt must be >= 0")
        self._tick_number += 1
        self._elapsed += dt
        return self._tick_number

    def context(self, dt: float, stop_fn: Callable[[], None], rng: random.Random) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=dt,
            elapsed=self._elapsed,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self) -> None:
        self._tick_number = 0
        self._elapsed = 0.0
