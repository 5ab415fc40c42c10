"""Timed tasks advanced by the frame clock.

Replaces wall-clock timers: every delayed callback in the simulation is a
:class:`TimedTask` whose ``elapsed`` grows by the frame ``dt``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from lunar_colony.game import GameWorld
    from lunar_colony.types import TickContext

log = logging.getLogger(__name__)


@dataclass(eq=False)
class TimedTask:
    """A pending callback.

    One-shot tasks fire once when ``elapsed >= duration``. Periodic tasks
    (``periodic=True``) fire every ``duration`` seconds until cancelled.
    """

    name: str
    duration: float
    on_complete: Callable[[], None]
    elapsed: float = 0.0
    periodic: bool = False
    cancelled: bool = False
    done: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    @property
    def remaining(self) -> float:
        return max(0.0, self.duration - self.elapsed)


class TaskQueue:
    def __init__(self) -> None:
        self._tasks: list[TimedTask] = []
        self._incoming: list[TimedTask] = []
        self._advancing = False

    def schedule(self, name: str, duration: float, on_complete: Callable[[], None]) -> TimedTask:
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        return self._add(TimedTask(name=name, duration=duration, on_complete=on_complete))

    def schedule_every(self, name: str, interval: float, on_fire: Callable[[], None]) -> TimedTask:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        return self._add(TimedTask(name=name, duration=interval, on_complete=on_fire, periodic=True))

    def _add(self, task: TimedTask) -> TimedTask:
        # Tasks created by a callback wait for the next advance.
        if self._advancing:
            self._incoming.append(task)
        else:
            self._tasks.append(task)
        return task

    def cancel(self, task: TimedTask) -> None:
        task.cancelled = True

    def cancel_named(self, name: str) -> int:
        count = 0
        for task in self._tasks + self._incoming:
            if task.name == name and task.pending:
                task.cancelled = True
                count += 1
        return count

    def pending(self) -> list[TimedTask]:
        return [t for t in self._tasks + self._incoming if t.pending]

    def advance(self, dt: float) -> list[TimedTask]:
        """Advance every task by *dt*; returns the tasks that fired."""
        fired: list[TimedTask] = []
        self._advancing = True
        try:
            for task in self._tasks:
                if not task.pending:
                    continue
                task.elapsed += dt
                # A periodic task fires once per whole period covered by dt.
                while task.pending and task.elapsed >= task.duration:
                    if task.periodic:
                        task.elapsed -= task.duration
                    else:
                        task.done = True
                    log.debug("task %r fired", task.name)
                    fired.append(task)
                    task.on_complete()
        finally:
            self._advancing = False
        self._tasks = [t for t in self._tasks if t.pending] + self._incoming
        self._incoming = []
        return fired


def make_task_system(queue: TaskQueue) -> Callable[[GameWorld, TickContext], None]:
    def task_system(world: GameWorld, ctx: TickContext) -> None:
        queue.advance(ctx.dt)

    return task_system
