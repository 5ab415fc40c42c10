"""CommandQueue - player commands routed to handlers once per frame."""
from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from lunar_colony.game import GameWorld
    from lunar_colony.types import TickContext

log = logging.getLogger(__name__)

Handler = Callable[[Any, "GameWorld", "TickContext"], bool]
Hook = Callable[[Any], None]


class CommandQueue:
    """FIFO of player commands, dispatched by exact command class.

    A handler returns False when the game refuses the command (no driver in
    the rover, invalid placement, nothing to refill...). Refusals are
    counted, logged and passed to the ``on_reject`` hooks; the GUI uses them
    to flash its warnings.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Any], Handler] = {}
        self._pending: deque[Any] = deque()
        self._accept_hooks: list[Hook] = []
        self._reject_hooks: list[Hook] = []
        self.accepted = 0
        self.rejected = 0

    def handle(self, cmd_type: type[Any], handler: Handler) -> None:
        """Route *cmd_type* to ``handler(cmd, world, ctx)``; replaces any earlier one."""
        self._handlers[cmd_type] = handler

    def handles(self, cmd_type: type[Any]) -> bool:
        return cmd_type in self._handlers

    def on_accept(self, hook: Hook) -> None:
        self._accept_hooks.append(hook)

    def on_reject(self, hook: Hook) -> None:
        self._reject_hooks.append(hook)

    def enqueue(self, cmd: Any) -> None:
        if type(cmd) not in self._handlers:
            raise TypeError(f"No handler registered for {type(cmd).__qualname__}")
        self._pending.append(cmd)

    def pending(self) -> int:
        return len(self._pending)

    def drain(self, world: GameWorld, ctx: TickContext) -> list[tuple[Any, bool]]:
        """Run every queued command in order. Returns ``[(cmd, accepted), ...]``.

        Commands queued by a handler wait for the next frame.
        """
        batch, self._pending = self._pending, deque()
        results: list[tuple[Any, bool]] = []
        for cmd in batch:
            accepted = bool(self._handlers[type(cmd)](cmd, world, ctx))
            if accepted:
                self.accepted += 1
                hooks = self._accept_hooks
            else:
                self.rejected += 1
                log.info("%s refused on tick %d", type(cmd).__name__, ctx.tick_number)
                hooks = self._reject_hooks
            for hook in hooks:
                hook(cmd)
            results.append((cmd, accepted))
        return results


def make_command_system(queue: CommandQueue) -> Callable[[GameWorld, TickContext], None]:
    """Return a system that drains *queue* at the start of each frame."""

    def command_system(world: GameWorld, ctx: TickContext) -> None:
        queue.drain(world, ctx)

    return command_system
