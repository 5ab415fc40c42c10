"""In-process signal bus with per-frame flush and de-duplicated alerts."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from lunar_colony.game import GameWorld
    from lunar_colony.types import TickContext

ALERT = "alert"
RESOURCE_CRITICAL = "resource_critical"
AGENT_DIED = "agent_died"
GAME_OVER = "game_over"
GAME_WON = "game_won"
ENERGY_SHORTAGE = "energy_shortage"
ENERGY_RESTORED = "energy_restored"
BUILDING_PLACED = "building_placed"
BUILDING_REMOVED = "building_removed"
ROCK_DUG = "rock_dug"

_Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Queues signals during a frame and dispatches them on :meth:`flush`.

    Alerts are also queued as signals, but an alert whose message and level
    match one raised within the last ``alert_window`` seconds is dropped.
    """

    def __init__(self, alert_window: float = 5.0) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []
        self._alert_window = alert_window
        self._live_alerts: dict[tuple[str, str], float] = {}
        self._now = 0.0

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def alert(self, message: str, level: str = "warning") -> bool:
        """Queue an alert. Returns False if an identical one is still live."""
        key = (message, level)
        expires = self._now + self._alert_window
        if key in self._live_alerts:
            self._live_alerts[key] = expires
            return False
        self._live_alerts[key] = expires
        self.publish(ALERT, message=message, level=level)
        return True

    def pending(self) -> int:
        return len(self._queue)

    def advance(self, dt: float) -> None:
        self._now += dt
        expired = [k for k, t in self._live_alerts.items() if t <= self._now]
        for key in expired:
            del self._live_alerts[key]

    def flush(self) -> None:
        snapshot = self._queue
        self._queue = []
        for signal_name, data in snapshot:
            for handler in list(self._subscribers.get(signal_name, [])):
                handler(signal_name, data)

    def clear(self) -> None:
        self._queue.clear()


def make_signal_system(bus: SignalBus) -> Callable[[GameWorld, TickContext], None]:
    def signal_system(world: GameWorld, ctx: TickContext) -> None:
        bus.advance(ctx.dt)
        bus.flush()

    return signal_system
