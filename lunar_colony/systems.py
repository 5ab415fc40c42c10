"""System factories for agent movement and life support."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from lunar_colony.navigation import Navigation
from lunar_colony.registry import AgentRegistry
from lunar_colony.signals import AGENT_DIED, GAME_OVER, RESOURCE_CRITICAL, SignalBus

if TYPE_CHECKING:
    from lunar_colony.game import GameWorld
    from lunar_colony.types import TickContext

log = logging.getLogger(__name__)


def make_navigation_system(
    navigation: Navigation,
    agents: AgentRegistry,
) -> Callable[[GameWorld, TickContext], None]:
    """Return a system that steps the crowd once and then every walking agent."""

    def navigation_system(world: GameWorld, ctx: TickContext) -> None:
        if not navigation.available:
            return
        navigation.step(ctx.dt)
        for agent in agents.movers():
            agent.update_walk(ctx.dt)

    return navigation_system


def make_life_support_system(
    agents: AgentRegistry,
    bus: SignalBus | None = None,
    on_game_over: Callable[[str], None] | None = None,
) -> Callable[[GameWorld, TickContext], None]:
    """Return a system that drains astronaut supplies and checks for death.

    ``game_over`` is published once, on the first death.
    """
    over = False

    def life_support_system(world: GameWorld, ctx: TickContext) -> None:
        nonlocal over
        for astronaut in agents.living():
            astronaut.consume(ctx.dt)
            for resource in astronaut.check_critical():
                log.warning("%s: %s critical", astronaut.name, resource)
                if bus is not None:
                    bus.publish(RESOURCE_CRITICAL, agent=astronaut, resource=resource)
                    bus.alert(f"{astronaut.name}: {resource} level critical")
            cause = astronaut.check_death()
            if cause is None:
                continue
            if bus is not None:
                bus.publish(AGENT_DIED, agent=astronaut, cause=cause)
            if not over:
                over = True
                if bus is not None:
                    bus.publish(GAME_OVER, agent=astronaut, cause=cause)
                if on_game_over is not None:
                    on_game_over(cause)

    return life_support_system
