"""Command handlers wiring player commands to the simulation."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lunar_colony import commands as cmds
from lunar_colony.queue import CommandQueue

if TYPE_CHECKING:
    from lunar_colony.astronaut import Astronaut
    from lunar_colony.game import GameWorld
    from lunar_colony.types import TickContext

log = logging.getLogger(__name__)


def _astronaut(world: GameWorld, astronaut: Astronaut | None) -> Astronaut | None:
    chosen = astronaut if astronaut is not None else world.agents.selected
    if chosen is None:
        log.warning("no astronaut selected")
    return chosen


def on_walk_to(cmd: cmds.WalkTo, world: GameWorld, ctx: TickContext) -> bool:
    astronaut = _astronaut(world, cmd.astronaut)
    return astronaut is not None and astronaut.walk_to(cmd.position)


def on_drive_to(cmd: cmds.DriveTo, world: GameWorld, ctx: TickContext) -> bool:
    rover = world.agents.rover
    if rover is None:
        return False
    if not rover.occupants:
        log.warning("the rover has no driver")
        world.bus.alert("Nobody is in the rover")
        return False
    return rover.drive_to(cmd.position)


def on_board_rover(cmd: cmds.BoardRover, world: GameWorld, ctx: TickContext) -> bool:
    astronaut = _astronaut(world, cmd.astronaut)
    rover = world.agents.rover
    if astronaut is None or rover is None:
        return False
    return astronaut.walk_to_rover(rover)


def on_leave_rover(cmd: cmds.LeaveRover, world: GameWorld, ctx: TickContext) -> bool:
    astronaut = _astronaut(world, cmd.astronaut)
    return astronaut is not None and astronaut.exit_rover()


def on_dig_rock(cmd: cmds.DigRock, world: GameWorld, ctx: TickContext) -> bool:
    astronaut = _astronaut(world, cmd.astronaut)
    return astronaut is not None and world.rocks.start_digging(astronaut, cmd.rock)


def on_arm_placement(cmd: cmds.ArmPlacement, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.arm(cmd.key)


def on_move_preview(cmd: cmds.MovePreview, world: GameWorld, ctx: TickContext) -> bool:
    preview = world.placement.update_preview(cmd.position)
    return preview is not None and preview.valid


def on_confirm_placement(cmd: cmds.ConfirmPlacement, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.confirm_placement() is not None


def on_cancel_placement(cmd: cmds.CancelPlacement, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.cancel_placement()


def on_place_building(cmd: cmds.PlaceBuilding, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.place_model_on_click(cmd.key, cmd.position) is not None


def on_remove_building(cmd: cmds.RemoveBuilding, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.remove_building(cmd.building)


def on_refill_astronaut(cmd: cmds.RefillAstronaut, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.refill_astronaut_from_building(cmd.building) > 0


def on_refill_rover(cmd: cmds.RefillRover, world: GameWorld, ctx: TickContext) -> bool:
    return world.placement.refill_rover_from_building(cmd.building) > 0


def on_select_astronaut(cmd: cmds.SelectAstronaut, world: GameWorld, ctx: TickContext) -> bool:
    return world.agents.select(cmd.astronaut)


def register_handlers(queue: CommandQueue) -> None:
    queue.handle(cmds.WalkTo, on_walk_to)
    queue.handle(cmds.DriveTo, on_drive_to)
    queue.handle(cmds.BoardRover, on_board_rover)
    queue.handle(cmds.LeaveRover, on_leave_rover)
    queue.handle(cmds.DigRock, on_dig_rock)
    queue.handle(cmds.ArmPlacement, on_arm_placement)
    queue.handle(cmds.MovePreview, on_move_preview)
    queue.handle(cmds.ConfirmPlacement, on_confirm_placement)
    queue.handle(cmds.CancelPlacement, on_cancel_placement)
    queue.handle(cmds.PlaceBuilding, on_place_building)
    queue.handle(cmds.RemoveBuilding, on_remove_building)
    queue.handle(cmds.RefillAstronaut, on_refill_astronaut)
    queue.handle(cmds.RefillRover, on_refill_rover)
    queue.handle(cmds.SelectAstronaut, on_select_astronaut)
