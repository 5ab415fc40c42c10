"""AgentRegistry: every astronaut, the main rover and the selection."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lunar_colony.agent import NavigationAgent
    from lunar_colony.astronaut import Astronaut
    from lunar_colony.rover import Rover


class AgentRegistry:
    def __init__(self) -> None:
        self.astronauts: list[Astronaut] = []
        self.rover: Rover | None = None
        self.selected: Astronaut | None = None

    def add_astronaut(self, astronaut: Astronaut) -> Astronaut:
        self.astronauts.append(astronaut)
        if self.selected is None:
            self.selected = astronaut
        return astronaut

    def set_rover(self, rover: Rover) -> Rover:
        self.rover = rover
        return rover

    def select(self, astronaut: Astronaut) -> bool:
        if astronaut not in self.astronauts or not astronaut.is_alive:
            return False
        self.selected = astronaut
        return True

    def find(self, name: str) -> Astronaut | None:
        for astronaut in self.astronauts:
            if astronaut.name == name:
                return astronaut
        return None

    def living(self) -> list[Astronaut]:
        return [a for a in self.astronauts if a.is_alive]

    def on_foot(self) -> list[Astronaut]:
        """Living astronauts that are not riding the rover."""
        return [a for a in self.astronauts if a.is_alive and a.rover is None]

    def movers(self) -> list[NavigationAgent]:
        agents: list[NavigationAgent] = list(self.astronauts)
        if self.rover is not None:
            agents.append(self.rover)
        return agents
