"""Simulation configuration dataclasses.

Every tunable constant lives here. Override with ``dataclasses.replace``::

    cfg = GameConfig(astronaut=replace(AstronautConfig(), arrival_distance=1.0))
"""
from __future__ import annotations

from dataclasses import dataclass, field

from lunar_colony.navigation import AgentParams
from lunar_colony.types import ENERGY, FOOD, OXYGEN, ROCKS, WATER


@dataclass(frozen=True)
class EconomyConfig:
    """Global store and building production.

    Attributes:
        initial_resources: Store contents at session start.
        production_rates: Units per second produced by a building of each type.
        service_radius_factor: Service radius as a multiple of footprint width.
        astronaut_refill: Units drawn per astronaut refill.
        rover_refill: Units drawn per rover refill.
        occupant_refill: Units drawn for each astronaut riding a refilled rover.
    """

    initial_resources: dict[str, float] = field(default_factory=lambda: {
        OXYGEN: 100.0, FOOD: 0.0, WATER: 0.0, ENERGY: 50.0, ROCKS: 10.0,
    })
    production_rates: dict[str, float] = field(default_factory=lambda: {
        OXYGEN: 2.0, FOOD: 1.0, WATER: 1.0, ENERGY: 30.0,
    })
    service_radius_factor: float = 1.5
    astronaut_refill: float = 50.0
    rover_refill: float = 100.0
    occupant_refill: float = 25.0

    def __post_init__(self) -> None:
        for name, amount in self.initial_resources.items():
            if amount < 0:
                raise ValueError(f"initial {name} must be >= 0, got {amount}")


@dataclass(frozen=True)
class AstronautConfig:
    capacity: float = 100.0
    consumption_rates: dict[str, float] = field(default_factory=lambda: {
        OXYGEN: 0.2, FOOD: 0.1, WATER: 0.02,
    })
    critical_thresholds: dict[str, float] = field(default_factory=lambda: {
        OXYGEN: 20.0, FOOD: 10.0, WATER: 15.0,
    })
    agent: AgentParams = AgentParams(
        radius=1.5, height=2.0, max_speed=2.0, max_acceleration=8.0,
        collision_query_range=10.0, path_optimization_range=10.0,
        separation_weight=1.0,
    )
    arrival_distance: float = 2.0
    stuck_threshold: float = 5.0
    stuck_epsilon: float = 0.1
    settle_distance: float = 1.0
    settle_speed: float = 0.1
    turn_rate: float = 0.2
    rover_interaction_radius: float = 6.0
    exit_distance: float = 7.0
    exit_lift: float = 0.05


@dataclass(frozen=True)
class RoverConfig:
    capacity: float = 500.0
    agent: AgentParams = AgentParams(
        radius=4.0, height=2.0, max_speed=12.0, max_acceleration=8.0,
        collision_query_range=10.0, path_optimization_range=10.0,
        separation_weight=4.0,
    )
    arrival_distance: float = 1.5
    stuck_threshold: float = 5.0
    stuck_epsilon: float = 0.1
    settle_distance: float = 1.0
    settle_speed: float = 0.1
    heading_smoothing: float = 0.25


@dataclass(frozen=True)
class RockKind:
    """Per-size rock parameters."""

    value: int
    dig_time: float
    obstacle_radius: float
    interaction_radius: float
    height: float = 1.5


@dataclass(frozen=True)
class RockConfig:
    small: RockKind = RockKind(value=1, dig_time=5.0, obstacle_radius=1.0,
                               interaction_radius=3.0, height=1.0)
    large: RockKind = RockKind(value=3, dig_time=12.0, obstacle_radius=3.0,
                               interaction_radius=5.0, height=2.5)
    small_fraction: float = 0.7
    min_spacing: float = 5.0
    map_trials: int = 20
    burst_trials: int = 10
    padding: float = 10.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.small_fraction <= 1.0:
            raise ValueError(f"small_fraction must be in [0, 1], got {self.small_fraction}")


@dataclass(frozen=True)
class PlacementConfig:
    max_slope: float = 0.5
    astronaut_clearance: float = 3.0
    rover_clearance: float = 5.0
    rock_clearance: float = 3.0
    landing_pad: str = "landing_pad"
    rocket_descent: float = 6.0
    victory_delay: float = 5.0


@dataclass(frozen=True)
class GameConfig:
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    astronaut: AstronautConfig = field(default_factory=AstronautConfig)
    rover: RoverConfig = field(default_factory=RoverConfig)
    rocks: RockConfig = field(default_factory=RockConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    fps: int = 60
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError("fps must be positive")
