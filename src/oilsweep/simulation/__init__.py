"""Simulation package: boats, oil, rate gates, profiles, engine, lifecycle."""

from .boat import Boat, BoatStatus
from .engine import SimulationEngine
from .grid import MAX_GRID, PORT, Heading, Wind, clamp, clamp_to_grid
from .lifecycle import STATE_EVENT, LifecycleController, RunState, Tickable
from .oil import ORIGIN_COLOR, OilCell
from .profiles import (
    PROFILES,
    ConfigurationError,
    ScenarioProfile,
    get_profile,
    load_profile,
)
from .rate_gate import RateGate
from .simulation import CleanupSimulation, create_simulation

__all__ = [
    "Boat",
    "BoatStatus",
    "CleanupSimulation",
    "ConfigurationError",
    "Heading",
    "LifecycleController",
    "MAX_GRID",
    "ORIGIN_COLOR",
    "OilCell",
    "PORT",
    "PROFILES",
    "RateGate",
    "RunState",
    "STATE_EVENT",
    "ScenarioProfile",
    "SimulationEngine",
    "Tickable",
    "Wind",
    "clamp",
    "clamp_to_grid",
    "create_simulation",
    "get_profile",
    "load_profile",
]
