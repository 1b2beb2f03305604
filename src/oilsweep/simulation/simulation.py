"""CleanupSimulation — the administrative surface callers drive.

A LifecycleController bound to a SimulationEngine.  Every manual action
applies immediately, bypassing the rate gates, and is followed by a
``sim_state`` notification, exactly like a tick.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from oilsweep.comms.event_bus import EventBus

from .boat import Boat
from .engine import SimulationEngine
from .grid import Wind
from .lifecycle import LifecycleController
from .oil import OilCell
from .profiles import ScenarioProfile

if TYPE_CHECKING:
    from oilsweep.config import Settings


class CleanupSimulation(LifecycleController[SimulationEngine]):
    """Run control plus boat/oil/wind administration for one engine."""

    # -- Administrative actions --------------------------------------------

    def new_boat(self) -> Boat:
        return self.perform(self._engine.add_boat, reason="new_boat")

    def clear_boats(self) -> None:
        self.perform(self._engine.clear_boats, reason="clear_boats")

    def new_oil_cell(self) -> OilCell:
        return self.perform(self._engine.add_oil_cell, reason="new_oil_cell")

    def clear_oil_cells(self) -> None:
        self.perform(self._engine.clear_oil_cells, reason="clear_oil_cells")

    def change_direction(self, wind: Wind | str) -> Wind:
        """Set the wind from a Wind or its case-insensitive name.

        Raises:
            ValueError: If the name is not a wind direction.  Nothing changes
                and no notification is sent.
        """
        return self.perform(self._engine.set_wind, wind, reason="change_direction")

    def recall_boats(self) -> None:
        self.perform(self._engine.recall_boats, reason="recall_boats")

    # -- Read access --------------------------------------------------------

    @property
    def profile(self) -> ScenarioProfile:
        return self._engine.profile

    @property
    def boats(self) -> list[Boat]:
        return self._engine.boats

    @property
    def oil_cells(self) -> list[OilCell]:
        return self._engine.oil_cells

    @property
    def wind(self) -> Wind:
        return self._engine.wind

    @property
    def spawn_rate(self) -> int:
        return self._engine.spawn_rate

    @property
    def decay_rate(self) -> int:
        return self._engine.decay_rate

    @property
    def diffusion_rate(self) -> int:
        return self._engine.diffusion_rate

    @property
    def rotation_rate(self) -> int:
        return self._engine.rotation_rate

    def snapshot(self) -> dict:
        data = self._engine.snapshot()
        data["state"] = self.state.value
        data["paused"] = self.is_paused
        data["running"] = self.is_running
        data["done"] = self.is_done
        data["delay_ms"] = self.delay_ms
        return data

    def describe(self) -> list[str]:
        """Wind / oil / boat summary, one line per fact, then a line per boat."""
        oil = self.oil_cells
        boats = self.boats
        lines = ["[WIND]"]
        if self.diffusion_rate:
            lines.append(f"intensity: 1/{self.diffusion_rate}")
        lines.append(f"direction: {self.wind.value}")
        if self.rotation_rate:
            lines.append(f"change rate: 1/{self.rotation_rate}")
        lines.append("[OIL]")
        lines.append(f"remain: {len(oil)}")
        if self.decay_rate:
            lines.append(f"darker rate: 1/{self.decay_rate}")
        lines.append("[BOAT]")
        lines.append(f"count: {len(boats)}")
        lines.extend(str(boat) for boat in boats)
        return lines


def create_simulation(
    profile: ScenarioProfile | str | None = None,
    settings: Settings | None = None,
    event_bus: EventBus | None = None,
    seed: int | None = None,
) -> CleanupSimulation:
    """Build an engine for *profile* and wrap it in a CleanupSimulation."""
    if settings is None:
        from oilsweep.config import settings as default_settings
        settings = default_settings
    if profile is None:
        profile = settings.profile
    rng = random.Random(seed if seed is not None else settings.seed)
    engine = SimulationEngine(profile, settings=settings, rng=rng)
    return CleanupSimulation(engine, event_bus=event_bus, delay_ms=settings.tick_delay_ms)
