"""
Pytest configuration and shared fixtures for the oilsweep test suite.
"""

from __future__ import annotations

import random
import threading

import pytest

from oilsweep.comms.event_bus import EventBus
from oilsweep.config import Settings
from oilsweep.simulation import CleanupSimulation, SimulationEngine, create_simulation


class RecordingObserver:
    """Synchronous listener that records every notification it receives."""

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self._lock = threading.Lock()

    def __call__(self, msg: dict) -> None:
        with self._lock:
            self.messages.append(msg)

    @property
    def reasons(self) -> list[str]:
        with self._lock:
            return [m["data"]["reason"] for m in self.messages]


@pytest.fixture
def settings() -> Settings:
    """Settings with library defaults, ignoring any .env or OILSWEEP_* vars."""
    return Settings(_env_file=None, tick_delay_ms=0, seed=1234)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def make_engine(settings, rng):
    """Factory: SimulationEngine for a profile (key or ScenarioProfile)."""

    def _make(profile="single_boat", **overrides) -> SimulationEngine:
        cfg = settings.model_copy(update=overrides) if overrides else settings
        return SimulationEngine(profile, settings=cfg, rng=rng)

    return _make


@pytest.fixture
def make_sim(settings):
    """Factory: CleanupSimulation with a fresh EventBus; stopped at teardown."""
    created: list[CleanupSimulation] = []

    def _make(profile="single_boat", seed: int = 7, **overrides) -> CleanupSimulation:
        cfg = settings.model_copy(update=overrides) if overrides else settings
        sim = create_simulation(profile, settings=cfg, event_bus=EventBus(), seed=seed)
        created.append(sim)
        return sim

    yield _make

    for sim in created:
        sim.stop()
        sim.wait(2.0)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()
