"""ScenarioProfile — named configuration for a cleanup run.

Profiles differ only in their initial population and the thresholds of the
four rate gates; every profile runs through the same SimulationEngine.

Usage:
    profile = get_profile("auto_spawn")
    profile = load_profile("profiles/calm_sea.json")
    engine = SimulationEngine(profile)

A threshold left as ``None`` (and ``initial_oil`` left as ``None``) is filled
in from Settings by ``resolve()``; an explicit 0 disables that gate.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from typing import TYPE_CHECKING, Any

from .grid import Wind

if TYPE_CHECKING:
    from oilsweep.config import Settings

DEFAULT_DECAY_RATE = 20
DEFAULT_DIFFUSION_RATE = 50
DEFAULT_INITIAL_OIL = 30


class ConfigurationError(ValueError):
    """Raised when a profile definition is invalid or unknown."""


@dataclass(frozen=True)
class ScenarioProfile:
    """Initial population plus the four gate thresholds (0 = disabled)."""

    key: str
    name: str
    description: str = ""
    spawn_rate: int = 0
    decay_rate: int | None = None
    diffusion_rate: int | None = None
    rotation_rate: int = 0
    initial_boats: int = 0
    initial_oil: int | None = None
    initial_wind: Wind = Wind.WEST
    clear_on_start: bool = True

    def __post_init__(self) -> None:
        for field_name in (
            "spawn_rate", "decay_rate", "diffusion_rate", "rotation_rate",
            "initial_boats", "initial_oil",
        ):
            value = getattr(self, field_name)
            if value is not None and value < 0:
                raise ConfigurationError(
                    f"Profile '{self.key}': {field_name} must be >= 0, got {value}"
                )

    @property
    def is_resolved(self) -> bool:
        return None not in (self.decay_rate, self.diffusion_rate, self.initial_oil)

    def resolve(self, settings: Settings | None = None) -> ScenarioProfile:
        """Return a copy with every unset value taken from *settings*."""
        decay = DEFAULT_DECAY_RATE
        diffusion = DEFAULT_DIFFUSION_RATE
        oil = DEFAULT_INITIAL_OIL
        if settings is not None:
            decay = settings.decay_rate
            diffusion = settings.diffusion_rate
            oil = settings.initial_oil_cells
        return replace(
            self,
            decay_rate=decay if self.decay_rate is None else self.decay_rate,
            diffusion_rate=diffusion if self.diffusion_rate is None else self.diffusion_rate,
            initial_oil=oil if self.initial_oil is None else self.initial_oil,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["initial_wind"] = self.initial_wind.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScenarioProfile:
        try:
            return cls(
                key=data["key"],
                name=data.get("name", data["key"]),
                description=data.get("description", ""),
                spawn_rate=int(data.get("spawn_rate", 0)),
                decay_rate=_optional_int(data.get("decay_rate")),
                diffusion_rate=_optional_int(data.get("diffusion_rate")),
                rotation_rate=int(data.get("rotation_rate", 0)),
                initial_boats=int(data.get("initial_boats", 0)),
                initial_oil=_optional_int(data.get("initial_oil")),
                initial_wind=Wind.parse(data.get("initial_wind", Wind.WEST)),
                clear_on_start=bool(data.get("clear_on_start", True)),
            )
        except ConfigurationError:
            raise
        except KeyError as exc:
            raise ConfigurationError(f"Missing required profile key: {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid profile definition: {exc}") from exc


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


SINGLE_BOAT = ScenarioProfile(
    key="single_boat",
    name="Simple - One Boat, Random Wind",
    description="One boat works the spill while the wind shifts every 15 ticks.",
    rotation_rate=15,
    initial_boats=1,
)

AUTO_SPAWN = ScenarioProfile(
    key="auto_spawn",
    name="Auto-Generating Boats, Wind by Hand",
    description="A new boat leaves port every 50 ticks; the wind only changes on command.",
    spawn_rate=50,
    initial_boats=1,
)

MANUAL = ScenarioProfile(
    key="manual",
    name="Manual",
    description="Start empty: add boats and oil and steer the wind yourself. "
                "Runs until the last oil cell is cleaned.",
    initial_boats=0,
    initial_oil=0,
    clear_on_start=False,
)

PROFILES: dict[str, ScenarioProfile] = {
    p.key: p for p in (SINGLE_BOAT, AUTO_SPAWN, MANUAL)
}


def get_profile(key: str) -> ScenarioProfile:
    try:
        return PROFILES[key]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ConfigurationError(f"Unknown profile '{key}' (known: {known})") from None


def load_profile(path: str) -> ScenarioProfile:
    """Load a ScenarioProfile from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist.
        json.JSONDecodeError: If file is not valid JSON.
        ConfigurationError: If required fields are missing or invalid.
    """
    with open(path) as f:
        data = json.load(f)
    return ScenarioProfile.from_dict(data)
