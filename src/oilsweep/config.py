"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from ``OILSWEEP_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OILSWEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "OILSWEEP"
    log_level: str = "INFO"

    # Scenario selection: single_boat, auto_spawn, manual
    profile: str = "single_boat"
    seed: Optional[int] = None

    # Tick loop
    tick_delay_ms: int = Field(default=100, ge=0)

    # Boats
    boat_load_capacity: int = Field(default=100, ge=0)
    boat_battery_capacity: int = Field(default=500, ge=0)

    # Oil spill
    initial_oil_cells: int = Field(default=30, ge=0)
    decay_rate: int = Field(default=20, ge=0)        # darken every N ticks
    diffusion_rate: int = Field(default=50, ge=0)    # wind spread every N ticks

    # HTTP control API
    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
