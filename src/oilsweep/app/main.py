"""OILSWEEP control server.

Main FastAPI application.  The simulation is created on startup from
Settings (or injected by ``create_app``) and stopped on shutdown.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from oilsweep import __version__
from oilsweep.app.routers import simulation_router
from oilsweep.config import Settings, settings as default_settings
from oilsweep.simulation import CleanupSimulation, create_simulation


def create_app(
    simulation: CleanupSimulation | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the API.  Pass *simulation* to serve an existing instance."""
    cfg = settings if settings is not None else default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sim = simulation
        if sim is None:
            sim = create_simulation(cfg.profile, settings=cfg)
            logger.info(f"Simulation created with profile '{sim.profile.key}'")
        app.state.simulation = sim
        yield
        logger.info("Shutting down simulation")
        sim.stop()

    app = FastAPI(
        title=cfg.app_name,
        description="Autonomous oil-cleanup boat simulation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.simulation = simulation
    app.include_router(simulation_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "operational", "version": __version__, "system": cfg.app_name}

    return app


def serve(settings: Settings | None = None) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    cfg = settings if settings is not None else default_settings
    uvicorn.run(create_app(settings=cfg), host=cfg.host, port=cfg.port)
