from oilsweep.app.routers.simulation import router as simulation_router

__all__ = ["simulation_router"]
