"""Simulation control API — run control, boats, oil, wind, delay."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from oilsweep.simulation import PROFILES, CleanupSimulation, Wind

router = APIRouter(prefix="/api/sim", tags=["simulation"])


class WindChange(BaseModel):
    direction: str  # NORTH, SOUTH, EAST, WEST, NONE


class DelayChange(BaseModel):
    milliseconds: int = Field(ge=0)


def _get_simulation(request: Request) -> CleanupSimulation:
    """Retrieve the CleanupSimulation from app state."""
    sim = getattr(request.app.state, "simulation", None)
    if sim is None:
        raise HTTPException(503, "Simulation not available")
    return sim


def _run_status(sim: CleanupSimulation) -> dict:
    return {
        "state": sim.state.value,
        "running": sim.is_running,
        "paused": sim.is_paused,
        "done": sim.is_done,
        "pausable": sim.is_pausable,
    }


@router.get("/state")
async def get_state(request: Request):
    """Full snapshot: boats, oil, wind, rates and run flags."""
    return _get_simulation(request).snapshot()


@router.get("/profiles")
async def list_profiles():
    return [p.to_dict() for p in PROFILES.values()]


@router.post("/start")
async def start(request: Request):
    sim = _get_simulation(request)
    sim.start()
    return _run_status(sim)


@router.post("/stop")
def stop(request: Request):
    """Stop the run and wait for the tick thread to finish."""
    sim = _get_simulation(request)
    sim.stop()
    return _run_status(sim)


@router.post("/pause")
async def pause(request: Request):
    """Toggle pause."""
    sim = _get_simulation(request)
    sim.pause()
    return _run_status(sim)


@router.post("/boats")
async def new_boat(request: Request):
    """Launch one boat from the port."""
    boat = _get_simulation(request).new_boat()
    return boat.to_dict()


@router.delete("/boats")
async def clear_boats(request: Request):
    sim = _get_simulation(request)
    sim.clear_boats()
    return {"status": "cleared", "boats": 0}


@router.post("/boats/recall")
async def recall_boats(request: Request):
    sim = _get_simulation(request)
    sim.recall_boats()
    return {"status": "recalled", "boats": len(sim.boats)}


@router.post("/oil")
async def new_oil_cell(request: Request):
    """Spill one oil cell next to the newest one (or anywhere on a clean sea)."""
    cell = _get_simulation(request).new_oil_cell()
    return cell.to_dict()


@router.delete("/oil")
async def clear_oil(request: Request):
    sim = _get_simulation(request)
    sim.clear_oil_cells()
    return {"status": "cleared", "oil": 0}


@router.put("/wind")
async def change_wind(change: WindChange, request: Request):
    sim = _get_simulation(request)
    try:
        wind = Wind.parse(change.direction)
    except ValueError as e:
        raise HTTPException(400, str(e))
    sim.change_direction(wind)
    return {"wind": wind.value}


@router.put("/delay")
async def change_delay(change: DelayChange, request: Request):
    sim = _get_simulation(request)
    sim.set_delay(change.milliseconds)
    return {"delay_ms": sim.delay_ms}
