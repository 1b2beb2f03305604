"""SimulationEngine — one tick of the oil cleanup world.

Architecture
------------
The engine is the authoritative owner of the boat list, the oil queue and
the wind.  It knows nothing about threads or timing: LifecycleController
calls ``tick()`` on its own schedule and publishes the result.

One ``tick()`` runs in a fixed order:

  1. completion check: no oil left means the scenario is over; tick()
     returns False and nothing else happens.
  2. spawn gate:     launch one boat from the port.
  3. decay gate:     darken every surviving oil cell.
  4. diffusion gate: push the spill one cell further downwind.
  5. rotation gate:  pick a new wind uniformly from all five values.
  6. cleaning pass:  every boat, in list order, works the shared queue.

The four gates are independent RateGate instances whose thresholds come
from the ScenarioProfile.  Profiles never change the algorithm.

Diffusion:
  Cells are grouped by their coordinate across the wind.  In each group the
  cell furthest downwind is the edge; one new, brighter cell is appended a
  step beyond it (clamped to the grid).  NORTH and WEST grow toward larger
  y / x, SOUTH and EAST toward smaller, matching the screen orientation of
  the grid.  The four cases are the same reduction over a different axis.

Locking:
  Administrative calls (add/clear boats and oil, set wind) arrive from
  other threads while the tick loop is live.  Every read-modify-write of
  the shared collections, the whole of tick() included, runs under
  ``self._lock``; accessors hand out copies taken under the same lock.
  The cleaning pass is strictly sequential so no two boats can claim the
  same cell.
"""

from __future__ import annotations

import random
import threading
from collections import deque
from typing import TYPE_CHECKING

from loguru import logger

from .boat import Boat
from .grid import MAX_GRID, PORT, Wind, clamp_to_grid
from .oil import OilCell, brighten
from .profiles import ScenarioProfile, get_profile
from .rate_gate import RateGate

if TYPE_CHECKING:
    from oilsweep.config import Settings

# wind -> (axis the spill grows along, step direction on that axis)
_DIFFUSION: dict[Wind, tuple[str, int]] = {
    Wind.NORTH: ("y", 1),
    Wind.SOUTH: ("y", -1),
    Wind.WEST: ("x", 1),
    Wind.EAST: ("x", -1),
}

_NEIGHBOURS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class SimulationEngine:
    """Boats, oil and wind, advanced one tick at a time."""

    def __init__(
        self,
        profile: ScenarioProfile | str = "single_boat",
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if settings is None:
            from oilsweep.config import settings as default_settings
            settings = default_settings
        if isinstance(profile, str):
            profile = get_profile(profile)

        self._profile = profile.resolve(settings)
        self._load_cap = settings.boat_load_capacity
        self._batt_cap = settings.boat_battery_capacity
        self._rng = rng if rng is not None else random.Random(settings.seed)
        self._lock = threading.Lock()

        self._boats: list[Boat] = []
        self._oil: deque[OilCell] = deque()
        self._wind = self._profile.initial_wind
        self._tick_count = 0

        self._spawn_gate = RateGate(self._profile.spawn_rate, "spawn")
        self._decay_gate = RateGate(self._profile.decay_rate, "decay")
        self._diffusion_gate = RateGate(self._profile.diffusion_rate, "diffusion")
        self._rotation_gate = RateGate(self._profile.rotation_rate, "rotation")

    # -- Read access --------------------------------------------------------

    @property
    def profile(self) -> ScenarioProfile:
        return self._profile

    @property
    def boats(self) -> list[Boat]:
        with self._lock:
            return list(self._boats)

    @property
    def oil_cells(self) -> list[OilCell]:
        with self._lock:
            return list(self._oil)

    @property
    def wind(self) -> Wind:
        return self._wind

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def spawn_rate(self) -> int:
        return self._spawn_gate.threshold

    @property
    def decay_rate(self) -> int:
        return self._decay_gate.threshold

    @property
    def diffusion_rate(self) -> int:
        return self._diffusion_gate.threshold

    @property
    def rotation_rate(self) -> int:
        return self._rotation_gate.threshold

    def snapshot(self) -> dict:
        """Plain-dict copy of the world, safe to serialise or hand across threads."""
        with self._lock:
            return {
                "profile": self._profile.key,
                "tick": self._tick_count,
                "wind": self._wind.value,
                "rates": {
                    "spawn": self._spawn_gate.threshold,
                    "decay": self._decay_gate.threshold,
                    "diffusion": self._diffusion_gate.threshold,
                    "rotation": self._rotation_gate.threshold,
                },
                "boats": [b.to_dict() for b in self._boats],
                "oil": [c.to_dict() for c in self._oil],
            }

    # -- Run setup ----------------------------------------------------------

    def populate(self) -> None:
        """Prepare a new run: reset the gates and lay out the initial world."""
        with self._lock:
            for gate in self._gates():
                gate.reset()
            self._tick_count = 0
            if self._profile.clear_on_start:
                self._boats.clear()
                self._oil.clear()
                self._wind = self._profile.initial_wind
            for _ in range(self._profile.initial_boats):
                self._boats.append(self._new_boat())
            for _ in range(self._profile.initial_oil):
                self._spill_oil()
            logger.debug(
                f"Populated '{self._profile.key}': {len(self._boats)} boats, "
                f"{len(self._oil)} oil cells, wind {self._wind.value}"
            )

    def _gates(self) -> tuple[RateGate, ...]:
        return (self._spawn_gate, self._decay_gate, self._diffusion_gate, self._rotation_gate)

    # -- Tick ---------------------------------------------------------------

    def tick(self) -> bool:
        """Advance one step.  Returns False once no oil is left."""
        with self._lock:
            if not self._oil:
                return False

            self._tick_count += 1

            if self._spawn_gate.fire():
                self._boats.append(self._new_boat())

            if self._decay_gate.fire():
                for cell in self._oil:
                    cell.darker()

            if self._diffusion_gate.fire():
                self._diffuse()

            if self._rotation_gate.fire():
                self._wind = self._rng.choice(list(Wind))
                logger.debug(f"Wind now {self._wind.value}")

            for boat in self._boats:
                boat.clean(self._oil)

            return True

    def _diffuse(self) -> int:
        """Extend every downwind edge of the spill by one cell.  Returns cells added."""
        rule = _DIFFUSION.get(self._wind)
        if rule is None:
            return 0
        axis, step = rule
        across_axis = "y" if axis == "x" else "x"

        edges: dict[int, OilCell] = {}
        for cell in self._oil:
            key = getattr(cell, across_axis)
            edge = edges.get(key)
            if edge is None or (getattr(cell, axis) - getattr(edge, axis)) * step > 0:
                edges[key] = cell

        for across, edge in edges.items():
            tip = clamp_to_grid(getattr(edge, axis) + step)
            x, y = (tip, across) if axis == "x" else (across, tip)
            self._oil.append(OilCell(x, y, brighten(edge.color)))
        return len(edges)

    # -- Administrative -----------------------------------------------------

    def _new_boat(self) -> Boat:
        return Boat(PORT[0], PORT[1], load_cap=self._load_cap, batt_cap=self._batt_cap)

    def _spill_oil(self) -> OilCell:
        if not self._oil:
            cell = OilCell(self._rng.randrange(MAX_GRID), self._rng.randrange(MAX_GRID))
        else:
            last = self._oil[-1]
            dx, dy = self._rng.choice(_NEIGHBOURS)
            cell = OilCell(
                clamp_to_grid(last.x + dx),
                clamp_to_grid(last.y + dy),
                brighten(last.color),
            )
        self._oil.append(cell)
        return cell

    def add_boat(self) -> Boat:
        with self._lock:
            boat = self._new_boat()
            self._boats.append(boat)
        logger.debug(f"Launched {boat.name} from port")
        return boat

    def clear_boats(self) -> None:
        with self._lock:
            self._boats.clear()

    def add_oil_cell(self) -> OilCell:
        """Spill one cell: anywhere if the sea is clean, else next to the newest cell."""
        with self._lock:
            return self._spill_oil()

    def clear_oil_cells(self) -> None:
        with self._lock:
            self._oil.clear()

    def set_wind(self, wind: Wind | str) -> Wind:
        wind = Wind.parse(wind)
        with self._lock:
            self._wind = wind
        logger.debug(f"Wind set to {wind.value}")
        return wind

    def recall_boats(self) -> None:
        """Send every boat back to port with empty hold and full battery."""
        with self._lock:
            for boat in self._boats:
                boat.restart(*PORT)

    def force_stop(self) -> None:
        with self._lock:
            for boat in self._boats:
                boat.force_stop()
