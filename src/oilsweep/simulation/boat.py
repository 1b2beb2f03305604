"""Boat — an autonomous cleanup vessel.

Architecture
------------
A boat is a small state machine over ``BoatStatus``:

  STOPPED <-> MOVING      move_to() away from / onto the target
  MOVING  -> CHARGING     battery cannot cover one more step
  MOVING  -> UNLOADING    hold cannot take one more unit of oil
  any     -> STOPPED      force_stop()
  any     -> MOVING       restart()

CHARGING and UNLOADING complete within the call that enters them: the usage
counter drops straight back to zero and the next successful move_to()
returns the boat to MOVING.  There is no terminal state.

Every step costs one unit of battery; every cell cleaned costs one unit of
load.  Both counters are clamped into ``[0, cap]`` by their setters, and the
capacities are fixed at construction.
"""

from __future__ import annotations

import itertools
from collections import deque
from enum import Enum

from .grid import PORT, Heading, clamp, clamp_to_grid
from .oil import OilCell

DEFAULT_LOAD_CAPACITY = 100
DEFAULT_BATTERY_CAPACITY = 500

_STEP = 1
_STEP_COST = 1
_CLEAN_COST = 1

_ids = itertools.count(1)


class BoatStatus(str, Enum):
    STOPPED = "STOPPED"
    MOVING = "MOVING"
    CHARGING = "CHARGING"
    UNLOADING = "UNLOADING"


class Boat:
    """A cleanup boat on the ocean grid."""

    DEFAULT_HEADING = Heading.WEST

    def __init__(
        self,
        x: int = PORT[0],
        y: int = PORT[1],
        load_cap: int = DEFAULT_LOAD_CAPACITY,
        batt_cap: int = DEFAULT_BATTERY_CAPACITY,
    ) -> None:
        self._boat_id = f"b{next(_ids)}"
        self._name = f"Boat_{self._boat_id}"
        self._load_cap = max(0, int(load_cap))
        self._batt_cap = max(0, int(batt_cap))
        self.status = BoatStatus.STOPPED
        self.x = clamp_to_grid(x)
        self.y = clamp_to_grid(y)
        self.heading = self.DEFAULT_HEADING
        self._load_used = 0
        self._batt_used = 0

    # -- Identity / capacities ---------------------------------------------

    @property
    def boat_id(self) -> str:
        return self._boat_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def load_cap(self) -> int:
        return self._load_cap

    @property
    def batt_cap(self) -> int:
        return self._batt_cap

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_moving(self) -> bool:
        return self.status is BoatStatus.MOVING

    # -- Clamped usage counters --------------------------------------------

    @property
    def load_used(self) -> int:
        return self._load_used

    @load_used.setter
    def load_used(self, value: int) -> None:
        self._load_used = clamp(value, 0, self._load_cap)

    @property
    def batt_used(self) -> int:
        return self._batt_used

    @batt_used.setter
    def batt_used(self, value: int) -> None:
        self._batt_used = clamp(value, 0, self._batt_cap)

    @property
    def remaining_load(self) -> int:
        return self._load_cap - self._load_used

    @property
    def remaining_battery(self) -> int:
        return self._batt_cap - self._batt_used

    # -- Transitions -------------------------------------------------------

    def _stop(self) -> None:
        self.status = BoatStatus.STOPPED

    def _start(self) -> None:
        self.status = BoatStatus.MOVING

    def _charge(self) -> None:
        self.status = BoatStatus.CHARGING
        self.batt_used = 0

    def _unload(self) -> None:
        self.status = BoatStatus.UNLOADING
        self.load_used = 0

    # -- Behaviour ---------------------------------------------------------

    def move_to(self, x: int, y: int) -> None:
        """Take one step (diagonal allowed) toward ``(x, y)``."""
        x = clamp_to_grid(x)
        y = clamp_to_grid(y)
        if self.x == x and self.y == y:
            self._stop()
            return

        if self.remaining_battery < _STEP_COST:
            self._charge()
            return

        self._start()

        heading = Heading.from_delta(x - self.x, y - self.y)
        if heading is not None:
            self.heading = heading

        if x > self.x:
            self.x += _STEP
        elif x < self.x:
            self.x -= _STEP

        if y > self.y:
            self.y += _STEP
        elif y < self.y:
            self.y -= _STEP

        self.batt_used += _STEP_COST

    def clean(self, oil_queue: deque[OilCell]) -> None:
        """Head for the oldest oil cell and scoop it up once on top of it."""
        if not oil_queue:
            return

        target = oil_queue[0]
        if self.remaining_load < _CLEAN_COST:
            self._unload()
            return

        self.move_to(target.x, target.y)

        if self.x == target.x and self.y == target.y:
            oil_queue.popleft()
            self.load_used += _CLEAN_COST

    def force_stop(self) -> None:
        self._stop()

    def restart(self, x: int, y: int) -> None:
        """Relocate (usually to the port) and resume work with empty counters."""
        self.x = clamp_to_grid(x)
        self.y = clamp_to_grid(y)
        self.heading = self.DEFAULT_HEADING
        self.batt_used = 0
        self.load_used = 0
        self._start()

    # -- Telemetry ---------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "boat_id": self._boat_id,
            "name": self._name,
            "status": self.status.value,
            "x": self.x,
            "y": self.y,
            "heading": self.heading.degrees,
            "load_used": self._load_used,
            "load_cap": self._load_cap,
            "batt_used": self._batt_used,
            "batt_cap": self._batt_cap,
        }

    def __str__(self) -> str:
        return (
            f"[{self.status.value:>9}]{self._name:>8}({self.x:3d},{self.y:3d}), "
            f"heading={self.heading.degrees:5.1f}, moving={str(self.is_moving):>5}, "
            f"load(usg/cap)={self._load_used:3d}/{self._load_cap:3d}, "
            f"battery(usg/cap)={self._batt_used:3d}/{self._batt_cap:3d}"
        )

    def __repr__(self) -> str:
        return f"Boat({self._boat_id!r}, status={self.status.value}, pos=({self.x}, {self.y}))"
