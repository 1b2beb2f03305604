"""Ocean grid geometry shared by boats, oil cells and the engine.

The grid is the closed square ``[0, MAX_GRID] x [0, MAX_GRID]`` in screen
orientation: x grows to the east, y grows to the *south*.  Boats launch from
the port in the bottom-right corner.
"""

from __future__ import annotations

from enum import Enum

MAX_GRID = 100
PORT: tuple[int, int] = (MAX_GRID, MAX_GRID)


def clamp(value: int, low: int, high: int) -> int:
    """Return *value* constrained to ``[low, high]``."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def clamp_to_grid(value: int) -> int:
    """Clamp a single coordinate onto the ocean grid."""
    return clamp(value, 0, MAX_GRID)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class Wind(str, Enum):
    """Wind direction.  Diffusion pushes the spill along the wind axis."""

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: "Wind | str") -> "Wind":
        """Accept a Wind or a case-insensitive name (``"no"`` means NONE)."""
        if isinstance(value, Wind):
            return value
        name = str(value).strip().upper()
        if name == "NO":
            name = "NONE"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown wind direction: {value!r}") from None


class Heading(Enum):
    """Compass octant a boat is facing, in degrees clockwise from north."""

    NORTH = 0
    NORTH_EAST = 45
    EAST = 90
    SOUTH_EAST = 135
    SOUTH = 180
    SOUTH_WEST = 225
    WEST = 270
    NORTH_WEST = 315

    @property
    def degrees(self) -> float:
        return float(self.value)

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Heading | None":
        """Octant for a position delta; ``None`` when the delta is zero."""
        return _OCTANTS.get((_sign(dx), _sign(dy)))


# (sign dx, sign dy) -> heading; negative dy points north on screen
_OCTANTS: dict[tuple[int, int], Heading] = {
    (0, -1): Heading.NORTH,
    (1, -1): Heading.NORTH_EAST,
    (1, 0): Heading.EAST,
    (1, 1): Heading.SOUTH_EAST,
    (0, 1): Heading.SOUTH,
    (-1, 1): Heading.SOUTH_WEST,
    (-1, 0): Heading.WEST,
    (-1, -1): Heading.NORTH_WEST,
}
