"""OilCell — one polluted grid cell.

Colour carries the oil's intensity.  Decay darkens existing cells; cells
spread from an existing one start brighter, so a spill fades with distance
from where it began.
"""

from __future__ import annotations

from dataclasses import dataclass

Color = tuple[int, int, int]

# Fresh crude is drawn pure red
ORIGIN_COLOR: Color = (255, 0, 0)

_SHADE_FACTOR = 0.7
# Smallest channel value brighter() can lift a near-black channel to
_MIN_BRIGHT = int(1.0 / (1.0 - _SHADE_FACTOR))


def darken(color: Color) -> Color:
    r, g, b = color
    return (
        max(int(r * _SHADE_FACTOR), 0),
        max(int(g * _SHADE_FACTOR), 0),
        max(int(b * _SHADE_FACTOR), 0),
    )


def brighten(color: Color) -> Color:
    r, g, b = color
    if r == 0 and g == 0 and b == 0:
        return (_MIN_BRIGHT, _MIN_BRIGHT, _MIN_BRIGHT)

    def lift(channel: int) -> int:
        if 0 < channel < _MIN_BRIGHT:
            channel = _MIN_BRIGHT
        return min(int(channel / _SHADE_FACTOR), 255)

    return (lift(r), lift(g), lift(b))


@dataclass
class OilCell:
    """A single unit of pollution at ``(x, y)``."""

    x: int
    y: int
    color: Color = ORIGIN_COLOR

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def intensity(self) -> int:
        """Brightest channel, 0-255."""
        return max(self.color)

    def darker(self) -> None:
        self.color = darken(self.color)

    def brighter(self) -> None:
        self.color = brighten(self.color)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "color": list(self.color)}
