"""RateGate — fire an effect once every N ticks."""

from __future__ import annotations


class RateGate:
    """Counter/threshold pair advanced once per tick.

    ``fire()`` bumps the counter and returns True when it reaches the
    threshold, resetting the counter to zero.  A threshold of 0 disables the
    gate permanently: the counter still advances but the gate never fires.
    """

    def __init__(self, threshold: int = 0, name: str = "") -> None:
        if threshold < 0:
            raise ValueError(f"RateGate threshold must be >= 0, got {threshold}")
        self.name = name
        self._threshold = threshold
        self._count = 0

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def count(self) -> int:
        return self._count

    @property
    def enabled(self) -> bool:
        return self._threshold != 0

    def fire(self) -> bool:
        self._count += 1
        if self._threshold != 0 and self._count >= self._threshold:
            self._count = 0
            return True
        return False

    def reset(self) -> None:
        self._count = 0

    def __repr__(self) -> str:
        return f"RateGate({self.name!r}, {self._count}/{self._threshold})"
