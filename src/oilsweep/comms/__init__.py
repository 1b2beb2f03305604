"""Internal messaging primitives."""

from oilsweep.comms.event_bus import EventBus

__all__ = ["EventBus"]
