"""LifecycleController — run/pause/stop scheduler around any tickable engine.

Architecture
------------
The controller owns one daemon thread (``sim-tick``) and nothing about the
simulated world.  The loop is cooperative:

  while not done:
      if not paused: step()      -> engine.tick(), then notify observers
      wait(delay)                -> cancellable; stop()/pause() wake it early

States:
  NOT_STARTED -> RUNNING <-> PAUSED
  any         -> STOPPED   (stop() is idempotent; a later start() begins a
                            fresh run and re-populates the engine)

A tick that reports the scenario is exhausted (``tick()`` returns False)
stops the run from inside the loop; that, and an explicit ``stop()``, are
the only ways the loop ends.  ``stop()`` clears the running flag before it
notifies, so a stop observer may ``start()`` the next run straight away; each
loop is bound to its run number and exits once a newer run exists.

Notification:
  Every state change (start, tick, pause toggle, stop, administrative
  action via ``perform()``) publishes a ``sim_state`` event whose data holds
  a reference to this controller.  Delivery to listeners is synchronous on
  the calling thread; for ticks that is the tick thread, so a slow observer
  slows the simulation.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Any, Callable, Generic, Protocol, TypeVar

from loguru import logger

from oilsweep.comms.event_bus import EventBus, Listener

STATE_EVENT = "sim_state"
DEFAULT_DELAY_MS = 100
_JOIN_TIMEOUT = 2.0


class Tickable(Protocol):
    def populate(self) -> None: ...

    def tick(self) -> bool: ...

    def force_stop(self) -> None: ...


E = TypeVar("E", bound=Tickable)
T = TypeVar("T")


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class LifecycleController(Generic[E]):
    """Drive ``engine.tick()`` on a background thread with pause/stop control."""

    def __init__(
        self,
        engine: E,
        event_bus: EventBus | None = None,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        self._engine = engine
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._delay_ms = max(0, int(delay_ms))
        self._state_lock = threading.Lock()
        self._wake = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = False
        self._running = False
        self._paused = False
        self._done = False
        self._tick_count = 0
        self._runs = 0

    # -- Wiring -------------------------------------------------------------

    @property
    def engine(self) -> E:
        return self._engine

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def add_observer(self, listener: Listener) -> None:
        self._event_bus.add_listener(listener)

    def remove_observer(self, listener: Listener) -> None:
        self._event_bus.remove_listener(listener)

    # -- Queries ------------------------------------------------------------

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_done(self) -> bool:
        return self._done

    @property
    def is_before_starting(self) -> bool:
        return not self._started and not self._done

    @property
    def is_pausable(self) -> bool:
        return self._running and not self._done

    @property
    def state(self) -> RunState:
        if self._done:
            return RunState.STOPPED
        if not self._started:
            return RunState.NOT_STARTED
        if self._paused:
            return RunState.PAUSED
        return RunState.RUNNING

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def tick_count(self) -> int:
        """Ticks completed in the current (or last) run."""
        return self._tick_count

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        with self._state_lock:
            if self._running:
                return
            self._engine.populate()
            self._started = True
            self._running = True
            self._paused = False
            self._done = False
            self._tick_count = 0
            self._runs += 1
            self._wake.clear()
            thread = threading.Thread(
                target=self._run_loop,
                args=(self._runs,),
                name=f"sim-tick-{self._runs}",
                daemon=True,
            )
            self._thread = thread
        logger.info("Starting the simulation")
        self.notify("start")
        thread.start()

    def stop(self) -> None:
        with self._state_lock:
            if self._done:
                return
            self._done = True
            self._running = False
            thread = self._thread
        self._wake.set()
        if (
            thread is not None
            and thread.is_alive()
            and thread is not threading.current_thread()
        ):
            thread.join(timeout=_JOIN_TIMEOUT)
        self._engine.force_stop()
        logger.info("Stop the simulation")
        self.notify("stop")

    def pause(self) -> bool:
        """Toggle pause.  Returns the new paused flag."""
        with self._state_lock:
            self._paused = not self._paused
            paused = self._paused
        self._wake.set()
        logger.info(f"Pause the simulation: {paused}")
        self.notify("pause")
        return paused

    def set_delay(self, milliseconds: int) -> None:
        """Inter-tick delay for subsequent waits; negative values clamp to 0."""
        self._delay_ms = max(0, int(milliseconds))
        logger.debug(f"Tick delay set to {self._delay_ms} ms")

    def step(self) -> bool:
        """Run one tick and notify.  Stops the run when the engine is exhausted."""
        if not self._engine.tick():
            logger.info("Scenario complete: nothing left to simulate")
            self.stop()
            return False
        self._tick_count += 1
        self.notify("tick")
        return True

    def perform(self, action: Callable[..., T], *args: Any, reason: str | None = None) -> T:
        """Apply an administrative action immediately and notify observers."""
        result = action(*args)
        self.notify(reason or getattr(action, "__name__", "action"))
        return result

    def notify(self, reason: str = "") -> None:
        self._event_bus.publish(STATE_EVENT, {"simulation": self, "reason": reason})

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the background loop exits.  Returns True if it did."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # -- Loop ---------------------------------------------------------------

    def _current(self, run: int) -> bool:
        return not self._done and self._runs == run

    def _run_loop(self, run: int) -> None:
        name = threading.current_thread().name
        started = time.monotonic()
        try:
            while self._current(run):
                if not self._paused:
                    self.step()
                # an observer may have stopped this run and started the next
                if not self._current(run):
                    break
                self._wake.wait(self._delay_ms / 1000.0)
                self._wake.clear()
        except Exception:
            logger.exception("Tick failed, stopping the simulation")
            if self._runs == run:
                self.stop()
        finally:
            with self._state_lock:
                if self._runs == run:
                    self._running = False
            elapsed_ms = (time.monotonic() - started) * 1000.0
            logger.info(f"{name} duration: {elapsed_ms:.0f} milliseconds")
