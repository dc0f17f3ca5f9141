from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

from .core import CarState, ElevatorCore

logger = logging.getLogger(__name__)


class Stepper:
    """Fixed-interval driver that advances the car one tick at a time."""

    def __init__(self, core: ElevatorCore, tick_interval: float = 0.6) -> None:
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick_interval}")
        self.core = core
        self.tick_interval = tick_interval
        self.ticks: int = 0
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def tick(self) -> CarState:
        serviced = self.core.advance()
        after = self.core.state()
        self.ticks += 1

        if serviced is not None:
            self._emit("arrival", {"floor": serviced, "tick": self.ticks})
        self._emit("tick", after)
        return after

    def run(self, ticks: int) -> CarState:
        state = self.core.state()
        for _ in range(ticks):
            state = self.tick()
        return state

    def run_until_idle(self, max_ticks: int = 1000) -> int:
        """Step until no requests remain; return the number of ticks taken."""
        taken = 0
        while self.core.state().requests and taken < max_ticks:
            self.tick()
            taken += 1
        return taken

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="elevator-stepper", daemon=True
        )
        self._thread.start()
        logger.info("Stepper started (interval %.2fs)", self.tick_interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Stepper thread still busy after %ss; it exits after its current tick", timeout)
                return
            self._thread = None
            logger.info("Stepper stopped after %d ticks", self.ticks)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.tick_interval):
            try:
                self.tick()
            except Exception:
                logger.exception("Stepper tick failed")
                raise

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
