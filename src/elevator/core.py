from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dispatch import CarSnapshot, Direction, Dispatcher, ScanDispatcher

from .config import Bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarState:
    """Point-in-time copy of the car, safe to read without the core lock."""

    current_floor: int
    requests: Tuple[int, ...]
    direction: Direction

    def to_dict(self) -> dict:
        return {
            "current_floor": self.current_floor,
            "requests": list(self.requests),
            "direction": self.direction.value,
        }


class ElevatorCore:
    """A single car: pending floors, position and travel direction.

    Every public method takes the same lock for its whole body, so callers
    on different threads never observe a half-applied step.
    """

    def __init__(
        self,
        bounds: Bounds,
        initial_floor: Optional[int] = None,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        start = bounds.min_floor if initial_floor is None else initial_floor
        if start not in bounds:
            raise ValueError(
                f"initial floor {start!r} outside bounds [{bounds.min_floor}, {bounds.max_floor}]"
            )
        self.bounds = bounds
        self._dispatcher: Dispatcher = dispatcher or ScanDispatcher()
        self._current_floor = start
        self._requests: List[int] = []
        self._direction = Direction.IDLE
        self._lock = threading.Lock()

    def add_request(self, floor: int) -> bool:
        with self._lock:
            if floor not in self.bounds:
                logger.debug("Rejected floor %r: outside bounds", floor)
                return False
            if floor in self._requests:
                logger.debug("Rejected floor %d: already pending", floor)
                return False
            if floor == self._current_floor and self._direction is Direction.IDLE:
                logger.debug("Rejected floor %d: car is already there", floor)
                return False
            self._requests.append(floor)
            logger.debug("Accepted floor %d; pending %s", floor, self._requests)
            return True

    def next_target(self) -> Tuple[Optional[int], bool]:
        with self._lock:
            return self._next_target()

    def step(self) -> None:
        self.advance()

    def advance(self) -> Optional[int]:
        """Run one step and return the floor serviced by it, if any.

        The step and its report share one hold of the lock.
        """
        with self._lock:
            if not self._requests:
                self._direction = Direction.IDLE
                return None

            target, found = self._next_target()
            if not found:
                self._direction = Direction.IDLE
                return None

            if target != self._current_floor:
                self._direction = Direction.UP if target > self._current_floor else Direction.DOWN
                self._current_floor += self._direction.sign
                logger.debug(
                    "Moved %s to floor %d (target %d)",
                    self._direction.value,
                    self._current_floor,
                    target,
                )
                return None

            self._requests.remove(target)
            if not self._requests:
                self._direction = Direction.IDLE
            logger.info("Arrived at floor %d; pending %s", target, self._requests)
            return target

    def state(self) -> CarState:
        with self._lock:
            return CarState(self._current_floor, tuple(self._requests), self._direction)

    def set_dispatcher(self, dispatcher: Dispatcher) -> None:
        with self._lock:
            self._dispatcher = dispatcher

    def _next_target(self) -> Tuple[Optional[int], bool]:
        # Caller holds the lock.
        if not self._requests:
            return None, False
        snapshot = CarSnapshot(self._current_floor, tuple(self._requests), self._direction)
        decision = self._dispatcher.next_target(snapshot)
        if decision is None:
            logger.error(
                "No dispatch target for pending requests %s at floor %d",
                self._requests,
                self._current_floor,
            )
            return None, False
        self._direction = decision.direction
        return decision.floor, True
