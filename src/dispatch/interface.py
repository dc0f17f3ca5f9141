from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple


class Direction(str, Enum):
    """Travel bias of the car."""

    IDLE = "idle"
    UP = "up"
    DOWN = "down"

    @property
    def sign(self) -> int:
        if self is Direction.UP:
            return 1
        if self is Direction.DOWN:
            return -1
        return 0


@dataclass(frozen=True)
class CarSnapshot:
    """Lightweight view of the car for dispatch decisions."""

    current_floor: int
    requests: Tuple[int, ...]
    direction: Direction


@dataclass(frozen=True)
class DispatchDecision:
    """Target floor chosen by a dispatcher and the direction it commits to."""

    floor: int
    direction: Direction


class Dispatcher(Protocol):
    """Strategy interface for picking the car's next target floor."""

    def next_target(self, snapshot: CarSnapshot) -> Optional[DispatchDecision]:
        """
        Return the next floor to head for, or None when nothing is pending.

        Implementations must be pure: the returned direction is applied by
        the caller, never by the dispatcher itself.
        """
        ...
