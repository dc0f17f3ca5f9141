from __future__ import annotations

from typing import Optional

from .interface import CarSnapshot, Direction, DispatchDecision
from .utils import closest, partition_requests, validate_tie_break


class ScanDispatcher:
    """Implements the elevator (SCAN) algorithm for a single car.

    The car keeps sweeping in its committed direction while requests remain
    ahead of it and only reverses once that side is exhausted. An idle car
    heads for the closest request.
    """

    def __init__(self, tie_break: str = "above") -> None:
        self.tie_break = validate_tie_break(tie_break)

    def next_target(self, snapshot: CarSnapshot) -> Optional[DispatchDecision]:
        if not snapshot.requests:
            return None
        if snapshot.current_floor in snapshot.requests:
            return DispatchDecision(snapshot.current_floor, snapshot.direction)

        above, below = partition_requests(snapshot.current_floor, snapshot.requests)

        if snapshot.direction is Direction.UP:
            if above:
                return DispatchDecision(above[0], Direction.UP)
            if below:
                return DispatchDecision(below[0], Direction.DOWN)
            return None

        if snapshot.direction is Direction.DOWN:
            if below:
                return DispatchDecision(below[0], Direction.DOWN)
            if above:
                return DispatchDecision(above[0], Direction.UP)
            return None

        target = closest(snapshot.current_floor, above, below, self.tie_break)
        if target is None:
            return None
        direction = Direction.UP if target > snapshot.current_floor else Direction.DOWN
        return DispatchDecision(target, direction)
