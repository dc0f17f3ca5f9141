from __future__ import annotations

from typing import Optional

from .interface import CarSnapshot, Direction, DispatchDecision
from .utils import closest, partition_requests, validate_tie_break


class NearestRequestDispatcher:
    """Always heads for the closest pending floor, ignoring sweep direction.

    Useful as a baseline: far requests can starve when new ones keep
    arriving near the car.
    """

    def __init__(self, tie_break: str = "above") -> None:
        self.tie_break = validate_tie_break(tie_break)

    def next_target(self, snapshot: CarSnapshot) -> Optional[DispatchDecision]:
        if not snapshot.requests:
            return None
        if snapshot.current_floor in snapshot.requests:
            return DispatchDecision(snapshot.current_floor, snapshot.direction)
        above, below = partition_requests(snapshot.current_floor, snapshot.requests)
        target = closest(snapshot.current_floor, above, below, self.tie_break)
        if target is None:
            return None
        direction = Direction.UP if target > snapshot.current_floor else Direction.DOWN
        return DispatchDecision(target, direction)
