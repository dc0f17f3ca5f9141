"""Single-car elevator core for LiftCore."""

from .config import Bounds, CarConfig
from .core import CarState, ElevatorCore
from .stepper import Stepper

__all__ = [
    "Bounds",
    "CarConfig",
    "CarState",
    "ElevatorCore",
    "Stepper",
]
