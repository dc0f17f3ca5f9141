from __future__ import annotations

from typing import Dict, Type

from .interface import CarSnapshot, Direction, DispatchDecision, Dispatcher
from .nearest import NearestRequestDispatcher
from .scan import ScanDispatcher

__all__ = [
    "DISPATCHER_REGISTRY",
    "CarSnapshot",
    "Direction",
    "DispatchDecision",
    "Dispatcher",
    "NearestRequestDispatcher",
    "ScanDispatcher",
    "get_dispatcher",
]


DISPATCHER_REGISTRY: Dict[str, Type[Dispatcher]] = {
    "scan": ScanDispatcher,
    "nearest": NearestRequestDispatcher,
}


def get_dispatcher(name: str, **kwargs) -> Dispatcher:
    cls = DISPATCHER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(DISPATCHER_REGISTRY)}")
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid options for dispatcher '{name}': {exc}") from exc
