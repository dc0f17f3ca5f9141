from __future__ import annotations

from typing import List

import pytest

from elevator import Bounds, ElevatorCore


def drain(core: ElevatorCore, max_ticks: int = 1000) -> List[int]:
    """Step the core until idle and return floors in the order serviced."""
    visits: List[int] = []
    for _ in range(max_ticks):
        before = core.state()
        if not before.requests:
            break
        core.step()
        after = core.state()
        visits.extend(floor for floor in before.requests if floor not in after.requests)
    return visits


@pytest.fixture
def core() -> ElevatorCore:
    return ElevatorCore(Bounds(1, 10))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "LIFT_MIN_FLOOR",
        "LIFT_MAX_FLOOR",
        "LIFT_START_FLOOR",
        "LIFT_TICK_INTERVAL",
        "LIFT_POLICY",
        "LIFT_TIE_BREAK",
        "LIFT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
