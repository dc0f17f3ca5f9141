import threading
import time

import pytest

from dispatch import Direction
from elevator import Bounds, ElevatorCore, Stepper


def test_interval_must_be_positive(core):
    with pytest.raises(ValueError):
        Stepper(core, tick_interval=0)


def test_tick_emits_events(core):
    stepper = Stepper(core)
    arrivals = []
    states = []
    stepper.on_event("arrival", arrivals.append)
    stepper.on_event("tick", states.append)

    core.add_request(2)
    stepper.tick()
    stepper.tick()

    assert [s.current_floor for s in states] == [2, 2]
    assert arrivals == [{"floor": 2, "tick": 2}]
    assert stepper.ticks == 2


def test_run_until_idle_reports_ticks(core):
    stepper = Stepper(core)
    visits = []
    stepper.on_event("arrival", lambda payload: visits.append(payload["floor"]))
    for floor in (4, 2, 8):
        core.add_request(floor)

    assert stepper.run_until_idle() == 10
    assert visits == [2, 4, 8]
    assert core.state().direction is Direction.IDLE


def test_run_fixed_ticks_returns_last_state(core):
    core.add_request(6)
    state = Stepper(core).run(3)
    assert state.current_floor == 4
    assert state.direction is Direction.UP


def test_hook_errors_propagate(core):
    stepper = Stepper(core)

    def boom(_state):
        raise RuntimeError("hook failed")

    stepper.on_event("tick", boom)
    with pytest.raises(RuntimeError):
        stepper.tick()


def test_background_thread_drains_requests():
    core = ElevatorCore(Bounds(1, 6))
    stepper = Stepper(core, tick_interval=0.005)
    stepper.start()
    try:
        assert stepper.running
        core.add_request(6)
        core.add_request(3)
        deadline = time.monotonic() + 5
        while core.state().requests and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        stepper.stop(timeout=1)

    assert not stepper.running
    state = core.state()
    assert state.requests == ()
    assert state.current_floor == 6
    assert state.direction is Direction.IDLE


def test_stop_interrupts_long_wait(core):
    stepper = Stepper(core, tick_interval=30)
    stepper.start()
    started = time.monotonic()
    stepper.stop(timeout=5)
    assert time.monotonic() - started < 5
    assert stepper.ticks == 0


def test_arrival_reported_when_floor_requested_again_right_after(monkeypatch):
    core = ElevatorCore(Bounds(1, 10), initial_floor=5)
    core.add_request(6)
    core.add_request(8)
    core.step()
    assert core.state().current_floor == 6

    real_advance = core.advance

    def advance_then_request_again():
        serviced = real_advance()
        assert core.add_request(6) is True
        return serviced

    monkeypatch.setattr(core, "advance", advance_then_request_again)
    stepper = Stepper(core)
    arrivals = []
    stepper.on_event("arrival", arrivals.append)

    stepper.tick()

    assert arrivals == [{"floor": 6, "tick": 1}]
    assert core.state().requests == (8, 6)


def test_advance_reports_serviced_floor(core):
    core.add_request(2)
    assert core.advance() is None
    assert core.advance() == 2
    assert core.advance() is None


def test_restart_after_timed_out_stop_keeps_single_thread():
    core = ElevatorCore(Bounds(1, 10))
    core.add_request(9)
    stepper = Stepper(core, tick_interval=0.005)
    entered = threading.Event()
    release = threading.Event()

    def slow_hook(_state):
        entered.set()
        release.wait(5)

    stepper.on_event("tick", slow_hook)
    stepper.start()
    try:
        assert entered.wait(5)
        stepper.stop(timeout=0.05)
        assert stepper.running

        stepper.start()
        live = [t for t in threading.enumerate() if t.name == "elevator-stepper" and t.is_alive()]
        assert len(live) == 1
    finally:
        release.set()
        stepper.stop(timeout=5)

    assert not stepper.running
    assert not [t for t in threading.enumerate() if t.name == "elevator-stepper" and t.is_alive()]
