import json
from pathlib import Path

import run_scenario

SCENARIO_DIR = Path(__file__).resolve().parents[1] / "scenarios"


def run(config):
    stepper = run_scenario.build_simulation(config)
    return run_scenario.run_simulation(stepper, config)


def test_basic_scenario_visit_order():
    outcome = run({"bounds": {"min_floor": 1, "max_floor": 10}, "requests": [4, 2, 8]})
    assert outcome["visits"] == [2, 4, 8]
    assert outcome["ticks"] == 10
    assert outcome["drained"] is True
    assert outcome["final_state"] == {"current_floor": 8, "requests": [], "direction": "idle"}
    assert len(outcome["trace"]) == 10


def test_scheduled_requests_and_rejections():
    config = json.loads((SCENARIO_DIR / "basic_pickup.json").read_text())
    outcome = run(config)
    assert outcome["visits"] == [2, 4, 8, 4, 3]
    assert outcome["ticks"] == 17
    assert outcome["rejected"] == []


def test_rejected_requests_reported():
    outcome = run({"initial_floor": 3, "requests": [3, 5, 5, 99]})
    assert outcome["rejected"] == [
        {"tick": 0, "floor": 3},
        {"tick": 0, "floor": 5},
        {"tick": 0, "floor": 99},
    ]
    assert outcome["visits"] == [5]


def test_max_ticks_caps_run():
    outcome = run({"requests": [10], "max_ticks": 4})
    assert outcome["ticks"] == 4
    assert outcome["drained"] is False
    assert outcome["final_state"]["current_floor"] == 5


def test_save_results(tmp_path):
    target = tmp_path / "out" / "trace.json"
    run_scenario.save_results(target, {"ticks": 1})
    assert json.loads(target.read_text()) == {"ticks": 1}
