"""CLI for running offline LiftCore scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from elevator import CarConfig, CarState, ElevatorCore, Stepper


def build_simulation(config: Dict) -> Stepper:
    car_config = CarConfig.from_dict(config)
    core = car_config.build_core()
    return Stepper(core, tick_interval=car_config.tick_interval)


def scheduled_requests(config: Dict) -> Dict[int, List[int]]:
    """Group scenario requests by the tick at which they are injected."""
    schedule: Dict[int, List[int]] = {}
    for entry in config.get("requests", []):
        if isinstance(entry, dict):
            tick, floor = int(entry.get("tick", 0)), entry["floor"]
        else:
            tick, floor = 0, entry
        schedule.setdefault(tick, []).append(floor)
    return schedule


def _inject(core: ElevatorCore, floors: List[int], tick: int, rejected: List[Dict]) -> None:
    for floor in floors:
        if not core.add_request(floor):
            rejected.append({"tick": tick, "floor": floor})


def run_simulation(stepper: Stepper, config: Dict) -> Dict:
    max_ticks = config.get("max_ticks", 500)
    schedule = scheduled_requests(config)
    last_injection = max(schedule, default=0)
    visits: List[int] = []
    rejected: List[Dict] = []
    trace: List[Dict] = []

    def record(state: CarState) -> None:
        entry = state.to_dict()
        entry["tick"] = stepper.ticks
        trace.append(entry)

    stepper.on_event("arrival", lambda payload: visits.append(payload["floor"]))
    stepper.on_event("tick", record)

    while stepper.ticks < max_ticks:
        _inject(stepper.core, schedule.get(stepper.ticks, []), stepper.ticks, rejected)
        if stepper.ticks >= last_injection and not stepper.core.state().requests:
            break
        stepper.tick()

    final_state = stepper.core.state()
    return {
        "ticks": stepper.ticks,
        "visits": visits,
        "rejected": rejected,
        "final_state": final_state.to_dict(),
        "drained": not final_state.requests,
        "trace": trace,
    }


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the per-tick trace as JSON",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    try:
        stepper = build_simulation(config)
    except ValueError as exc:
        parser.error(str(exc))
    outcome = run_simulation(stepper, config)

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "policy": config.get("policy", {}).get("name", "scan"),
        **outcome,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Policy: {results['policy']}")
    print(f"Ticks: {results['ticks']}")
    print(f"Visit order: {results['visits']}")
    if results["rejected"]:
        print(f"Rejected requests: {results['rejected']}")
    if not results["drained"]:
        print(f"Still pending: {results['final_state']['requests']}")
    if args.output:
        print(f"Saved trace to {args.output}")


if __name__ == "__main__":
    main()
