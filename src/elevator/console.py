"""Line-oriented command source for driving a car from a terminal."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from dispatch import DISPATCHER_REGISTRY

from .config import CarConfig
from .core import CarState, ElevatorCore
from .stepper import Stepper

logger = logging.getLogger(__name__)

QUIT_WORDS = ("quit", "exit", "q")


@dataclass(frozen=True)
class Command:
    kind: str  # floor, status, quit, blank, invalid
    floor: Optional[int] = None
    text: str = ""


def parse_command(line: str) -> Command:
    """Parse ``<floor>``, ``go <floor>``, ``status`` or a quit word."""
    text = line.strip()
    if not text:
        return Command("blank")
    words = text.lower().split()
    if words[0] in QUIT_WORDS and len(words) == 1:
        return Command("quit", text=text)
    if words == ["status"]:
        return Command("status", text=text)
    if words[0] == "go" and len(words) == 2:
        words = words[1:]
    if len(words) == 1:
        try:
            return Command("floor", floor=int(words[0]), text=text)
        except ValueError:
            pass
    return Command("invalid", text=text)


def format_state(state: CarState) -> str:
    pending = ", ".join(str(floor) for floor in state.requests) or "none"
    return f"Floor {state.current_floor} | {state.direction.value.upper()} | pending: {pending}"


def rejection_reason(core: ElevatorCore, floor: int) -> str:
    """Best-effort explanation of why the core turned a floor down."""
    bounds = core.bounds
    if floor not in bounds:
        return f"valid floors are {bounds.min_floor}-{bounds.max_floor}"
    state = core.state()
    if floor in state.requests:
        return "already pending"
    if floor == state.current_floor:
        return "car is already there"
    return "not accepted"


class ConsoleSession:
    """Blocking read loop that feeds floor requests into the core."""

    def __init__(
        self, core: ElevatorCore, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
    ) -> None:
        self.core = core
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def run(self) -> None:
        for line in self.stdin:
            if not self.handle(line):
                return

    def handle(self, line: str) -> bool:
        """Process one line; return False when the session should end."""
        command = parse_command(line)
        if command.kind == "quit":
            return False
        if command.kind == "blank":
            return True
        if command.kind == "status":
            self.write(format_state(self.core.state()))
        elif command.kind == "floor":
            if self.core.add_request(command.floor):
                self.write(f"Request for floor {command.floor} accepted")
            else:
                reason = rejection_reason(self.core, command.floor)
                self.write(f"Request for floor {command.floor} ignored ({reason})")
        else:
            self.write(f"Unrecognised command: {command.text!r} (try '<floor>', 'go <floor>', 'status', 'quit')")
        return True

    def write(self, message: str) -> None:
        print(message, file=self.stdout, flush=True)


def build_parser(defaults: CarConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--min-floor", type=int, default=defaults.min_floor)
    parser.add_argument("--max-floor", type=int, default=defaults.max_floor)
    parser.add_argument("--start-floor", type=int, default=defaults.initial_floor)
    parser.add_argument(
        "--interval", type=float, default=defaults.tick_interval, help="Seconds between ticks"
    )
    parser.add_argument("--policy", choices=sorted(DISPATCHER_REGISTRY), default=defaults.policy)
    parser.add_argument(
        "--tie-break",
        choices=["above", "below"],
        default=defaults.policy_options.get("tie_break", "above"),
        help="Side preferred when two requests are equally close",
    )
    parser.add_argument("--log-level", default=os.environ.get("LIFT_LOG_LEVEL", "WARNING"))
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    try:
        defaults = CarConfig.from_env()
    except ValueError as exc:
        sys.exit(f"error: {exc}")
    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CarConfig(
            min_floor=args.min_floor,
            max_floor=args.max_floor,
            initial_floor=args.start_floor,
            tick_interval=args.interval,
            policy=args.policy,
            policy_options={"tie_break": args.tie_break},
        )
        core = config.build_core()
    except ValueError as exc:
        parser.error(str(exc))

    session = ConsoleSession(core)
    stepper = Stepper(core, config.tick_interval)
    stepper.on_event("arrival", lambda _payload: session.write(format_state(core.state())))

    session.write(format_state(core.state()))
    stepper.start()
    try:
        session.run()
    except KeyboardInterrupt:
        pass
    finally:
        stepper.stop(timeout=max(config.tick_interval * 2, 1.0))
        logger.info("Console session ended at %s", format_state(core.state()))
    session.write("Shutting down elevator.")


if __name__ == "__main__":
    main()
