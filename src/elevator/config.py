from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Mapping, Optional

from dispatch import Dispatcher, get_dispatcher

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .core import ElevatorCore

ENV_PREFIX = "LIFT_"


@dataclass(frozen=True)
class Bounds:
    """Inclusive range of floors the car may service."""

    min_floor: int
    max_floor: int

    def __post_init__(self) -> None:
        if self.min_floor > self.max_floor:
            raise ValueError(
                f"min_floor ({self.min_floor}) must not exceed max_floor ({self.max_floor})"
            )

    def __contains__(self, floor: object) -> bool:
        if isinstance(floor, bool) or not isinstance(floor, int):
            return False
        return self.min_floor <= floor <= self.max_floor


@dataclass
class CarConfig:
    """Settings for one simulated car and the loop that drives it."""

    min_floor: int = 1
    max_floor: int = 10
    initial_floor: Optional[int] = None
    tick_interval: float = 0.6
    policy: str = "scan"
    policy_options: Dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {self.tick_interval}")

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.min_floor, self.max_floor)

    def build_dispatcher(self) -> Dispatcher:
        return get_dispatcher(self.policy, **self.policy_options)

    def build_core(self) -> "ElevatorCore":
        from .core import ElevatorCore

        return ElevatorCore(
            self.bounds,
            initial_floor=self.initial_floor,
            dispatcher=self.build_dispatcher(),
        )

    @classmethod
    def from_dict(cls, data: Mapping) -> "CarConfig":
        bounds_cfg = data.get("bounds", {})
        policy_cfg = data.get("policy", {})
        return cls(
            min_floor=int(bounds_cfg.get("min_floor", 1)),
            max_floor=int(bounds_cfg.get("max_floor", 10)),
            initial_floor=data.get("initial_floor"),
            tick_interval=float(data.get("tick_interval", 0.6)),
            policy=policy_cfg.get("name", "scan"),
            policy_options=dict(policy_cfg.get("options", {})),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CarConfig":
        env = os.environ if environ is None else environ

        def read(name: str, cast, default):
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from exc

        options: Dict[str, object] = {}
        tie_break = read("TIE_BREAK", str, None)
        if tie_break is not None:
            options["tie_break"] = tie_break
        return cls(
            min_floor=read("MIN_FLOOR", int, 1),
            max_floor=read("MAX_FLOOR", int, 10),
            initial_floor=read("START_FLOOR", int, None),
            tick_interval=read("TICK_INTERVAL", float, 0.6),
            policy=read("POLICY", str, "scan"),
            policy_options=options,
        )
