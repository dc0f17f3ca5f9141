from __future__ import annotations

from typing import Iterable, List, Tuple

TIE_BREAKS = ("above", "below")


def partition_requests(current_floor: int, requests: Iterable[int]) -> Tuple[List[int], List[int]]:
    """Split requests around the car, nearest first on each side.

    ``above`` is sorted ascending and ``below`` descending so that index 0
    is always the closest floor in that direction. A request equal to the
    current floor lands in neither list.
    """

    above = sorted(floor for floor in requests if floor > current_floor)
    below = sorted((floor for floor in requests if floor < current_floor), reverse=True)
    return above, below


def validate_tie_break(tie_break: str) -> str:
    value = str(tie_break).lower()
    if value not in TIE_BREAKS:
        raise ValueError(f"Unknown tie break '{tie_break}'. Available: {', '.join(TIE_BREAKS)}")
    return value


def closest(current_floor: int, above: List[int], below: List[int], tie_break: str) -> int | None:
    """Pick the nearest of the two side candidates.

    At equal distance the side named by ``tie_break`` wins.
    """

    if not above and not below:
        return None
    if not below:
        return above[0]
    if not above:
        return below[0]
    up_distance = above[0] - current_floor
    down_distance = current_floor - below[0]
    if up_distance == down_distance:
        return above[0] if tie_break == "above" else below[0]
    return above[0] if up_distance < down_distance else below[0]
