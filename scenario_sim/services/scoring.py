"""Score aggregation over per-decision scores (0-100).

final_score() must be reproducible from the persisted decisions alone, so it
takes nothing but the ordered score list.
"""
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from scenario_sim.core.exceptions import InsufficientData

MIN_SCORE = 0
MAX_SCORE = 100


def _checked(scores: Sequence[int]) -> list[int]:
    if not scores:
        raise InsufficientData("Cannot aggregate an empty score list")
    values = [int(s) for s in scores]
    for value in values:
        if not MIN_SCORE <= value <= MAX_SCORE:
            raise ValueError(f"Score {value} outside {MIN_SCORE}..{MAX_SCORE}")
    return values


def running_score(scores: Sequence[int]) -> float:
    """Arithmetic mean of the scores seen so far (informational, unrounded)."""
    values = _checked(scores)
    return sum(values) / len(values)


def final_score(scores: Sequence[int]) -> int:
    """Mean of all decision scores, rounded half up to an integer."""
    values = _checked(scores)
    mean = Decimal(sum(values)) / Decimal(len(values))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def progress_percent(current_step: int, total_steps: int) -> float:
    """Share of steps answered, 0-100, rounded to one decimal."""
    if total_steps <= 0:
        return 0.0
    answered = min(max(current_step - 1, 0), total_steps)
    return round(answered / total_steps * 100, 1)
