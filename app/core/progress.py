"""
Progress scoring shared by goals, key results, competency gaps and reviews.

scale_to_percent() maps a measured value onto a 0-100 completion percentage;
weighted_aggregate() folds weighted child percentages into one parent score.
Both are pure and never raise for finite inputs. Rejecting NaN, infinities
and negative weights is the caller's job (see validate_score_inputs and
validate_weights), done at the service and request-schema boundary.
"""
import math
from collections.abc import Mapping
from typing import Any, Iterable, Tuple

from app.core.exceptions import InvalidScoreInput

MIN_PERCENT = 0.0
MAX_PERCENT = 100.0


def _clamp_percent(value: float) -> float:
    return max(MIN_PERCENT, min(MAX_PERCENT, value))


def scale_to_percent(start: float, current: float, target: float) -> float:
    """Percentage of the way ``current`` has moved from ``start`` to ``target``.

    Clamped to [0, 100] and rounded to 2 decimals. A target below start is a
    "reduce to" measurement and works the same way.
    """
    if target == start:
        # Degenerate range: nothing to interpolate, binary done / not done
        return MAX_PERCENT if current >= target else MIN_PERCENT

    span = target - start
    if math.isinf(span):
        # Halving keeps differences of finite floats finite
        raw = (current / 2 - start / 2) / (target / 2 - start / 2) * 100
    else:
        raw = (current - start) / span * 100
    return round(_clamp_percent(raw), 2)


def _progress_and_weight(item: Any) -> Tuple[float, float]:
    if isinstance(item, Mapping):
        progress, weight = item.get("progress"), item.get("weight")
    elif isinstance(item, (tuple, list)):
        progress, weight = item
    else:
        progress, weight = getattr(item, "progress", None), getattr(item, "weight", None)
    return (
        0.0 if progress is None else float(progress),
        1.0 if weight is None else float(weight),
    )


def weighted_aggregate(items: Iterable[Any]) -> float:
    """Weighted mean of ``progress`` values, rounded to 2 decimals.

    Items may be mappings, ``(progress, weight)`` pairs or objects exposing
    ``progress`` and ``weight``. Missing weight counts as 1, missing progress
    as 0.
    """
    pairs = [_progress_and_weight(item) for item in items]
    if not pairs:
        return 0.0

    total_weight = sum(weight for _, weight in pairs)
    if total_weight <= 0:
        # Weightless collection contributes nothing
        return 0.0

    weighted = sum(progress * weight for progress, weight in pairs)
    return round(weighted / total_weight, 2)


def validate_score_inputs(**values: float) -> None:
    """Raise InvalidScoreInput naming every non-finite value."""
    bad = {name: str(value) for name, value in values.items()
           if value is not None and not math.isfinite(float(value))}
    if bad:
        raise InvalidScoreInput("Score inputs must be finite numbers", details={"fields": bad})


def validate_weights(items: Iterable[Any]) -> None:
    """Raise InvalidScoreInput for negative or non-finite weights/progress."""
    for index, item in enumerate(items):
        progress, weight = _progress_and_weight(item)
        validate_score_inputs(progress=progress, weight=weight)
        if weight < 0:
            raise InvalidScoreInput(
                "Weights must not be negative",
                details={"index": index, "weight": weight},
            )
