import math
from collections.abc import Iterable
from datetime import UTC, datetime


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes so all comparisons are between aware values."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, 66.5 -> 67)."""
    return int(math.floor(value + 0.5))


def weighted_mean(pairs: Iterable[tuple[float, float]]) -> int:
    """Weighted mean of (value, weight) pairs, rounded to an integer.

    A total weight of zero yields 0 rather than a division error.

    Args:
        pairs: (value, weight) tuples, values on the 0-100 scale

    Returns:
        round(sum(value * weight) / sum(weight)), or 0 when the weights sum to 0
    """
    total = 0.0
    total_weight = 0.0
    for value, weight in pairs:
        total += value * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(total / total_weight)
