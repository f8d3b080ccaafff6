import math
from typing import Dict, List, Mapping, NamedTuple, Sequence

from sipbuddy.models.product import QuantityEstimate, BEER, WINE, RTD

DRINKS_PER_GUEST_HOUR = 2
LITERS_PER_GUEST_HOUR = 0.5
DEFAULT_GUEST_COUNT = 10
DEFAULT_DURATION_HOURS = 4


class Packaging(NamedTuple):
    servings: int
    unit: str
    size: str


PACKAGING: Dict[str, Packaging] = {
    BEER: Packaging(12, "12-packs", "12 oz cans/bottles"),
    WINE: Packaging(5, "bottles", "750ml bottles"),
    RTD: Packaging(12, "12-packs", "12 oz cans"),
}


def _non_negative_int(value) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _percent(value) -> float:
    try:
        pct = float(value)
    except (TypeError, ValueError):
        return 0.0
    if pct != pct:
        return 0.0
    return min(max(pct, 0.0), 100.0)


def total_drinks(guests, hours) -> int:
    return _non_negative_int(guests) * _non_negative_int(hours) * DRINKS_PER_GUEST_HOUR


def estimate(guests, hours, splits: Mapping[str, float]) -> Dict[str, QuantityEstimate]:
    """Units to buy per category for a party.

    `splits` maps category to its share (0-100) of all drinks. Categories
    without packaging data are skipped.
    """
    total = total_drinks(guests, hours)
    out: Dict[str, QuantityEstimate] = {}
    for category, pct in splits.items():
        pack = PACKAGING.get(category)
        if pack is None:
            continue
        servings = total * _percent(pct) / 100
        out[category] = QuantityEstimate(
            quantity=math.ceil(servings / pack.servings),
            unit=pack.unit,
            size=pack.size,
            pack_size=pack.servings,
            total_servings=math.ceil(servings),
        )
    return out


def even_splits(categories: Sequence[str]) -> Dict[str, int]:
    if not categories:
        return {}
    base = 100 // len(categories)
    splits = {c: base for c in categories}
    splits[categories[-1]] = 100 - base * (len(categories) - 1)
    return splits


def rebalance_splits(categories: Sequence[str], changed: str, value) -> Dict[str, int]:
    """Pin one category's share and spread what is left over the others."""
    value = int(_percent(value))
    others: List[str] = [c for c in categories if c != changed]
    remaining = 100 - value
    base = remaining // len(others) if others else 0

    splits = {changed: value}
    for i, c in enumerate(others):
        splits[c] = remaining - base * (len(others) - 1) if i == len(others) - 1 else base
    return splits


def _positive_or(value, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number) or number <= 0:
        return default
    return number


def estimate_liters(guest_count=None, duration=None) -> Dict[str, float]:
    guest_count = _positive_or(guest_count, DEFAULT_GUEST_COUNT)
    duration = _positive_or(duration, DEFAULT_DURATION_HOURS)
    liters = guest_count * duration * LITERS_PER_GUEST_HOUR
    if not math.isfinite(liters):
        guest_count, duration = DEFAULT_GUEST_COUNT, DEFAULT_DURATION_HOURS
        liters = guest_count * duration * LITERS_PER_GUEST_HOUR
    return {
        "guestCount": _whole(guest_count),
        "duration": _whole(duration),
        "estimatedLiters": liters,
    }


def _whole(number: float):
    return int(number) if float(number).is_integer() else number
