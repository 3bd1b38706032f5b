"""Summary statistics over glucose readings.

Thresholds (mg/dL): below 70 is low, 70-140 is in range, up to 180 is
elevated, anything higher is high.
"""

import math
from typing import Dict, Iterable, List

from schemas.glucose_schema import GlucoseStats, ReadingRecord

LOW_THRESHOLD = 70
TARGET_MAX = 140
ELEVATED_MAX = 180

LEVELS = ("low", "in_range", "elevated", "high")


def classify_reading(value: int) -> str:
    """Bucket a glucose value into low, in_range, elevated or high."""
    if value < LOW_THRESHOLD:
        return "low"
    if value <= TARGET_MAX:
        return "in_range"
    if value <= ELEVATED_MAX:
        return "elevated"
    return "high"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def summarize_readings(readings: Iterable[ReadingRecord]) -> GlucoseStats:
    """Average, extremes, time-in-range percentage and level distribution."""
    readings: List[ReadingRecord] = list(readings)
    distribution: Dict[str, int] = {level: 0 for level in LEVELS}
    if not readings:
        return GlucoseStats(count=0, distribution=distribution)

    for r in readings:
        distribution[classify_reading(r.value)] += 1

    values = [r.value for r in readings]
    # first reading wins ties, matching newest-first input order
    highest = max(readings, key=lambda r: r.value)

    return GlucoseStats(
        count=len(readings),
        average=_round_half_up(sum(values) / len(values)),
        minimum=min(values),
        maximum=highest.value,
        highest_at=highest.timestamp,
        in_range_percent=_round_half_up(distribution["in_range"] * 100 / len(readings)),
        distribution=distribution,
    )
