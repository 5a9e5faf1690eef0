"""Score arithmetic shared by agents, records, and the aggregator.

All rounding is half-up (``floor(x + 0.5)``) so a composite can always
be reproduced exactly from the four stored sub-scores.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Round and clamp a raw value into the closed range [0, 100].

    NaN collapses to 0 and infinities saturate at the range bounds.
    """
    if math.isnan(value):
        return 0
    if value <= 0:
        return 0
    if value >= 100:
        return 100
    return round_half_up(value)


def compute_composite(
    size: float,
    subject: float,
    creativity: float,
    mood: float,
) -> int:
    """Combine the four sub-scores into the composite score.

    Unweighted arithmetic mean, rounded half-up. Pure function.
    """
    total = size + subject + creativity + mood
    return round_half_up(total / 4)
