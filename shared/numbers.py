from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer; halves round toward positive infinity."""
    return int(math.floor(value + 0.5))


def safe_percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return (part / whole) * 100.0
