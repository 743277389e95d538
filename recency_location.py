#!/usr/bin/env python3
import math
from datetime import datetime, timedelta
from typing import AbstractSet, Optional

from text_normalizer import normalize_text

ONE_DAY = timedelta(days=1)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def days_since(created_at: datetime, now: datetime) -> int:
    # vacantes con fecha futura cuentan como de hoy
    return max(0, math.floor((now - created_at) / ONE_DAY))


def recency_score(created_at: datetime, now: datetime, window_days: int = 30, max_score: float = 30.0) -> float:
    """Decaimiento lineal de max_score (hoy) a 0 (window_days o más)."""
    if window_days <= 0:
        return 0.0
    days = days_since(created_at, now)
    return float(max(0, round_half_up((1 - min(days, window_days) / window_days) * max_score)))


def location_boost(posting_location: Optional[str], volunteer_locations: AbstractSet[str], bonus: float = 0.2) -> float:
    if not volunteer_locations or not posting_location:
        return 0.0
    wanted = {normalize_text(loc) for loc in volunteer_locations}
    return bonus if normalize_text(posting_location) in wanted else 0.0
