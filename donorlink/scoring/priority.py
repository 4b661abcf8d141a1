"""Dispatch priority for a blood request."""
from datetime import datetime
from typing import Optional

from donorlink.timeutils import hours_until

BASE_PRIORITY = 50

URGENCY_POINTS = {
    "critical": 40,
    "high": 30,
    "medium": 20,
    "low": 10,
}


def fraud_penalty(fraud_score: int) -> int:
    if fraud_score > 70:
        return 30
    if fraud_score > 50:
        return 20
    if fraud_score > 30:
        return 10
    return 0


def time_pressure_points(hours_left: float) -> int:
    if hours_left <= 6:
        return 20
    if hours_left <= 24:
        return 15
    if hours_left <= 72:
        return 10
    return 5


def calculate_priority(urgency: str, required_by, units_needed: int, fraud_score: int,
                       now: Optional[datetime] = None) -> int:
    """
    Urgency, time pressure and units raise priority; a high fraud score lowers it.
    Returns an integer clamped to 1-100.
    """
    now = now or datetime.now()
    urgency = getattr(urgency, "value", urgency)

    score = BASE_PRIORITY
    score += URGENCY_POINTS.get(urgency, 0)
    score += time_pressure_points(hours_until(required_by, now))
    score += min(units_needed * 2, 10)
    score -= fraud_penalty(fraud_score)

    return max(1, min(100, score))
