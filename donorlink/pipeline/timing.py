"""Timing anomalies: odd submission hours and implausible deadlines."""
from datetime import datetime

from donorlink.timeutils import as_aware, hours_until

MAX_SCORE = 15


def calculate_timing_score(request: dict, now: datetime) -> tuple[int, list[str]]:
    """
    `now` is the submission time; its local hour decides the late-night check.
    Returns (score 0-15, list of triggered rules).
    """
    now = as_aware(now)
    triggered = []
    score = 0

    if now.hour >= 23 or now.hour < 6:
        score += 5
        triggered.append(f"TIMING_LATE_NIGHT: submitted at {now:%H:%M}")

    remaining = hours_until(request["required_by"], now)
    if remaining < 2:
        score += 15
        triggered.append(f"TIMING_TOO_URGENT: needed in {remaining:.1f}h")
    elif remaining > 30 * 24:
        score += 10
        triggered.append(f"TIMING_FAR_FUTURE: needed in {remaining / 24:.0f} days")

    return min(score, MAX_SCORE), triggered
