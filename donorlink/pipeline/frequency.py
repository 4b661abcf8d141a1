"""Request frequency check: penalize requesters filing many requests in short windows."""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

from donorlink import database
from donorlink.config import settings
from donorlink.timeutils import as_aware

MAX_SCORE = 25

WINDOWS = {
    "last_24h": timedelta(hours=24),
    "last_7d": timedelta(days=7),
    "last_30d": timedelta(days=30),
}


def fetch_request_counts(requester_id: str, now: datetime) -> dict:
    """Count the requester's prior requests in each trailing window. The queries run concurrently."""
    now = as_aware(now)
    with ThreadPoolExecutor(max_workers=settings.count_query_workers) as pool:
        futures = {
            name: pool.submit(database.count_requests_since, requester_id, now - span)
            for name, span in WINDOWS.items()
        }
        return {name: future.result() for name, future in futures.items()}


def calculate_frequency_score(counts: dict) -> tuple[int, list[str]]:
    """
    Only the highest tier met in each window counts; the three windows are summed.
    Returns (score 0-25, list of triggered rules).
    """
    daily = counts.get("last_24h", 0)
    weekly = counts.get("last_7d", 0)
    monthly = counts.get("last_30d", 0)

    triggered = []
    score = 0

    if daily > 3:
        score += 25
    elif daily > 2:
        score += 15
    elif daily > 1:
        score += 5
    if daily > 1:
        triggered.append(f"FREQUENCY_24H: {daily} requests in 24h")

    if weekly > 10:
        score += 20
    elif weekly > 7:
        score += 10
    elif weekly > 5:
        score += 5
    if weekly > 5:
        triggered.append(f"FREQUENCY_7D: {weekly} requests in 7d")

    if monthly > 20:
        score += 15
    elif monthly > 15:
        score += 8
    if monthly > 15:
        triggered.append(f"FREQUENCY_30D: {monthly} requests in 30d")

    return min(score, MAX_SCORE), triggered
