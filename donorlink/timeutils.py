from datetime import datetime
from typing import Optional


def as_aware(value: datetime) -> datetime:
    """Naive datetimes are taken to be in local time."""
    return value if value.tzinfo else value.astimezone()


def parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return as_aware(value)


def hours_until(target, now: datetime) -> float:
    return (parse_timestamp(target) - as_aware(now)).total_seconds() / 3600
