"""Donor eligibility based on time since last donation."""
from datetime import datetime
from typing import Optional

from donorlink.config import settings
from donorlink.timeutils import as_aware, parse_timestamp


def days_since_last_donation(donor: dict, now: Optional[datetime] = None) -> Optional[int]:
    last_donation = parse_timestamp(donor.get("last_donation"))
    if last_donation is None:
        return None
    now = as_aware(now or datetime.now())
    return int((now - last_donation).total_seconds() // 86400)


def can_donate(donor: dict, now: Optional[datetime] = None) -> bool:
    """A donor may give again once the minimum interval has passed, or if they never donated."""
    last_donation = parse_timestamp(donor.get("last_donation"))
    if last_donation is None:
        return True
    now = as_aware(now or datetime.now())
    days = (now - last_donation).total_seconds() / 86400
    return days >= settings.donation_interval_days


def with_eligibility(donor: dict, now: Optional[datetime] = None) -> dict:
    return {
        **donor,
        "can_donate": can_donate(donor, now),
        "days_since_last_donation": days_since_last_donation(donor, now),
    }
