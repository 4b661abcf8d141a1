"""Fraud-score conditions on donor fan-out and the requester-facing warning."""
from typing import Optional

from donorlink.config import settings

FRAUD_WARNING = "This request has been flagged for review"


def should_notify_donors(fraud_score: int) -> bool:
    return fraud_score < settings.notification_suppression_threshold


def fraud_warning(fraud_score: int) -> Optional[str]:
    if fraud_score > settings.fraud_warning_threshold:
        return FRAUD_WARNING
    return None
