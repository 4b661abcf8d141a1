"""Request intake: score, prioritize and shape a new blood request for storage."""
from datetime import datetime, timedelta
from typing import Optional

from donorlink.pipeline.processor import analyze_request
from donorlink.scoring.priority import calculate_priority
from donorlink.timeutils import as_aware

EXPIRY_HOURS = {
    "critical": 6,
    "high": 24,
    "medium": 72,
    "low": 168,
}

UPDATABLE_FIELDS = ("urgency", "contact_info", "required_by", "status")


def build_request_record(payload: dict, requester: dict, counts: Optional[dict] = None,
                         now: Optional[datetime] = None) -> tuple[dict, dict]:
    """
    Returns (record, assessment). The priority always reads the fraud score
    computed in this same call.
    """
    now = as_aware(now or datetime.now())
    assessment = analyze_request(payload, requester, counts=counts, now=now)
    priority = calculate_priority(
        payload["urgency"], payload["required_by"], payload["units_needed"], assessment["score"], now
    )
    expires_at = now + timedelta(hours=EXPIRY_HOURS.get(payload["urgency"], 72))

    record = {
        **payload,
        "requester_id": requester["id"],
        "status": "active",
        "responses": [],
        "notified_donors": [],
        "fraud_check": {
            "score": assessment["score"],
            "factors": assessment["factors"],
            "is_reviewed": False,
        },
        "priority": priority,
        "expires_at": expires_at.isoformat(),
    }
    return record, assessment


def apply_request_update(existing: dict, updates: dict, now: Optional[datetime] = None) -> dict:
    """
    Keep only editable fields. A new urgency recomputes priority from the stored
    fraud score; the fraud check itself is never re-run.
    """
    changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
    if "urgency" in changes:
        merged = {**existing, **changes}
        changes["priority"] = calculate_priority(
            merged["urgency"],
            merged["required_by"],
            merged["units_needed"],
            (existing.get("fraud_check") or {}).get("score", 0),
            now,
        )
    return changes
