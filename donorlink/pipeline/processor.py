"""Fraud pipeline orchestrator: runs every sub-check over a request and combines the scores."""
import logging
from datetime import datetime
from typing import Optional

from donorlink import database
from donorlink.pipeline.frequency import calculate_frequency_score, fetch_request_counts
from donorlink.pipeline.location import calculate_location_score
from donorlink.pipeline.contact import calculate_contact_score
from donorlink.pipeline.timing import calculate_timing_score
from donorlink.pipeline.medical_reason import calculate_medical_reason_score
from donorlink.pipeline.hospital import calculate_hospital_score
from donorlink.scoring.fraud import calculate_fraud_score
from donorlink.timeutils import as_aware

logger = logging.getLogger(__name__)

FAILED_ASSESSMENT = {
    "score": 0,
    "factors": [],
    "risk_tier": "low",
    "triggered_rules": [],
    "error": "Analysis failed",
}


def analyze_request(request: dict, requester: dict, counts: Optional[dict] = None,
                    now: Optional[datetime] = None) -> dict:
    """
    Score a blood request for fraud indicators.
    `counts` holds the requester's prior request counts (last_24h, last_7d, last_30d);
    they are read from storage when not given.
    Never raises: any failure yields a zero score with tier "low".
    """
    try:
        now = as_aware(now or datetime.now())
        if counts is None:
            counts = fetch_request_counts(requester["id"], now)

        frequency_score, frequency_rules = calculate_frequency_score(counts)
        location_score, location_rules = calculate_location_score(request, requester)
        contact_score, contact_rules = calculate_contact_score(request, requester)
        timing_score, timing_rules = calculate_timing_score(request, now)
        reason_score, reason_rules = calculate_medical_reason_score(request)
        hospital_score, hospital_rules = calculate_hospital_score(request)

        indicators = {
            "frequency": frequency_score,
            "location": location_score,
            "contact": contact_score,
            "timing": timing_score,
            "medical_reason": reason_score,
            "hospital": hospital_score,
        }
        score, factors, risk_tier = calculate_fraud_score(indicators)

        triggered_rules = (frequency_rules + location_rules + contact_rules +
                           timing_rules + reason_rules + hospital_rules)
        if triggered_rules:
            logger.info("Fraud score %d (%s) for requester %s: %s",
                        score, risk_tier, requester.get("id"), "; ".join(triggered_rules))

        return {
            "score": score,
            "factors": factors,
            "risk_tier": risk_tier,
            "triggered_rules": triggered_rules,
        }
    except Exception:
        logger.exception("Fraud detection failed for requester %s", requester.get("id") if isinstance(requester, dict) else None)
        return {**FAILED_ASSESSMENT, "factors": [], "triggered_rules": []}


def batch_analyze(request_ids: list[str], now: Optional[datetime] = None) -> list[dict]:
    """Re-run the analysis over stored requests without persisting the result."""
    results = []
    for request_id in request_ids:
        try:
            blood_request = database.get_blood_request(request_id)
            if blood_request is None:
                results.append({"request_id": request_id, "error": "Blood request not found"})
                continue
            requester = database.get_user(blood_request["requester_id"]) or {}
            analysis = analyze_request(blood_request, requester, now=now)
            results.append({"request_id": request_id, "analysis": analysis})
        except Exception as e:
            logger.warning("Batch analysis failed for %s: %s", request_id, e)
            results.append({"request_id": request_id, "error": str(e)})
    return results
