"""Donor fan-out and requester notifications."""
import logging
import time
from datetime import datetime, timezone

from donorlink import database
from donorlink.config import settings
from donorlink.matching.compatibility import compatible_donor_groups
from donorlink.notifications.mailer import send_email, donor_request_email, response_email
from donorlink.notifications.sms import send_sms, donor_request_sms, is_sms_enabled

logger = logging.getLogger(__name__)


def notify_nearby_donors(blood_request: dict) -> dict:
    """
    Notify available, compatible donors near the request and record who was contacted.
    A failure for one donor is logged and the loop moves on.
    """
    groups = compatible_donor_groups(blood_request["blood_group"])
    donors = database.find_nearby_donors(
        blood_request["location"]["coordinates"],
        settings.donor_search_radius_km,
        groups,
        settings.max_donors_notified,
    )
    logger.info("Found %d nearby compatible donors for request %s", len(donors), blood_request.get("id"))

    notifications = []
    failed = 0
    for donor in donors:
        try:
            sent_at = datetime.now(timezone.utc).isoformat()
            if donor.get("email"):
                subject, body = donor_request_email(donor, blood_request)
                send_email(donor["email"], subject, body)
                notifications.append({"donor_id": donor["id"], "method": "email", "notification_date": sent_at})

            if donor.get("phone") and is_sms_enabled():
                send_sms(donor["phone"], donor_request_sms(blood_request))
                notifications.append({"donor_id": donor["id"], "method": "sms", "notification_date": sent_at})

            if settings.notification_delay_seconds:
                time.sleep(settings.notification_delay_seconds)
        except Exception as e:
            failed += 1
            logger.error("Failed to notify donor %s: %s", donor.get("id"), e)

    database.update_blood_request(blood_request["id"], {"notified_donors": notifications})

    return {
        "donors_notified": len(notifications),
        "methods": ["email", "sms"],
        "failed": failed,
    }


def run_donor_fanout(blood_request: dict):
    """Background entry point; errors are logged, never raised."""
    try:
        result = notify_nearby_donors(blood_request)
        logger.info("Request %s: %d notifications sent, %d donors failed",
                    blood_request.get("id"), result["donors_notified"], result["failed"])
    except Exception:
        logger.exception("Error notifying nearby donors for request %s", blood_request.get("id"))


def notify_requester_of_response(blood_request: dict, donor: dict, response_status: str) -> bool:
    requester = database.get_user(blood_request["requester_id"])
    if not requester or not requester.get("email"):
        logger.warning("Request %s has no reachable requester", blood_request.get("id"))
        return False
    subject, body = response_email(requester, blood_request, donor, response_status)
    return send_email(requester["email"], subject, body)


def run_response_notification(blood_request: dict, donor: dict, response_status: str):
    try:
        notify_requester_of_response(blood_request, donor, response_status)
    except Exception:
        logger.exception("Error notifying requester of response on request %s", blood_request.get("id"))
