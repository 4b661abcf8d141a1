"""SMS transport over the Twilio REST API."""
import logging
import requests

from donorlink.config import settings
from donorlink.notifications.mailer import request_link

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


def is_sms_enabled() -> bool:
    return bool(settings.sms_enabled and settings.twilio_account_sid
                and settings.twilio_auth_token and settings.twilio_from_number)


def send_sms(to_phone: str, body: str) -> bool:
    if settings.disable_notifications or not is_sms_enabled():
        logger.info("SMS would be sent to %s: %s", to_phone, body)
        return False

    response = requests.post(
        TWILIO_MESSAGES_URL.format(sid=settings.twilio_account_sid),
        data={"To": to_phone, "From": settings.twilio_from_number, "Body": body},
        auth=(settings.twilio_account_sid, settings.twilio_auth_token),
        timeout=settings.notification_timeout_seconds,
    )
    response.raise_for_status()
    logger.info("SMS sent to %s", to_phone)
    return True


def donor_request_sms(blood_request: dict) -> str:
    return (
        f"URGENT: Blood donation needed near you! {blood_request['blood_group']} - "
        f"{blood_request['units_needed']} units. Urgency: {blood_request['urgency'].upper()}. "
        f"Hospital: {blood_request['hospital']['name']}. "
        f"Contact: {blood_request['contact_info']['primary_phone']}. "
        f"Details: {request_link(blood_request)}"
    )
