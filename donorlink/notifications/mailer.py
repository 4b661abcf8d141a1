"""SMTP email transport and message bodies."""
import logging
import smtplib
from email.message import EmailMessage

from donorlink.config import settings
from donorlink.matching.eligibility import can_donate

logger = logging.getLogger(__name__)

SENDER_NAME = "Blood Donation System"


def is_email_configured() -> bool:
    return bool(settings.smtp_user and settings.smtp_password)


def send_email(to_email: str, subject: str, body: str) -> bool:
    """
    Send a plain-text email. Returns False when sending is disabled or SMTP is
    not configured (the message is logged instead). Transport errors propagate.
    """
    if settings.disable_notifications:
        logger.info("Email to %s skipped: notifications disabled", to_email)
        return False
    if not is_email_configured():
        logger.info("SMTP not configured, email would be sent to %s: %s", to_email, subject)
        return False

    msg = EmailMessage()
    msg["From"] = f'"{SENDER_NAME}" <{settings.smtp_user}>'
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port,
                      timeout=settings.notification_timeout_seconds) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)
    logger.info("Email sent to %s", to_email)
    return True


def request_link(blood_request: dict) -> str:
    return f"{settings.frontend_url}/blood-requests/{blood_request.get('id')}"


def donor_request_email(donor: dict, blood_request: dict) -> tuple[str, str]:
    """(subject, body) telling a donor about a nearby compatible request."""
    subject = f"Urgent Blood Donation Request - {blood_request['blood_group']}"
    hospital = blood_request["hospital"]
    contact = blood_request["contact_info"]
    doctor = blood_request["doctor_info"]

    lines = [
        f"Dear {donor.get('name', 'donor')},",
        "",
        "A blood donation request has been made near your location that matches your blood group.",
        "",
        f"Patient: {blood_request.get('patient_name')}",
        f"Blood group needed: {blood_request['blood_group']}",
        f"Units required: {blood_request['units_needed']}",
        f"Urgency: {blood_request['urgency'].upper()}",
        f"Required by: {blood_request['required_by']}",
        f"Medical reason: {blood_request['medical_reason']}",
        "",
        f"Hospital: {hospital['name']}, {hospital['address']} ({hospital['phone']})",
        f"Primary contact: {contact['primary_phone']}",
    ]
    if contact.get("alternate_phone"):
        lines.append(f"Alternate contact: {contact['alternate_phone']}")
    lines.append(f"Doctor: {doctor['name']} - {doctor['phone']}")
    lines.append("")
    lines.append(f"Your blood group ({donor.get('blood_group')}) is compatible with this request.")
    if can_donate(donor):
        lines.append(f"You are eligible to donate. Respond here: {request_link(blood_request)}")
    else:
        lines.append(
            f"It has been less than {settings.donation_interval_days} days since your last donation. "
            "Please verify your eligibility before responding."
        )
    lines.append(f"Distance: within {settings.donor_search_radius_km:.0f}km of your location")
    return subject, "\n".join(lines)


def response_email(requester: dict, blood_request: dict, donor: dict, response_status: str) -> tuple[str, str]:
    """(subject, body) telling a requester that a donor responded."""
    subject = f"Blood Donation Response - {donor.get('name')}"
    if response_status == "confirmed":
        next_steps = "The donor has confirmed their availability. Please coordinate directly with the donor."
    else:
        next_steps = "The donor has expressed interest. Please follow up to confirm their availability."

    body = "\n".join([
        f"Dear {requester.get('name', 'requester')},",
        "",
        f"A donor has responded to your blood donation request for {blood_request.get('patient_name')}.",
        "",
        f"Donor: {donor.get('name')}",
        f"Blood group: {donor.get('blood_group')}",
        f"Status: {response_status.upper()}",
        f"Total donations: {donor.get('total_donations', 0)}",
        f"Rating: {donor.get('rating', 5)}/5",
        "",
        next_steps,
        f"Arrange for the donation at {blood_request['hospital']['name']}.",
    ])
    return subject, body
