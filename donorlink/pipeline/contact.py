"""Contact pattern check: fake-looking or reused phone numbers."""
import re

MAX_SCORE = 15

REPEATED_DIGITS = re.compile(r"^(\d)\1{6,}$")
SEQUENTIAL_NUMBERS = {"1234567890", "0123456789"}


def digits_only(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def is_repeating_pattern(digits: str) -> bool:
    return bool(REPEATED_DIGITS.match(digits)) or digits in SEQUENTIAL_NUMBERS


def calculate_contact_score(request: dict, requester: dict) -> tuple[int, list[str]]:
    """Returns (score 0-15, list of triggered rules)."""
    primary_phone = request["contact_info"]["primary_phone"]
    triggered = []
    score = 0

    if requester.get("phone") != primary_phone:
        score += 5
        triggered.append("CONTACT_PHONE_DIFFERS: contact phone is not the requester's phone")

    contact = digits_only(primary_phone)
    if is_repeating_pattern(contact):
        score += 10
        triggered.append(f"CONTACT_PATTERN: {contact} looks fabricated")

    doctor = digits_only(request["doctor_info"]["phone"])
    hospital = digits_only(request["hospital"]["phone"])
    if doctor == hospital or doctor == contact or hospital == contact:
        score += 8
        triggered.append("CONTACT_SHARED_PHONE: doctor, hospital and contact phones overlap")

    return min(score, MAX_SCORE), triggered
