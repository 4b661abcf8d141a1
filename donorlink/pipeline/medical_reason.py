"""Medical reason check: short, generic or pleading reasons."""

MAX_SCORE = 10

GENERIC_REASONS = [
    "emergency", "urgent", "operation", "surgery", "accident",
    "blood loss", "anemia", "transfusion needed",
]
PLEADING_PHRASES = ["please help", "urgent need"]


def calculate_medical_reason_score(request: dict) -> tuple[int, list[str]]:
    """Returns (score 0-10, list of triggered rules)."""
    reason = request["medical_reason"].lower()
    triggered = []
    score = 0

    if len(reason) < 50:
        matched = [g for g in GENERIC_REASONS if g in reason]
        if matched:
            score += 8
            triggered.append(f"REASON_GENERIC: short reason mentioning {matched[0]!r}")

    if any(phrase in reason for phrase in PLEADING_PHRASES):
        score += 5
        triggered.append("REASON_PLEADING: contains a stock appeal phrase")

    return min(score, MAX_SCORE), triggered
