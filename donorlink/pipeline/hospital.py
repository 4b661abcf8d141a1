"""Hospital information check: placeholder names and addresses outside the request city."""

MAX_SCORE = 15

GENERIC_HOSPITAL_NAMES = {
    "city hospital", "general hospital", "medical center",
    "clinic", "healthcare", "hospital",
}


def calculate_hospital_score(request: dict) -> tuple[int, list[str]]:
    """Returns (score 0-15, list of triggered rules)."""
    hospital = request["hospital"]
    city = request["location"]["city"].lower()
    triggered = []
    score = 0

    if hospital["name"].lower() in GENERIC_HOSPITAL_NAMES:
        score += 10
        triggered.append(f"HOSPITAL_GENERIC_NAME: {hospital['name']}")

    if city not in hospital["address"].lower():
        score += 8
        triggered.append(f"HOSPITAL_ADDRESS_MISMATCH: address does not mention {request['location']['city']}")

    return min(score, MAX_SCORE), triggered
