"""Location consistency: compare the request location with the requester's registered one."""
from donorlink.matching.geo import distance_between

MAX_SCORE = 20


def calculate_location_score(request: dict, requester: dict) -> tuple[int, list[str]]:
    """
    Returns (score 0-20, list of triggered rules).
    Requesters without a registered location are not checked.
    """
    home = requester.get("location")
    if not home:
        return 0, []

    target = request["location"]
    triggered = []
    score = 0

    if home.get("coordinates"):
        distance_km = distance_between(home["coordinates"], target["coordinates"])
        if distance_km > 100:
            score += 20
        elif distance_km > 50:
            score += 10
        elif distance_km > 25:
            score += 5
        if distance_km > 25:
            triggered.append(f"LOCATION_DISTANCE: request is {distance_km:.0f}km from registered location")

    if home["city"].lower() != target["city"].lower():
        score += 10
        triggered.append(f"LOCATION_CITY_MISMATCH: {home['city']} vs {target['city']}")
    if home["state"].lower() != target["state"].lower():
        score += 15
        triggered.append(f"LOCATION_STATE_MISMATCH: {home['state']} vs {target['state']}")

    return min(score, MAX_SCORE), triggered
