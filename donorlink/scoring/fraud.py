"""Fraud score: sum of the capped sub-check scores, capped at 100."""
from donorlink.config import settings

FACTOR_LABELS = {
    "frequency": "High request frequency",
    "location": "Location inconsistency",
    "contact": "Suspicious contact patterns",
    "timing": "Unusual timing patterns",
    "medical_reason": "Suspicious medical reason",
    "hospital": "Hospital information concerns",
}


def get_risk_tier(score: int) -> str:
    if score >= settings.high_risk_threshold:
        return "high"
    if score >= settings.medium_risk_threshold:
        return "medium"
    if score >= settings.low_risk_threshold:
        return "low"
    return "minimal"


def calculate_fraud_score(indicators: dict[str, int]) -> tuple[int, list[dict], str]:
    """
    Combine sub-check scores keyed by FACTOR_LABELS names.
    Returns (score 0-100, factors, risk tier). Zero sub-scores produce no factor.
    """
    factors = []
    total = 0
    for name, label in FACTOR_LABELS.items():
        weight = int(indicators.get(name, 0))
        if weight > 0:
            factors.append({"factor": label, "weight": weight})
            total += weight

    score = min(total, 100)
    return score, factors, get_risk_tier(score)
