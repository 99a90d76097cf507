"""
Shared confidence helpers.

Confidence is always an integer percentage:
- 0-49: low
- 50-69: medium
- 70-84: high
- 85-100: very high
"""

LOW_MAX = 49
MEDIUM_MAX = 69
HIGH_MAX = 84


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    """Clamp a score to [low, high]."""
    return max(low, min(high, value))


def clamp_confidence(value: float) -> int:
    return int(round(clamp(value)))


def confidence_category(percentage: int) -> str:
    if percentage <= LOW_MAX:
        return "low"
    if percentage <= MEDIUM_MAX:
        return "medium"
    if percentage <= HIGH_MAX:
        return "high"
    return "very-high"


def ratio_confidence(primary: float, total: float, fallback: int = 50) -> int:
    """Primary score as a percentage of all votes cast."""
    if total <= 0:
        return fallback
    return clamp_confidence(primary / total * 100)


def apply_competition_penalty(
    confidence: int,
    primary: float,
    secondary: float,
    threshold: float = 0.15,
    penalty: int = 15,
    floor: int = 60,
) -> int:
    """Lower confidence when the runner-up is within `threshold` of the winner."""
    if primary > 0 and primary - secondary < primary * threshold:
        return clamp_confidence(max(floor, confidence - penalty))
    return clamp_confidence(confidence)
