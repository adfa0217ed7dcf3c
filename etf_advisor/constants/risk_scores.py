RISK_SCORES = {
    "low": 3,
    "medium": 5,
    "high": 8,
}

# Age used when the intake never asked for one.
DEFAULT_AGE = 30


def tier_for_score(score: int) -> str:
    """Map a 1..10 risk score back onto the low/medium/high tiers."""
    return "low" if score <= 3 else ("medium" if score <= 5 else "high")
