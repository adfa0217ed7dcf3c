# PURPOSE: Growth projections shown next to a recommendation.
# CONTEXT: annuity_future_value feeds the engine narrative for monthly investors;
#          growth_series feeds the year-by-year chart in the pipeline output.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
from typing import Dict, List, Optional

import numpy as np

# Long-run average annual return assumed for the monthly projection.
ANNUAL_RETURN = 0.07

# (base annual rate, width of the uniform jitter band) per risk tier.
GROWTH_RATES = {
    "low": (0.06, 0.02),
    "medium": (0.08, 0.03),
    "high": (0.10, 0.04),
}


def annuity_future_value(monthly_amount: float, years: int, annual_rate: float = ANNUAL_RETURN) -> float:
    """
    Future value of a monthly contribution paid at the start of each month.

    FV = m * ((1 + r)^n - 1) / r * (1 + r), with r = annual_rate / 12, n = years * 12.
    """
    r = annual_rate / 12
    n = years * 12
    if r == 0:
        return float(monthly_amount * n)
    return float(monthly_amount * ((1 + r) ** n - 1) / r * (1 + r))


def growth_series(
    initial_amount: float,
    years: int,
    monthly_amount: Optional[float] = None,
    risk_tolerance: str = "medium",
    seed: Optional[int] = None,
) -> List[Dict[str, float]]:
    """
    Year-by-year portfolio value for charting.

    parameters:
    - initial_amount: float – lump sum at the start (0 for pure monthly investors).
    - years: int – horizon; the series covers year 0..years inclusive.
    - monthly_amount: float|None – contribution added as a yearly block when set.
    - risk_tolerance: str – low/medium/high, selects the base rate and jitter.
    - seed: int|None – RNG seed so a demo renders the same curve every time.

    returns:
    - list[dict] – [{"year": 0, "value": 10800.0}, ...] with values rounded to whole Rand.
    """
    base, band = GROWTH_RATES.get(risk_tolerance, GROWTH_RATES["medium"])
    rng = np.random.default_rng(seed if seed is not None else 42)
    rates = base + rng.uniform(-band / 2, band / 2, size=years + 1)

    value = float(initial_amount)
    out = []
    for year, rate in enumerate(rates):
        if monthly_amount:
            value += monthly_amount * 12
        value *= 1 + float(rate)
        out.append({"year": year, "value": float(round(value))})
    return out
