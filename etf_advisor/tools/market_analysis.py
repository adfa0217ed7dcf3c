# PURPOSE: Turn broad-market readings (S&P 500 move, VIX level) into a short
#          narrative and a list of {factor, impact} pairs for the advice text.
# CONTEXT: Called by the allocation engine when it assembles MarketAnalysis.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
from typing import List, Optional, Tuple

from etf_advisor.model_interface.types import Factor, MarketContext

UNAVAILABLE = "Market data unavailable"


def describe_market(sp_return: Optional[float], vix: Optional[float]) -> str:
    """
    One-sentence description of current conditions.

    returns:
    - str – momentum band from the S&P change, plus a volatility clause when VIX is known.
    """
    if sp_return is None:
        return UNAVAILABLE

    if sp_return > 2:
        description = "Markets are showing strong bullish momentum"
    elif sp_return > 0:
        description = "Markets are slightly positive with moderate growth potential"
    elif sp_return > -2:
        description = "Markets are showing slight weakness but remain stable"
    else:
        description = "Markets are experiencing significant downward pressure"

    if vix:
        if vix < 15:
            description += ", with low volatility indicating stable conditions"
        elif vix < 25:
            description += ", with moderate market volatility"
        else:
            description += ", with high volatility suggesting increased uncertainty"
    return description


def market_factors(sp_return: Optional[float], vix: Optional[float]) -> List[Factor]:
    """Ordered factor list: index performance, volatility (if known), portfolio strategy."""
    if sp_return is None:
        return []

    factors: List[Factor] = [{
        "factor": "S&P 500 Performance",
        "impact": f"{'Positive' if sp_return > 0 else 'Negative'} market sentiment ({sp_return:.2f}% change)",
    }]

    if vix:
        if vix < 20:
            impact = "Low risk environment"
        elif vix < 30:
            impact = "Moderate market uncertainty"
        else:
            impact = "High market uncertainty"
        factors.append({"factor": "Market Volatility (VIX)", "impact": impact})

    factors.append({
        "factor": "Portfolio Strategy",
        "impact": "Favoring growth-oriented global ETFs" if sp_return > 0
        else "Emphasizing defensive local market exposure",
    })
    return factors


def analyse(market: MarketContext) -> Tuple[str, List[Factor]]:
    """Narrative and factors for a snapshot; a fallback snapshot reads as unavailable."""
    if not market.live:
        return UNAVAILABLE, []
    sp, vix = market.sp_return, market.volatility_index
    return describe_market(sp, vix), market_factors(sp, vix)
