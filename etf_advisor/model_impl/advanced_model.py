# PURPOSE: Advanced allocation engine: turns an investor profile and a market
#          snapshot into normalised ETF weights, a rationale and a projection.
# CONTEXT: Age-based equity/bond split, nudged by risk score, market volatility
#          and income needs, then spread over a basket picked from the static
#          outlook x income decision table.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
import os
from datetime import datetime, timedelta
from typing import Dict, List
from zoneinfo import ZoneInfo

import structlog

from etf_advisor.constants.catalog import BASKETS, BOND_INSTRUMENT, INSTRUMENTS
from etf_advisor.constants.risk_scores import DEFAULT_AGE
from etf_advisor.model_interface.allocation_model import AllocationModel
from etf_advisor.model_interface.types import (
    AllocationResult, EngineProfile, Holding, InstrumentQuote, MarketContext, Projection,
)
from etf_advisor.tools.market_analysis import analyse
from etf_advisor.utils.projection import ANNUAL_RETURN, annuity_future_value

TZ = ZoneInfo("Africa/Johannesburg")

EQUITY_FLOOR = 0.10
EQUITY_CAP   = 0.90
RISK_TILT    = 0.2     # equity shift per unit of (risk_score - 5) / 10
HIGH_VIX     = 25.0
VIX_DAMPING  = 0.9
INCOME_BOND_STEP = 0.1
INCOME_BOND_CAP  = 0.4

# Snapshots older than this are logged as stale (never rejected).
MARKET_MAX_AGE_HOURS = float(os.getenv("MARKET_MAX_AGE_HOURS", "24"))

OUTLOOKS = ("positive", "negative")
INVESTMENT_TYPES = ("once-off", "monthly")

log = structlog.get_logger(component="allocation_engine")


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to the [lo, hi] interval."""
    return min(hi, max(lo, x))


def base_equity(age: int) -> float:
    """Rule-of-110 equity share, clamped to [EQUITY_FLOOR, EQUITY_CAP]."""
    return _clamp((110 - age) / 100, EQUITY_FLOOR, EQUITY_CAP)


def _rand(x: float) -> str:
    """Rand amount with thousands separators and no trailing zero cents."""
    return f"{x:,.2f}".rstrip("0").rstrip(".")


def _check_profile(profile: EngineProfile, amount: float, market: MarketContext) -> None:
    """Contract checks; a failure here means upstream validation is broken."""
    score = profile.get("risk_score")
    if not isinstance(score, int) or not 1 <= score <= 10:
        raise ValueError(f"risk_score must be an int in 1..10, got {score!r}")
    if market.outlook not in OUTLOOKS:
        raise ValueError(f"unrecognised market outlook {market.outlook!r}")
    itype = profile.get("investment_type", "once-off")
    if itype not in INVESTMENT_TYPES:
        raise ValueError(f"unrecognised investment type {itype!r}")
    if not amount or amount <= 0:
        raise ValueError(f"amount must be positive, got {amount!r}")


def _check_freshness(market: MarketContext) -> None:
    if not market.as_of:
        return
    try:
        as_of = datetime.fromisoformat(market.as_of)
    except ValueError:
        log.warning("market.as_of_unparseable", as_of=market.as_of)
        return
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=TZ)
    now = datetime.now(TZ)
    if as_of > now + timedelta(minutes=5) or now - as_of > timedelta(hours=MARKET_MAX_AGE_HOURS):
        log.warning("market.context_stale", as_of=market.as_of, max_age_hours=MARKET_MAX_AGE_HOURS)


def _holding(name: str, weight: float, description: str, quote: InstrumentQuote) -> Holding:
    holding: Holding = {
        "weight": weight,
        "description": description,
        "symbol": INSTRUMENTS[name].symbol,
    }
    holding.update(quote.present_fields())
    return holding


class AdvancedModel(AllocationModel):
    """
    Allocation steps, each leaving one line in the rationale:
    1) Age-based equity share (rule of 110), clamped to [10%, 90%].
    2) Risk tilt: +/-2% equity per risk-score point away from 5.
    3) High VIX (> 25) trims equity by 10%.
    4) Income needs raise bonds by 10 points (capped at 40%); equity is the rest.
    5) Equity re-clamped to [10%, 90%].
    6) Equity spread over the basket for (outlook, income needs); bond leg added.
    7) Weights normalised to sum to 1.
    8) Monthly investors get a compounding projection in the narrative.
    """

    def allocate(self, profile: EngineProfile, amount: float, market: MarketContext) -> AllocationResult:
        """
        Produce an allocation for the given profile and market snapshot.

        parameters:
        - profile: EngineProfile – expects risk_score, income_needs, investment_horizon;
          age defaults to 30, investment_type to once-off.
        - amount: float – lump sum, or the monthly figure for monthly investors.
        - market: MarketContext – outlook, optional VIX and per-ETF quotes.

        returns:
        - AllocationResult – {"portfolio": {...}, "market_analysis": {...}, "projection"?: {...}}

        raises:
        - ValueError – unknown risk score, outlook or investment type (contract errors).
        """
        _check_profile(profile, amount, market)
        _check_freshness(market)

        age = profile.get("age")
        age = DEFAULT_AGE if age is None else int(age)
        score = profile["risk_score"]
        horizon = int(profile.get("investment_horizon") or 0)
        income = bool(profile.get("income_needs"))
        vix = market.volatility_index

        rationale: List[str] = []

        # 1) Age-based split.
        base = base_equity(age)
        bond = 1 - base
        rationale.append(f"Age-based equity allocation: {base * 100:.1f}% based on age {age}")

        # 2) Risk tilt around a neutral score of 5.
        risk_adj = (score - 5) / 10
        equity = base + risk_adj * RISK_TILT
        rationale.append(f"Risk adjustment: {risk_adj * RISK_TILT * 100:.1f}% shift based on risk score {score}")
        rationale.append(f"Investment horizon: {horizon} years")

        # 3) Flight to safety when volatility is high.
        if vix is not None and vix > HIGH_VIX:
            equity *= VIX_DAMPING
            rationale.append(f"Market volatility adjustment: -10% equity due to high VIX ({vix:.1f})")

        # 4) Income override; never leaves less in bonds than the same profile without it.
        if income:
            share_without_income = bond / (_clamp(equity, EQUITY_FLOOR, EQUITY_CAP) + bond)
            bond = max(min(INCOME_BOND_CAP, bond + INCOME_BOND_STEP), share_without_income)
            equity = 1 - bond
            rationale.append("Income requirement: Increase allocation to dividend-paying ETFs and bonds")

        # 5) Re-apply the equity bounds after the adjustments.
        clamped = _clamp(equity, EQUITY_FLOOR, EQUITY_CAP)
        if clamped != equity:
            rationale.append(f"Equity allocation held within bounds: {clamped * 100:.1f}%")
            equity = clamped

        # 6) Basket for the equity leg, then the bond leg.
        basket = BASKETS[(market.outlook, income)]
        raw: Dict[str, float] = {}
        descriptions: Dict[str, str] = {}
        for entry in basket.entries:
            raw[entry.instrument] = equity * entry.sub_weight
            descriptions[entry.instrument] = entry.description
        rationale.append(basket.rationale)

        raw[BOND_INSTRUMENT] = bond
        descriptions[BOND_INSTRUMENT] = INSTRUMENTS[BOND_INSTRUMENT].description
        rationale.append(f"Fixed income allocation: {bond * 100:.1f}% for {'income and ' if income else ''}stability")

        # 7) Normalise; the adjustments above can leave the raw sum away from 1.
        total = sum(raw.values())
        portfolio = {
            name: _holding(name, w / total, descriptions[name], market.quote(name))
            for name, w in raw.items()
        }

        description, factors = analyse(market)
        result: AllocationResult = {
            "portfolio": portfolio,
            "market_analysis": {"description": description, "factors": factors, "rationale": rationale},
        }

        # 8) Compounding projection for monthly investors.
        if profile.get("investment_type") == "monthly" and horizon:
            monthly = float(profile.get("monthly_amount") or amount)
            fv = annuity_future_value(monthly, horizon)
            projection: Projection = {
                "monthly_amount": monthly,
                "years": horizon,
                "annual_rate": ANNUAL_RETURN,
                "future_value": fv,
            }
            result["projection"] = projection
            result["market_analysis"]["description"] = description + (
                f"\n\nIf you invest R{_rand(monthly)} per month for {horizon} years "
                f"(assuming a {ANNUAL_RETURN:.0%} annual return), your projected portfolio "
                f"value could be approximately R{fv:,.0f}."
            )
            rationale.append("Projection includes monthly compounding and assumes a 7% average "
                             "annual return. Actual returns may vary.")

        log.info("allocation.generated", outlook=market.outlook, income_needs=income,
                 equity=round(equity, 4), bond=round(bond, 4), holdings=len(portfolio))
        return result


_model = AdvancedModel()


def allocate(profile: EngineProfile, amount: float, market: MarketContext) -> AllocationResult:
    """Module-level entrypoint for the default engine."""
    return _model.allocate(profile, amount, market)
