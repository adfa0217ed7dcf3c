from etf_advisor.constants.catalog import INSTRUMENTS, TIER_PORTFOLIOS
from etf_advisor.constants.risk_scores import tier_for_score
from etf_advisor.model_interface.allocation_model import AllocationModel
from etf_advisor.model_interface.types import AllocationResult, EngineProfile, MarketContext
from etf_advisor.tools.market_analysis import analyse


def _tier(profile: EngineProfile) -> str:
    tier = profile.get("risk_tolerance")
    if tier:
        if tier not in TIER_PORTFOLIOS:
            raise ValueError(f"Invalid risk tolerance {tier!r}")
        return tier
    score = profile.get("risk_score")
    if not isinstance(score, int) or not 1 <= score <= 10:
        raise ValueError(f"risk_score must be an int in 1..10, got {score!r}")
    return tier_for_score(score)


class BasicModel(AllocationModel):
    """Fixed portfolio per risk tier; market data only decorates the holdings."""

    def allocate(self, profile: EngineProfile, amount: float, market: MarketContext) -> AllocationResult:
        tier = _tier(profile)
        entries = TIER_PORTFOLIOS[tier]
        total = sum(e.sub_weight for e in entries)
        portfolio = {}
        for e in entries:
            holding = {
                "weight": e.sub_weight / total,
                "description": e.description,
                "symbol": INSTRUMENTS[e.instrument].symbol,
            }
            holding.update(market.quote(e.instrument).present_fields())
            portfolio[e.instrument] = holding
        description, factors = analyse(market)
        return {
            "portfolio": portfolio,
            "market_analysis": {
                "description": description,
                "factors": factors,
                "rationale": [f"Static {tier}-risk model portfolio"],
            },
        }
