# PURPOSE: End-to-end allocation run: validate the request, snapshot the market,
#          run the allocation model, add a growth chart series, validate the output.
# CONTEXT: Shared by the Agent (intake completion and the direct allocate route)
#          and by the local UIs. No LLM or network dependency beyond market data.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
import json, time, uuid
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

import structlog

from etf_advisor.agent_io import validate_allocation_request, validate_allocation_result
from etf_advisor.constants.risk_scores import tier_for_score
from etf_advisor.model_interface.loader import load_model
from etf_advisor.model_interface.types import MarketContext
from etf_advisor.observability import xray_segment
from etf_advisor.tools.market_data import get_market_context
from etf_advisor.utils.projection import growth_series

TZ = ZoneInfo("Africa/Johannesburg")

log = structlog.get_logger(component="pipeline")


def _uuid_v7_like() -> str:
    """
    Readable run ID: short random prefix plus a timestamp suffix.
    Example: 'a1b2c3d4-20251021134501'
    """
    return uuid.uuid4().hex[:8] + "-" + datetime.now(TZ).strftime("%Y%m%d%H%M%S")


def _market_summary(market: MarketContext) -> Dict[str, Any]:
    summary = asdict(market)
    summary.pop("instruments")
    return summary


def _growth(payload: Dict[str, Any]) -> list:
    """
    Chart series for the request.

    - once-off: the lump sum compounds on its own.
    - monthly: contributions accumulate from zero unless initial_amount says otherwise.
    """
    profile = payload["user_profile"]
    amount = float(payload["amount"])
    monthly = profile.get("investment_type") == "monthly"
    initial = payload.get("initial_amount")
    if initial is None:
        initial = 0.0 if monthly else amount
    tier = profile.get("risk_tolerance") or tier_for_score(profile["risk_score"])
    return growth_series(
        initial_amount=float(initial),
        years=int(profile["investment_horizon"]),
        monthly_amount=float(profile.get("monthly_amount") or amount) if monthly else None,
        risk_tolerance=tier,
        seed=(payload.get("context") or {}).get("demo_seed"),
    )


def run_pipeline(payload: dict) -> dict:
    """
    steps:
    1) Validate input against allocation_request.schema.json.
    2) Snapshot market conditions and ETF quotes (degrades to defaults on outage).
    3) Run the configured allocation model.
    4) Build the year-by-year growth series.
    5) Assemble output with run_id and latency.
    6) Validate output against allocation_result.schema.json.

    raises:
    - jsonschema.ValidationError – malformed request.
    - ValueError – contract errors from the model.
    """
    t0 = time.time()

    # 1) Validate input
    validate_allocation_request(payload)
    profile = dict(payload["user_profile"])
    amount = float(payload["amount"])

    # 2) Market snapshot
    with xray_segment("market_context"):
        market = get_market_context()

    # 3) Allocation
    with xray_segment("allocate"):
        result = load_model().allocate(profile, amount, market)

    # 4-5) Assemble result
    out = {
        "status": "ok",
        "portfolio": result["portfolio"],
        "market_analysis": result["market_analysis"],
        "growth_projection": _growth(payload),
        "market": _market_summary(market),
        "run_id": _uuid_v7_like(),
        "latency_ms": int((time.time() - t0) * 1000),
    }
    if "projection" in result:
        out["projection"] = result["projection"]

    # 6) Validate output
    validate_allocation_result(out)
    log.info("pipeline.completed", run_id=out["run_id"], live_market=market.live,
             holdings=len(out["portfolio"]), latency_ms=out["latency_ms"])
    return out


if __name__ == "__main__":
    demo = {
        "user_profile": {"risk_score": 5, "investment_horizon": 10, "income_needs": False,
                         "investment_type": "once-off"},
        "amount": 10000,
        "context": {"demo_seed": 123},
    }
    print(json.dumps(run_pipeline(demo), indent=2))
