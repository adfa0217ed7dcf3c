import itertools

import pytest
from structlog.testing import capture_logs

from etf_advisor.constants.catalog import (
    BASKETS,
    BOND_INSTRUMENT,
    SATRIX_EMERGING,
    SATRIX_MSCI_WORLD,
    SATRIX_SA_BOND,
)
from etf_advisor.model_impl.advanced_model import AdvancedModel, allocate, base_equity
from etf_advisor.model_interface.types import InstrumentQuote
from etf_advisor.tools.market_analysis import UNAVAILABLE


def _profile(**overrides):
    p = {"age": 30, "risk_score": 5, "investment_horizon": 10, "income_needs": False,
         "investment_type": "once-off"}
    p.update(overrides)
    return p


def _weights(result):
    return {name: h["weight"] for name, h in result["portfolio"].items()}


def _equity(result):
    return 1 - result["portfolio"][BOND_INSTRUMENT]["weight"]


def test_reference_allocation(make_market):
    result = allocate(_profile(), 10000, make_market())
    w = _weights(result)
    assert set(w) == {SATRIX_MSCI_WORLD, SATRIX_EMERGING, SATRIX_SA_BOND}
    assert w[SATRIX_MSCI_WORLD] == pytest.approx(0.48)
    assert w[SATRIX_EMERGING] == pytest.approx(0.32)
    assert w[SATRIX_SA_BOND] == pytest.approx(0.20)
    assert result["market_analysis"]["rationale"][0] == "Age-based equity allocation: 80.0% based on age 30"
    assert "projection" not in result


@pytest.mark.parametrize("age", range(0, 121))
def test_base_equity_is_bounded(age):
    assert 0.10 <= base_equity(age) <= 0.90


def test_weights_always_sum_to_one(make_market):
    grid = itertools.product(
        (0, 30, 60, 95, 120), (1, 5, 10), (True, False), ("positive", "negative"), (None, 12.0, 35.0),
    )
    for age, score, income, outlook, vix in grid:
        result = allocate(_profile(age=age, risk_score=score, income_needs=income),
                          5000, make_market(outlook=outlook, vix=vix))
        w = _weights(result)
        assert sum(w.values()) == pytest.approx(1.0, abs=1e-9)
        assert all(v > 0 for v in w.values())


def test_age_zero_is_used_not_defaulted(make_market):
    result = allocate(_profile(age=0), 1000, make_market())
    assert result["market_analysis"]["rationale"][0] == "Age-based equity allocation: 90.0% based on age 0"
    assert result["portfolio"][SATRIX_SA_BOND]["weight"] == pytest.approx(0.10)


def test_missing_age_defaults_to_thirty(make_market):
    p = _profile()
    del p["age"]
    result = allocate(p, 1000, make_market())
    assert result["market_analysis"]["rationale"][0].endswith("based on age 30")


@pytest.mark.parametrize("age", range(25, 91, 5))
@pytest.mark.parametrize("score", range(1, 11))
def test_high_volatility_strictly_lowers_equity(make_market, age, score):
    p = _profile(age=age, risk_score=score)
    calm = allocate(p, 1000, make_market(vix=10.0))
    stressed = allocate(p, 1000, make_market(vix=30.0))
    assert _equity(stressed) < _equity(calm)
    assert any("high VIX (30.0)" in r for r in stressed["market_analysis"]["rationale"])


@pytest.mark.parametrize("age", range(0, 121, 10))
@pytest.mark.parametrize("score", range(1, 11))
@pytest.mark.parametrize("vix", [None, 30.0])
def test_income_needs_never_reduce_bonds(make_market, age, score, vix):
    market = make_market(vix=vix)
    without = allocate(_profile(age=age, risk_score=score), 1000, market)
    with_income = allocate(_profile(age=age, risk_score=score, income_needs=True), 1000, market)
    bond_without = without["portfolio"][BOND_INSTRUMENT]["weight"]
    bond_with = with_income["portfolio"][BOND_INSTRUMENT]["weight"]
    assert bond_with >= bond_without - 1e-9


@pytest.mark.parametrize("outlook,income", list(BASKETS))
def test_basket_selection(make_market, outlook, income):
    result = allocate(_profile(income_needs=income), 1000, make_market(outlook=outlook))
    basket = BASKETS[(outlook, income)]
    expected = {e.instrument for e in basket.entries} | {BOND_INSTRUMENT}
    assert set(result["portfolio"]) == expected
    assert basket.rationale in result["market_analysis"]["rationale"]


def test_equity_split_follows_sub_weights(make_market):
    result = allocate(_profile(income_needs=True), 1000, make_market(outlook="negative"))
    basket = BASKETS[("negative", True)]
    equity = _equity(result)
    for entry in basket.entries:
        assert result["portfolio"][entry.instrument]["weight"] == pytest.approx(equity * entry.sub_weight)


def test_missing_quote_fields_are_omitted(make_market):
    market = make_market(instruments={SATRIX_MSCI_WORLD: InstrumentQuote(price=10.5)})
    portfolio = allocate(_profile(), 1000, market)["portfolio"]
    world = portfolio[SATRIX_MSCI_WORLD]
    assert world["price"] == 10.5
    assert "change_pct" not in world and "volume" not in world
    assert set(portfolio[SATRIX_EMERGING]) == {"weight", "description", "symbol"}
    assert portfolio[SATRIX_EMERGING]["symbol"] == "STXEMG.JO"


def test_fallback_market_reads_as_unavailable(make_market):
    analysis = allocate(_profile(), 1000, make_market(sp_return=0.0, vix=0.0, live=False))["market_analysis"]
    assert analysis["description"] == UNAVAILABLE
    assert analysis["factors"] == []


def test_live_market_factors(make_market):
    analysis = allocate(_profile(), 1000, make_market(sp_return=2.5, vix=22.0))["market_analysis"]
    assert analysis["description"].startswith("Markets are showing strong bullish momentum")
    assert [f["factor"] for f in analysis["factors"]] == [
        "S&P 500 Performance", "Market Volatility (VIX)", "Portfolio Strategy",
    ]


def test_monthly_projection(make_market):
    p = _profile(investment_type="monthly", monthly_amount=1000.0, investment_horizon=5)
    result = AdvancedModel().allocate(p, 1000, make_market())
    proj = result["projection"]
    assert proj["years"] == 5 and proj["annual_rate"] == 0.07
    assert proj["future_value"] == pytest.approx(71_945, rel=2e-3)
    assert "If you invest R1,000 per month for 5 years" in result["market_analysis"]["description"]


@pytest.mark.parametrize("bad", [
    {"risk_score": 0},
    {"risk_score": 11},
    {"risk_score": "5"},
    {"investment_type": "weekly"},
])
def test_contract_errors_raise(make_market, bad):
    with pytest.raises(ValueError):
        allocate(_profile(**bad), 1000, make_market())


def test_unknown_outlook_raises(make_market):
    with pytest.raises(ValueError):
        allocate(_profile(), 1000, make_market(outlook="sideways"))


def test_non_positive_amount_raises(make_market):
    with pytest.raises(ValueError):
        allocate(_profile(), 0, make_market())


def test_stale_snapshot_is_logged_not_rejected(make_market):
    with capture_logs() as logs:
        result = allocate(_profile(), 1000, make_market(as_of="2020-01-01T00:00:00+02:00"))
    assert result["portfolio"]
    assert any(e["event"] == "market.context_stale" for e in logs)
