from etf_advisor.advice import DISCLAIMER, render_advice
from etf_advisor.model_impl.advanced_model import allocate
from etf_advisor.profile import UserProfile


def _profile(**overrides):
    fields = dict(investment_goal="R10000", time_horizon_years=5, risk_tolerance="medium",
                  income_needs=False, investment_amount=10000.0, investment_type="once-off")
    fields.update(overrides)
    return UserProfile(**fields)


def test_table_rows_use_exact_amounts(make_market):
    profile = _profile()
    result = allocate(profile.to_engine_profile(), 10000, make_market())
    text = render_advice(profile, result, 10000)
    assert "| ETF | Allocation | Amount (R) | Description |" in text
    assert "| Satrix MSCI World ETF | 48.0% | R4800.00 | Global developed market exposure |" in text
    assert "| Satrix SA Bond ETF | 20.0% | R2000.00 |" in text
    assert "Investment Amount: R10000.00" in text
    assert text.endswith(DISCLAIMER)


def test_displayed_percentages_add_to_100():
    result = {
        "portfolio": {
            name: {"weight": 1 / 3, "description": name, "symbol": name}
            for name in ("A", "B", "C")
        },
        "market_analysis": {"description": "Market data unavailable", "factors": [], "rationale": ["r"]},
    }
    text = render_advice(_profile(), result, 900)
    rows = [line for line in text.splitlines() if line.startswith("| ") and "%" in line]
    total = sum(float(r.split("|")[2].strip().rstrip("%")) for r in rows)
    assert round(total, 1) == 100.0
    assert "R300.00" in text


def test_strategy_sections_depend_on_profile(make_market):
    plain = _profile()
    rich = _profile(time_horizon_years=15, income_needs=True, investment_type="monthly", monthly_amount=1000.0)
    plain_text = render_advice(plain, allocate(plain.to_engine_profile(), 10000, make_market()), 10000)
    rich_text = render_advice(rich, allocate(rich.to_engine_profile(), 1000, make_market()), 1000)

    for header in ("Monthly Investment Strategy:", "Long-term Investment Strategy:", "Income Strategy:"):
        assert header not in plain_text
        assert header in rich_text
    assert "Monthly Amount: R1000.00" in rich_text
    assert "If you invest R1,000 per month for 15 years" in rich_text


def test_market_section_lists_factors_and_rationale(make_market):
    profile = _profile()
    result = allocate(profile.to_engine_profile(), 10000, make_market(sp_return=1.2, vix=16.0))
    text = render_advice(profile, result, 10000)
    assert "• S&P 500 Performance: Positive market sentiment (1.20% change)" in text
    assert "• Age-based equity allocation: 80.0% based on age 30" in text
