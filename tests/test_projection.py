import pytest

from etf_advisor.utils.projection import annuity_future_value, growth_series


def test_monthly_future_value():
    # m * ((1 + r)^n - 1) / r * (1 + r), r = 0.07 / 12, n = 60
    r = 0.07 / 12
    expected = 1000 * ((1 + r) ** 60 - 1) / r * (1 + r)
    assert annuity_future_value(1000, 5) == pytest.approx(expected)
    assert annuity_future_value(1000, 5) == pytest.approx(71_945, rel=2e-3)


def test_zero_rate_is_plain_sum():
    assert annuity_future_value(500, 2, annual_rate=0.0) == 12_000


def test_growth_series_shape_and_growth():
    series = growth_series(10_000, 10, risk_tolerance="low", seed=7)
    assert [p["year"] for p in series] == list(range(11))
    values = [p["value"] for p in series]
    assert values[0] > 10_000
    assert values == sorted(values)


def test_growth_series_is_seeded():
    assert growth_series(5000, 5, seed=123) == growth_series(5000, 5, seed=123)


def test_higher_tier_grows_faster():
    low = growth_series(10_000, 20, risk_tolerance="low", seed=1)[-1]["value"]
    high = growth_series(10_000, 20, risk_tolerance="high", seed=1)[-1]["value"]
    assert high > low


def test_monthly_contributions_accumulate_from_zero():
    series = growth_series(0, 3, monthly_amount=1000, seed=3)
    assert series[0]["value"] > 12_000
    assert series[-1]["value"] > 48_000
