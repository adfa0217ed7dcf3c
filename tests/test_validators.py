import pytest

from etf_advisor.validators import (
    parse_amount,
    parse_goal,
    parse_horizon,
    parse_investment_type,
    parse_risk_tolerance,
    parse_yes_no,
)


@pytest.mark.parametrize("raw,expected", [
    ("10000", 10000.0),
    ("R10,000", 10000.0),
    ("10 000.50", 10000.5),
    (2500, 2500.0),
])
def test_parse_amount_accepts_rand_formats(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "0", "R0.00", "1.2.3", None, "-"])
def test_parse_amount_rejects(raw):
    assert parse_amount(raw) is None


def test_parse_goal_keeps_text_as_typed():
    assert parse_goal("  R50 000 for a car ") == "R50 000 for a car"
    assert parse_goal("a car") is None


@pytest.mark.parametrize("raw,expected", [("5 years", 5), ("10", 10), ("1", 1), ("50 yrs", 50)])
def test_parse_horizon(raw, expected):
    assert parse_horizon(raw) == expected


@pytest.mark.parametrize("raw", ["0", "000", "51", "100", "forever", ""])
def test_parse_horizon_rejects_out_of_range(raw):
    assert parse_horizon(raw) is None


def test_parse_horizon_leading_zeros():
    assert parse_horizon("007") == 7


def test_parse_horizon_huge_answer_is_rejected_not_raised():
    assert parse_horizon("9" * 5000) is None
    assert parse_horizon("1" + "0" * 5000 + " years") is None


def test_parse_amount_huge_answer():
    assert parse_amount("9" * 5000) is None
    assert parse_amount("9" * 300) == pytest.approx(float("9" * 300))


def test_parse_risk_tolerance_is_case_insensitive():
    assert parse_risk_tolerance(" Medium ") == "medium"
    assert parse_risk_tolerance("HIGH") == "high"
    assert parse_risk_tolerance("aggressive") is None


def test_parse_yes_no():
    assert parse_yes_no("Yes") is True
    assert parse_yes_no(" no ") is False
    assert parse_yes_no("maybe") is None


def test_parse_investment_type():
    assert parse_investment_type("Once-Off") == "once-off"
    assert parse_investment_type("monthly") == "monthly"
    assert parse_investment_type("weekly") is None
