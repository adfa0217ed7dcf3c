from decimal import Decimal

from etf_advisor.utils.rounding import round_weights


def test_residual_goes_to_largest_weight():
    out = round_weights({"a": 1 / 3, "b": 1 / 3 - 1e-6, "c": 1 / 3 + 1e-6})
    assert out == {"a": 0.333, "b": 0.333, "c": 0.334}


def test_rounded_weights_sum_to_one():
    out = round_weights({"x": 0.4802, "y": 0.3198, "z": 0.2})
    assert sum(Decimal(str(v)) for v in out.values()) == 1


def test_empty():
    assert round_weights({}) == {}
