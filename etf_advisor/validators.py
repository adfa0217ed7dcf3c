"""
Profile validators: one free-text answer in, one typed field out.

Every parser is total: it returns the parsed value, or None when the answer
does not fit the field. None of them raise.
"""

from __future__ import annotations
import math
import re
from typing import Any, Optional

_NOT_AMOUNT = re.compile(r"[^0-9.]")
_NOT_DIGIT = re.compile(r"[^0-9]")

RISK_TIERS = ("low", "medium", "high")
INVESTMENT_TYPES = ("once-off", "monthly")
_YES_NO = {"yes": True, "no": False}


def _text(raw: Any) -> str:
    return raw if isinstance(raw, str) else ("" if raw is None else str(raw))


def parse_amount(raw: Any) -> Optional[float]:
    """
    Positive Rand amount. Currency symbols, spaces and thousands separators are
    stripped first, so "R10,000" and "10 000.50" both parse.
    """
    cleaned = _NOT_AMOUNT.sub("", _text(raw))
    try:
        amount = float(cleaned)
    except ValueError:
        return None
    return amount if math.isfinite(amount) and amount > 0 else None


def parse_goal(raw: Any) -> Optional[str]:
    """The goal is kept as typed, but only once it reads as an amount."""
    text = _text(raw).strip()
    return text if parse_amount(text) is not None else None


def parse_horizon(raw: Any) -> Optional[int]:
    """Whole years, 1 to 50 inclusive ("5 years" -> 5)."""
    # Anything past two significant digits is out of range; checked before int()
    # so arbitrarily long answers cannot hit the int-conversion digit limit.
    digits = _NOT_DIGIT.sub("", _text(raw)).lstrip("0")
    if not digits or len(digits) > 2:
        return None
    years = int(digits)
    return years if 1 <= years <= 50 else None


def parse_risk_tolerance(raw: Any) -> Optional[str]:
    tier = _text(raw).strip().lower()
    return tier if tier in RISK_TIERS else None


def parse_yes_no(raw: Any) -> Optional[bool]:
    return _YES_NO.get(_text(raw).strip().lower())


def parse_investment_type(raw: Any) -> Optional[str]:
    kind = _text(raw).strip().lower()
    return kind if kind in INVESTMENT_TYPES else None
