"""
Investor profile collected by the intake conversation.

PURPOSE:
- Immutable record of the answers given so far; each intake turn returns a new copy.
- Owns the canonical field order and the "which field is pending" rule.

CONTEXT:
- Filled by etf_advisor.intake, stored per session by etf_advisor.state_manager,
  and translated into an EngineProfile for the allocation engine once complete.
"""

from __future__ import annotations
import math
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from etf_advisor.constants.risk_scores import DEFAULT_AGE, RISK_SCORES
from etf_advisor.model_interface.types import EngineProfile
from etf_advisor.validators import INVESTMENT_TYPES, parse_goal


class PendingField(str, Enum):
    """Profile fields in the order the conversation asks for them."""
    INVESTMENT_GOAL = "investment_goal"
    TIME_HORIZON_YEARS = "time_horizon_years"
    RISK_TOLERANCE = "risk_tolerance"
    INCOME_NEEDS = "income_needs"
    INVESTMENT_AMOUNT = "investment_amount"
    INVESTMENT_TYPE = "investment_type"
    MONTHLY_AMOUNT = "monthly_amount"


def _positive(v: Any) -> bool:
    return (isinstance(v, (int, float)) and not isinstance(v, bool)
            and math.isfinite(v) and v > 0)


# Shape checks for values arriving from storage or a stateless client.
_ACCEPTS: Dict[PendingField, Callable[[Any], bool]] = {
    PendingField.INVESTMENT_GOAL: lambda v: isinstance(v, str) and parse_goal(v) is not None,
    PendingField.TIME_HORIZON_YEARS: lambda v: isinstance(v, int) and not isinstance(v, bool) and 1 <= v <= 50,
    PendingField.RISK_TOLERANCE: lambda v: isinstance(v, str) and v in RISK_SCORES,
    PendingField.INCOME_NEEDS: lambda v: isinstance(v, bool),
    PendingField.INVESTMENT_AMOUNT: _positive,
    PendingField.INVESTMENT_TYPE: lambda v: v in INVESTMENT_TYPES,
    PendingField.MONTHLY_AMOUNT: _positive,
}


@dataclass(frozen=True)
class UserProfile:
    investment_goal: Optional[str] = None
    time_horizon_years: Optional[int] = None
    risk_tolerance: Optional[str] = None
    income_needs: Optional[bool] = None
    investment_amount: Optional[float] = None
    investment_type: Optional[str] = None
    monthly_amount: Optional[float] = None

    def required_fields(self):
        """Fields the resolved investment_type branch needs, in canonical order."""
        fields = [f for f in PendingField if f is not PendingField.MONTHLY_AMOUNT]
        if self.investment_type == "monthly":
            fields.append(PendingField.MONTHLY_AMOUNT)
        return fields

    def pending_field(self) -> Optional[PendingField]:
        """First required field that is still unset, or None once complete."""
        for f in self.required_fields():
            if getattr(self, f.value) is None:
                return f
        return None

    def is_complete(self) -> bool:
        return self.pending_field() is None

    def with_field(self, f: PendingField, value: Any) -> "UserProfile":
        return replace(self, **{f.value: value})

    def allocation_amount(self) -> Optional[float]:
        """Figure the allocation table is priced against: monthly amount or lump sum."""
        if self.investment_type == "monthly":
            return self.monthly_amount
        return self.investment_amount

    def to_engine_profile(self) -> EngineProfile:
        """
        Translate a complete profile into the allocation engine's input.

        raises:
        - ValueError – if the profile is incomplete or carries an unknown risk tier.
        """
        if not self.is_complete():
            raise ValueError(f"profile incomplete, pending {self.pending_field().value}")
        if self.risk_tolerance not in RISK_SCORES:
            raise ValueError(f"unknown risk tolerance {self.risk_tolerance!r}")
        engine: EngineProfile = {
            "age": DEFAULT_AGE,
            "risk_score": RISK_SCORES[self.risk_tolerance],
            "risk_tolerance": self.risk_tolerance,
            "investment_horizon": self.time_horizon_years,
            "income_needs": self.income_needs,
            "investment_type": self.investment_type,
        }
        if self.investment_type == "monthly":
            engine["monthly_amount"] = self.monthly_amount
        return engine

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserProfile":
        """
        Rebuild a profile from stored or client-supplied JSON.

        notes:
        - Values are accepted in canonical order and loading stops at the first
          missing or malformed one, so a field is never set ahead of its predecessors.
        - Integral floats (e.g. 10.0 from a JSON round trip) are accepted for the horizon.
        """
        profile = cls()
        data = data or {}
        for f in PendingField:
            if f is PendingField.MONTHLY_AMOUNT and profile.investment_type != "monthly":
                break
            value = data.get(f.value)
            if f is PendingField.TIME_HORIZON_YEARS and isinstance(value, float) and value.is_integer():
                value = int(value)
            if value is None or not _ACCEPTS[f](value):
                break
            if f in (PendingField.INVESTMENT_AMOUNT, PendingField.MONTHLY_AMOUNT):
                value = float(value)
            profile = profile.with_field(f, value)
        return profile
