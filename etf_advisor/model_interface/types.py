from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, TypedDict

Outlook = Literal["positive", "negative"]
InvestmentType = Literal["once-off", "monthly"]


class EngineProfile(TypedDict, total=False):
    age: int
    risk_score: int
    investment_horizon: int
    income_needs: bool
    investment_type: InvestmentType
    monthly_amount: float
    risk_tolerance: str


@dataclass(frozen=True)
class InstrumentQuote:
    """Live metadata for one ETF. None means the provider had no value."""
    price: Optional[float] = None
    change_pct: Optional[float] = None
    volume: Optional[float] = None
    three_month_return: Optional[float] = None

    def present_fields(self) -> Dict[str, float]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class MarketContext:
    outlook: Outlook = "positive"
    volatility_index: Optional[float] = None
    sp_return: Optional[float] = None
    as_of: Optional[str] = None
    live: bool = True
    instruments: Dict[str, InstrumentQuote] = field(default_factory=dict)

    def quote(self, name: str) -> InstrumentQuote:
        return self.instruments.get(name) or InstrumentQuote()


class Holding(TypedDict, total=False):
    weight: float
    description: str
    symbol: str
    price: float
    change_pct: float
    volume: float
    three_month_return: float


class Factor(TypedDict):
    factor: str
    impact: str


class MarketAnalysis(TypedDict):
    description: str
    factors: List[Factor]
    rationale: List[str]


class Projection(TypedDict):
    monthly_amount: float
    years: int
    annual_rate: float
    future_value: float


class AllocationResult(TypedDict, total=False):
    portfolio: Dict[str, Holding]
    market_analysis: MarketAnalysis
    projection: Projection
