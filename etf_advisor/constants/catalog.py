# PURPOSE: Static instrument catalog and the basket decision table used by the
#          allocation engine (outlook x income needs -> equity basket).
# CONTEXT: Every ETF is JSE-listed and quoted on Yahoo Finance under a ".JO" symbol.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Instrument:
    name: str
    symbol: str
    description: str


@dataclass(frozen=True)
class BasketEntry:
    """One slice of the equity leg: instrument name, fraction of equity, display text."""
    instrument: str
    sub_weight: float
    description: str


@dataclass(frozen=True)
class Basket:
    entries: Tuple[BasketEntry, ...]
    rationale: str


SATRIX_TOP_40 = "Satrix Top 40 ETF"
CORESHARES_TOTAL_WORLD = "CoreShares Total World Stock ETF"
SATRIX_SA_BOND = "Satrix SA Bond ETF"
NEWGOLD = "NewGold ETF"
SATRIX_MSCI_WORLD = "Satrix MSCI World ETF"
SYGNIA_4IR = "Sygnia Itrix 4th Industrial Revolution Global Equity ETF"
CORESHARES_SA_DIVIDEND = "CoreShares S&P South Africa Dividend Aristocrats ETF"
ASHBURTON_MIDCAP = "Ashburton MidCap ETF"
SATRIX_PROPERTY = "Satrix Property ETF"
SYGNIA_FAANG = "Sygnia FAANG Plus Equity ETF"
CORESHARES_GLOBAL_DIVIDEND = "CoreShares S&P Global Dividend Aristocrats ETF"
SATRIX_EMERGING = "Satrix MSCI Emerging Markets ETF"
SATRIX_FINI = "Satrix Fini ETF"

INSTRUMENTS: Dict[str, Instrument] = {
    i.name: i
    for i in (
        Instrument(SATRIX_TOP_40, "STX40.JO", "Tracks the 40 largest companies on the JSE"),
        Instrument(CORESHARES_TOTAL_WORLD, "GLOBAL.JO", "Global equity exposure"),
        Instrument(SATRIX_SA_BOND, "STXGOV.JO", "Exposure to South African government bonds"),
        Instrument(NEWGOLD, "GLD.JO", "Gold bullion investment"),
        Instrument(SATRIX_MSCI_WORLD, "STXWDM.JO", "Global developed market exposure"),
        Instrument(SYGNIA_4IR, "SYG4IR.JO", "Exposure to innovative tech companies"),
        Instrument(CORESHARES_SA_DIVIDEND, "DIVTRX.JO", "High-quality dividend-paying SA companies"),
        Instrument(ASHBURTON_MIDCAP, "ASHMID.JO", "Exposure to mid-sized SA companies"),
        Instrument(SATRIX_PROPERTY, "STXPRO.JO", "Diversified property exposure"),
        Instrument(SYGNIA_FAANG, "FAANG.JO", "High-growth global tech giants"),
        Instrument(CORESHARES_GLOBAL_DIVIDEND, "GLODIV.JO", "Global dividend-growing companies"),
        Instrument(SATRIX_EMERGING, "STXEMG.JO", "Emerging markets exposure"),
        Instrument(SATRIX_FINI, "STXFIN.JO", "SA financial sector exposure"),
    )
}

# Fixed-income leg, always present in an advanced allocation.
BOND_INSTRUMENT = SATRIX_SA_BOND

# (outlook, income_needs) -> basket. Sub-weights are fractions of the equity
# allocation and sum to 1.0 inside each cell.
BASKETS: Dict[Tuple[str, bool], Basket] = {
    ("positive", True): Basket(
        entries=(
            BasketEntry(CORESHARES_GLOBAL_DIVIDEND, 0.4, "Global dividend-growing companies"),
            BasketEntry(SATRIX_MSCI_WORLD, 0.3, "Global developed market exposure"),
            BasketEntry(CORESHARES_SA_DIVIDEND, 0.3, "High-quality dividend-paying SA companies"),
        ),
        rationale="Global market outlook is positive: Balanced allocation between global "
                  "and local dividend-paying ETFs",
    ),
    ("positive", False): Basket(
        entries=(
            BasketEntry(SATRIX_MSCI_WORLD, 0.6, "Global developed market exposure"),
            BasketEntry(SATRIX_EMERGING, 0.4, "Emerging markets exposure"),
        ),
        rationale="Global market outlook is positive: Increased allocation to international markets",
    ),
    ("negative", True): Basket(
        entries=(
            BasketEntry(CORESHARES_SA_DIVIDEND, 0.5, "High-quality dividend-paying SA companies"),
            BasketEntry(SATRIX_PROPERTY, 0.3, "Local property income exposure"),
            BasketEntry(SATRIX_TOP_40, 0.2, "Top 40 SA companies for growth"),
        ),
        rationale="Market outlook is cautious: Focus on stable local dividend and property income",
    ),
    ("negative", False): Basket(
        entries=(
            BasketEntry(SATRIX_TOP_40, 0.7, "Tracks the 40 largest companies on the JSE"),
            BasketEntry(CORESHARES_SA_DIVIDEND, 0.3, "High-quality dividend-paying SA companies"),
        ),
        rationale="Global market outlook is cautious: Focusing on stable local market exposure",
    ),
}

# Tier-keyed static portfolios for the basic model (weights sum to 1.0 per tier).
TIER_PORTFOLIOS: Dict[str, Tuple[BasketEntry, ...]] = {
    "low": (
        BasketEntry(SATRIX_TOP_40, 0.4, "Tracks the 40 largest companies on the JSE"),
        BasketEntry(CORESHARES_TOTAL_WORLD, 0.3, "Global equity exposure"),
        BasketEntry(SATRIX_SA_BOND, 0.2, "Exposure to South African government bonds"),
        BasketEntry(NEWGOLD, 0.1, "Gold bullion investment"),
    ),
    "medium": (
        BasketEntry(SATRIX_MSCI_WORLD, 0.35, "Global developed market exposure"),
        BasketEntry(SYGNIA_4IR, 0.25, "Exposure to innovative tech companies"),
        BasketEntry(CORESHARES_SA_DIVIDEND, 0.2, "High-quality dividend-paying SA companies"),
        BasketEntry(ASHBURTON_MIDCAP, 0.15, "Exposure to mid-sized SA companies"),
        BasketEntry(SATRIX_PROPERTY, 0.05, "Diversified property exposure"),
    ),
    "high": (
        BasketEntry(SYGNIA_FAANG, 0.3, "High-growth global tech giants"),
        BasketEntry(CORESHARES_GLOBAL_DIVIDEND, 0.25, "Global dividend-growing companies"),
        BasketEntry(SATRIX_EMERGING, 0.2, "Emerging markets exposure"),
        BasketEntry(SYGNIA_4IR, 0.15, "Innovative tech companies"),
        BasketEntry(SATRIX_FINI, 0.1, "SA financial sector exposure"),
    ),
}
