"""
Market context provider backed by Yahoo Finance.

PURPOSE:
- Fetch per-ETF quote metadata (price, daily change, volume, 3-month return)
  and broad-market conditions (S&P 500 move, VIX level).
- Assemble both into one immutable MarketContext per allocation request.

CONTEXT:
- Called by the pipeline before the allocation engine runs.
- Provider outages never fail a request: every fetch degrades to its
  "unavailable" default and logs a warning for operators.

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
import concurrent.futures
import math
import os
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from zoneinfo import ZoneInfo

import structlog
import yfinance as yf

from etf_advisor.constants.catalog import INSTRUMENTS
from etf_advisor.model_interface.types import InstrumentQuote, MarketContext

TZ = ZoneInfo("Africa/Johannesburg")

# Aggregate budget for one full market snapshot (all quotes + conditions).
MARKET_DATA_TIMEOUT_S = float(os.getenv("MARKET_DATA_TIMEOUT_S", "10"))
MAX_WORKERS = int(os.getenv("MARKET_DATA_MAX_WORKERS", "8"))

INDEX_SYMBOL = "^GSPC"
VIX_SYMBOL = "^VIX"

log = structlog.get_logger(component="market_data")


def _history(symbol: str, period: str):
    """Daily OHLCV frame for a symbol (thin seam so tests can stub yfinance)."""
    return yf.Ticker(symbol).history(period=period, interval="1d")


def _finite(x: Any) -> Optional[float]:
    """Return x as a float, or None for missing/NaN values."""
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _pct_change(new: Optional[float], old: Optional[float]) -> Optional[float]:
    if new is None or not old:
        return None
    return (new - old) / old * 100


def _column(hist, name: str):
    if name not in hist.columns:
        return None
    col = hist[name].dropna()
    return col if len(col) else None


def _now_iso() -> str:
    return datetime.now(TZ).isoformat(timespec="seconds")


def fetch_instrument_data(name: str) -> InstrumentQuote:
    """
    Fetch live metadata for one catalog ETF.

    parameters:
    - name: str – catalog name, e.g. "Satrix Top 40 ETF".

    returns:
    - InstrumentQuote – fields the provider could not supply are None.

    notes:
    - Never raises. A failed or empty download yields an empty quote.
    - Uses three months of daily closes: last close is the price, last vs previous
      close is the daily change, last vs first close is the 3-month return.
    """
    inst = INSTRUMENTS.get(name)
    if inst is None:
        log.warning("market.unknown_instrument", instrument=name)
        return InstrumentQuote()

    try:
        hist = _history(inst.symbol, "3mo")
    except Exception as e:
        log.warning("market.quote_failed", instrument=name, symbol=inst.symbol, error=str(e))
        return InstrumentQuote()

    if hist is None or hist.empty:
        log.warning("market.quote_empty", instrument=name, symbol=inst.symbol)
        return InstrumentQuote()

    closes = _column(hist, "Close")
    volumes = _column(hist, "Volume")

    price = _finite(closes.iloc[-1]) if closes is not None else None
    prev = _finite(closes.iloc[-2]) if closes is not None and len(closes) > 1 else None
    first = _finite(closes.iloc[0]) if closes is not None and len(closes) > 1 else None

    return InstrumentQuote(
        price=price,
        change_pct=_pct_change(price, prev),
        volume=_finite(volumes.iloc[-1]) if volumes is not None else None,
        three_month_return=_pct_change(price, first),
    )


def default_conditions() -> Dict[str, Any]:
    return {"outlook": "positive", "sp_return": 0.0, "volatility_index": 0.0, "live": False}


def fetch_market_conditions() -> Dict[str, Any]:
    """
    Classify the broad market from the latest S&P 500 move and the VIX level.

    returns:
    - dict – {"outlook": "positive"|"negative", "sp_return": float,
              "volatility_index": float|None, "live": bool}

    notes:
    - The outlook is positive when the S&P 500 closed up on the day.
    - If the index cannot be read the whole reading falls back to
      default_conditions(); a missing VIX only drops the volatility figure.
    """
    try:
        sp = _column(_history(INDEX_SYMBOL, "5d"), "Close")
        sp_return = _pct_change(_finite(sp.iloc[-1]), _finite(sp.iloc[-2]))
        if sp_return is None:
            raise ValueError("not enough index closes")
    except Exception as e:
        log.warning("market.conditions_failed", symbol=INDEX_SYMBOL, error=str(e))
        return default_conditions()

    vix: Optional[float] = None
    try:
        vix_closes = _column(_history(VIX_SYMBOL, "5d"), "Close")
        vix = _finite(vix_closes.iloc[-1])
    except Exception as e:
        log.warning("market.vix_failed", symbol=VIX_SYMBOL, error=str(e))

    return {
        "outlook": "positive" if sp_return > 0 else "negative",
        "sp_return": sp_return,
        "volatility_index": vix,
        "live": True,
    }


def default_context() -> MarketContext:
    """All-defaults snapshot: positive outlook, zero volatility, zero return, no quotes."""
    c = default_conditions()
    return MarketContext(
        outlook=c["outlook"],
        volatility_index=c["volatility_index"],
        sp_return=c["sp_return"],
        as_of=_now_iso(),
        live=False,
    )


def get_market_context(names: Optional[Iterable[str]] = None, timeout: Optional[float] = None) -> MarketContext:
    """
    Build a MarketContext with all reads issued in parallel.

    parameters:
    - names: iterable[str] (optional) – instruments to quote; defaults to the whole catalog.
    - timeout: float (optional) – aggregate budget in seconds (default MARKET_DATA_TIMEOUT_S).

    returns:
    - MarketContext – live snapshot, or default_context() if the budget is exceeded.

    notes:
    - One failing instrument only loses its own optional fields.
    - On timeout the pool is released without waiting for stragglers.
    """
    names = list(names) if names is not None else list(INSTRUMENTS)
    timeout = MARKET_DATA_TIMEOUT_S if timeout is None else timeout

    pool = concurrent.futures.ThreadPoolExecutor(max_workers=MAX_WORKERS)
    try:
        conditions_future = pool.submit(fetch_market_conditions)
        quote_futures = {pool.submit(fetch_instrument_data, n): n for n in names}
        _, pending = concurrent.futures.wait([conditions_future, *quote_futures], timeout=timeout)
        if pending:
            log.warning("market.fetch_timeout", pending=len(pending), timeout_s=timeout)
            return default_context()
        conditions = conditions_future.result()
        quotes = {quote_futures[f]: f.result() for f in quote_futures}
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    return MarketContext(
        outlook=conditions["outlook"],
        volatility_index=conditions["volatility_index"],
        sp_return=conditions["sp_return"],
        as_of=_now_iso(),
        live=conditions["live"],
        instruments=quotes,
    )
