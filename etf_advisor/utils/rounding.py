# PURPOSE: Utility to neatly round instrument weights for display.
# CONTEXT: Used by the advice table so the printed percentages always add up to 100%.
# CREDITS: Original work — no external code reuse.

from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import Dict

# Set the global precision for Decimal calculations (10 digits total).
getcontext().prec = 10

def round_weights(weights: Dict[str, float], places: int = 3) -> Dict[str, float]:
    """
    Round each instrument weight to a fixed number of decimal places.

    parameters:
    - weights: dict – instrument name -> weight, e.g. {"Satrix Top 40 ETF": 0.5634, ...}.
    - places: int – number of decimal places to round to (default = 3).

    returns:
    - dict – same keys, rounded floats that sum to exactly 1.0.

    notes:
    - The largest holding absorbs the rounding residual, so it moves by at most
      one unit in the last place.
    """
    if not weights:
        return {}
    q = Decimal(f'1e-{places}')
    rounded = {k: Decimal(str(v)).quantize(q, ROUND_HALF_UP) for k, v in weights.items()}

    largest = max(weights, key=weights.get)
    rounded[largest] += Decimal(1) - sum(rounded.values())

    # Convert Decimals back to floats for downstream compatibility.
    return {k: float(v) for k, v in rounded.items()}
