import math

import pandas as pd


def round_half_away(x):
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def is_missing(x):
    """None, NaN or pd.NA."""
    if x is None:
        return True
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def safe_ratio(num, den, default=0.0):
    """num / den, or `default` when either side is missing or den is zero."""
    if is_missing(num) or is_missing(den) or den == 0:
        return default
    return num / den
