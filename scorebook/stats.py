"""Numeric helpers shared by the aggregation, trend and ranking code."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd

# Regulation game length in the leagues this data comes from
GAME_INNINGS = 7


def safe_div(numerator, denominator):
    """Divide, yielding 0 wherever the denominator is 0 or the result is not finite.

    Accepts scalars, numpy arrays or pandas Series. A Series in comes back as a
    Series on the same index; scalars come back as ``float``.
    """
    index = None
    for operand in (numerator, denominator):
        if isinstance(operand, pd.Series):
            index = operand.index
            break

    num = np.asarray(numerator, dtype=float)
    den = np.asarray(denominator, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        result = np.where(den != 0, num / np.where(den != 0, den, 1.0), 0.0)
    result = np.where(np.isfinite(result), result, 0.0)

    if result.ndim == 0:
        return float(result)
    if index is not None:
        return pd.Series(result, index=index)
    return result


def innings_pitched(outs):
    """Numeric innings (outs / 3), unrounded."""
    return safe_div(outs, 3)


def display_innings(outs) -> str:
    """Scorebook innings notation: 4 outs -> ``"1.1"``, 6 outs -> ``"2"``."""
    if outs is None or (isinstance(outs, float) and math.isnan(outs)):
        outs = 0
    outs = int(outs)
    whole, partial = divmod(outs, 3)
    return f"{whole}.{partial}" if partial else f"{whole}"


def format_rate(value, leading_zero: bool = False):
    """Format a rate to 3 decimals, ``.345`` style unless ``leading_zero``."""
    if not isinstance(value, (int, float, np.integer, np.floating)) or isinstance(value, bool):
        return value
    if math.isnan(value):
        return value
    formatted = f"{value:.3f}"
    if not leading_zero and formatted.startswith("0"):
        formatted = formatted[1:]
    return formatted


def is_integral(value) -> bool:
    try:
        return float(value).is_integer()
    except (TypeError, ValueError):
        return False
