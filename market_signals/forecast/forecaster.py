"""
One-step linear-trend forecaster and volatility-based confidence score.

Forecast
--------
Ordinary least squares of price against index position x = 0..n-1 over the
window the caller supplies (typically the last 7 prices):

    slope     = (nΣxy − ΣxΣy) / (nΣx² − (Σx)²)
    intercept = (Σy − slope·Σx) / n
    forecast  = slope·n + intercept

The line is evaluated at x = n, one step beyond the observed window.  The
index domain is fixed, so the denominator is nonzero for every n >= 2.

Degenerate windows (fallbacks, not errors):
  - n == 0 → 0.0
  - n == 1 → the single price

Confidence
----------
    volatility = (max − min) / max
    confidence = clamp((1 − volatility) · 100, 10, 98)

A flat window scores the ceiling (98); a window whose range equals its
maximum scores the floor (10).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from market_signals.errors import InvalidInputError
from market_signals.taxonomy.signal_taxonomy import TrendDirection

logger = logging.getLogger(__name__)

DEFAULT_FORECAST_WINDOW = 7
CONFIDENCE_FLOOR = 10.0
CONFIDENCE_CEILING = 98.0


def forecast(prices: Sequence[float]) -> float:
    """Extrapolate the OLS line through ``prices`` one step forward.

    Args:
        prices: Price window, oldest first.

    Returns:
        Predicted next price.  ``0.0`` for an empty window and the single
        price for a one-element window.
    """
    n = len(prices)
    if n < 2:
        logger.debug("forecast: degenerate window of %d point(s)", n)
        return float(prices[0]) if n == 1 else 0.0

    sum_x = 0.0
    sum_y = 0.0
    sum_xy = 0.0
    sum_xx = 0.0
    for x, y in enumerate(prices):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return slope * n + intercept


def trend_direction(prices: Sequence[float]) -> TrendDirection:
    """``UP`` if the forecast exceeds the last price, else ``DOWN``.

    Raises:
        InvalidInputError: If ``prices`` is empty.
    """
    if len(prices) == 0:
        raise InvalidInputError("trend_direction", "price window is empty")
    return TrendDirection.UP if forecast(prices) > prices[-1] else TrendDirection.DOWN


def confidence(
    recent_prices: Sequence[float],
    floor: float = CONFIDENCE_FLOOR,
    ceiling: float = CONFIDENCE_CEILING,
) -> float:
    """Confidence score (percent) from the normalised range of ``recent_prices``.

    Args:
        recent_prices: Non-empty price window with a positive maximum.
        floor:         Lowest score returned.
        ceiling:       Highest score returned.

    Returns:
        Score in [floor, ceiling].

    Raises:
        InvalidInputError: If the window is empty or its maximum is <= 0.
    """
    if len(recent_prices) == 0:
        raise InvalidInputError("confidence", "price window is empty")

    hi = max(recent_prices)
    lo = min(recent_prices)
    if hi <= 0:
        raise InvalidInputError("confidence", f"window maximum must be > 0, got {hi}")

    volatility = (hi - lo) / hi
    return _clamp((1.0 - volatility) * 100.0, floor, ceiling)


# ── Helper ────────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
