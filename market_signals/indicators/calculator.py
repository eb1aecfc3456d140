"""
Momentum and trend indicators over a closing-price series.

RSI (Relative Strength Index)
-----------------------------
Simple-average RSI over the last ``period`` consecutive differences:

    gains    = Σ max(Δ, 0)
    losses   = Σ max(−Δ, 0)
    avg_gain = gains  / period
    avg_loss = losses / period
    rsi      = 100 − 100 / (1 + avg_gain / avg_loss)

Fallbacks (not errors):
  - fewer than ``period + 1`` prices  → 50.0 (neutral, no opinion)
  - ``avg_loss == 0``                 → 100.0 (maximal strength)

Zero-change steps contribute to neither sum, so a flat series has
``avg_loss == 0`` and reports 100.0.

Moving average
--------------
Arithmetic mean of the last ``window`` prices, or of all prices when fewer
are available.  An empty series has no mean and raises ``InvalidInputError``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from market_signals.errors import InvalidInputError
from market_signals.taxonomy.signal_taxonomy import RsiZone

logger = logging.getLogger(__name__)

DEFAULT_RSI_PERIOD = 14
DEFAULT_MA_WINDOW = 7
NEUTRAL_RSI = 50.0

DEFAULT_OVERSOLD = 30.0
DEFAULT_OVERBOUGHT = 70.0


def rsi(prices: Sequence[float], period: int = DEFAULT_RSI_PERIOD) -> float:
    """Compute the Relative Strength Index of the most recent ``period`` steps.

    Args:
        prices: Closing prices, oldest first.
        period: Number of consecutive differences to examine.

    Returns:
        RSI in [0, 100].  ``50.0`` when there are fewer than ``period + 1``
        prices.

    Raises:
        InvalidInputError: If ``period < 1``.
    """
    if period < 1:
        raise InvalidInputError("rsi", f"period must be >= 1, got {period}")

    n = len(prices)
    if n < period + 1:
        logger.debug("rsi: %d prices < period+1=%d; returning neutral", n, period + 1)
        return NEUTRAL_RSI

    gains = 0.0
    losses = 0.0
    for i in range(n - period, n):
        delta = prices[i] - prices[i - 1]
        if delta > 0:
            gains += delta
        elif delta < 0:
            losses -= delta

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def moving_average(prices: Sequence[float], window: int = DEFAULT_MA_WINDOW) -> float:
    """Arithmetic mean of the last ``window`` prices.

    Raises:
        InvalidInputError: If ``prices`` is empty or ``window < 1``.
    """
    if window < 1:
        raise InvalidInputError("moving_average", f"window must be >= 1, got {window}")
    if len(prices) == 0:
        raise InvalidInputError("moving_average", "price window is empty")

    recent = list(prices[-window:])
    return sum(recent) / len(recent)


def rsi_zone(
    value: float,
    oversold: float = DEFAULT_OVERSOLD,
    overbought: float = DEFAULT_OVERBOUGHT,
) -> RsiZone:
    """Classify an RSI value.  Both thresholds are exclusive."""
    if value < oversold:
        return RsiZone.OVERSOLD
    if value > overbought:
        return RsiZone.OVERBOUGHT
    return RsiZone.NEUTRAL
