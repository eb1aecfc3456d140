"""
Signal taxonomy for the market signal engine.

Three small vocabularies describe every engine output:
  - ``RecommendationAction`` — the discrete trading label.
  - ``TrendDirection``       — direction of the one-step OLS forecast.
  - ``RsiZone``              — where the RSI value sits relative to the
    oversold / overbought thresholds.

Usage example::

    from market_signals.taxonomy.signal_taxonomy import RecommendationAction

    action = RecommendationAction.STRONG_BUY

This module has NO imports from any other ``market_signals`` package.
"""

from enum import StrEnum


class RecommendationAction(StrEnum):
    """Discrete recommendation produced by the signal rules."""

    STRONG_BUY = "STRONG_BUY"
    """Oversold RSI confirmed by price above the moving average."""

    BUY = "BUY"
    """Oversold RSI without moving-average confirmation."""

    ACCUMULATE = "ACCUMULATE"
    """Neutral RSI with price above the moving average."""

    HOLD = "HOLD"
    """Neutral RSI, price at or below the moving average."""

    SELL = "SELL"
    """Overbought RSI while price is still above the moving average."""

    STRONG_SELL = "STRONG_SELL"
    """Overbought RSI confirmed by price at or below the moving average."""

    @property
    def label(self) -> str:
        """Display label, e.g. ``"STRONG BUY"``."""
        return self.value.replace("_", " ")

    @property
    def is_bullish(self) -> bool:
        return self in (
            RecommendationAction.STRONG_BUY,
            RecommendationAction.BUY,
            RecommendationAction.ACCUMULATE,
        )

    @property
    def is_bearish(self) -> bool:
        return self in (RecommendationAction.SELL, RecommendationAction.STRONG_SELL)


class TrendDirection(StrEnum):
    """Direction of the forecast relative to the last observed price."""

    UP = "UP"
    DOWN = "DOWN"


class RsiZone(StrEnum):
    """RSI classification against the oversold / overbought thresholds."""

    OVERSOLD = "OVERSOLD"
    NEUTRAL = "NEUTRAL"
    OVERBOUGHT = "OVERBOUGHT"


class SignalReason(StrEnum):
    """Fixed justification strings appended by the signal rules.

    The string values are part of the public output: callers display them
    verbatim in the reason checklist.  The moving-average reasons name the
    7-day window even when ``indicators.ma_window`` is configured otherwise.
    """

    # ── RSI branch ────────────────────────────────────────────────────────────
    RSI_OVERSOLD = "RSI is Oversold (Buy Signal)"
    RSI_OVERBOUGHT = "RSI is Overbought (Sell Signal)"
    RSI_NEUTRAL = "RSI is Neutral"

    # ── Moving-average branch ─────────────────────────────────────────────────
    ABOVE_MA = "Price is above 7-day Moving Average"
    BELOW_MA = "Price is below 7-day Moving Average"

    # ── Trend branch ──────────────────────────────────────────────────────────
    TREND_UP = "Model predicts upward trend"
    TREND_DOWN = "Model predicts downward trend"
