"""
Signal rules: map indicator and forecast outputs to a discrete recommendation.

Decision table (evaluated in order, reasons appended as each branch fires)
--------------------------------------------------------------------------
1. RSI branch
       rsi < oversold     → "RSI is Oversold (Buy Signal)",   base BUY
       rsi > overbought   → "RSI is Overbought (Sell Signal)", base SELL
       otherwise          → "RSI is Neutral",                 base HOLD

2. Moving-average branch
       last_price >  MA   → "Price is above 7-day Moving Average"
                             BUY  → STRONG_BUY
                             HOLD → ACCUMULATE
       last_price <= MA   → "Price is below 7-day Moving Average"
                             SELL → STRONG_SELL

3. Trend branch (never changes the action)
       UP   → "Model predicts upward trend"
       DOWN → "Model predicts downward trend"

Resulting action / reason combinations
--------------------------------------
    oversold   + above MA → STRONG_BUY     oversold   + below MA → BUY
    neutral    + above MA → ACCUMULATE     neutral    + below MA → HOLD
    overbought + above MA → SELL           overbought + below MA → STRONG_SELL

The table is stateless: each call depends only on its arguments.
"""

from __future__ import annotations

from market_signals.indicators.calculator import DEFAULT_OVERBOUGHT, DEFAULT_OVERSOLD
from market_signals.models.signal import Recommendation
from market_signals.taxonomy.signal_taxonomy import (
    RecommendationAction,
    SignalReason,
    TrendDirection,
)

# MA branch escalations: base action → escalated action
_ABOVE_MA_ESCALATION: dict[RecommendationAction, RecommendationAction] = {
    RecommendationAction.BUY:  RecommendationAction.STRONG_BUY,
    RecommendationAction.HOLD: RecommendationAction.ACCUMULATE,
}
_BELOW_MA_ESCALATION: dict[RecommendationAction, RecommendationAction] = {
    RecommendationAction.SELL: RecommendationAction.STRONG_SELL,
}


def decide(
    rsi:             float,
    last_price:      float,
    moving_average:  float,
    trend:           TrendDirection,
    oversold:        float = DEFAULT_OVERSOLD,
    overbought:      float = DEFAULT_OVERBOUGHT,
) -> tuple[RecommendationAction, list[SignalReason]]:
    """Run the decision table.

    Args:
        rsi:            RSI value in [0, 100].
        last_price:     Most recent price.
        moving_average: Short moving average of the same series.
        trend:          Forecast direction.
        oversold:       RSI strictly below this is oversold.
        overbought:     RSI strictly above this is overbought.

    Returns:
        ``(action, reasons)`` where ``reasons`` has exactly three entries in
        firing order.
    """
    reasons: list[SignalReason] = []

    # ── RSI branch ────────────────────────────────────────────────────────────
    if rsi < oversold:
        reasons.append(SignalReason.RSI_OVERSOLD)
        action = RecommendationAction.BUY
    elif rsi > overbought:
        reasons.append(SignalReason.RSI_OVERBOUGHT)
        action = RecommendationAction.SELL
    else:
        reasons.append(SignalReason.RSI_NEUTRAL)
        action = RecommendationAction.HOLD

    # ── Moving-average branch ─────────────────────────────────────────────────
    if last_price > moving_average:
        reasons.append(SignalReason.ABOVE_MA)
        action = _ABOVE_MA_ESCALATION.get(action, action)
    else:
        reasons.append(SignalReason.BELOW_MA)
        action = _BELOW_MA_ESCALATION.get(action, action)

    # ── Trend branch ──────────────────────────────────────────────────────────
    if trend == TrendDirection.UP:
        reasons.append(SignalReason.TREND_UP)
    else:
        reasons.append(SignalReason.TREND_DOWN)

    return action, reasons


def build_recommendation(
    rsi:             float,
    last_price:      float,
    moving_average:  float,
    trend:           TrendDirection,
    oversold:        float = DEFAULT_OVERSOLD,
    overbought:      float = DEFAULT_OVERBOUGHT,
) -> Recommendation:
    """Run :func:`decide` and wrap the result in a validated ``Recommendation``."""
    action, reasons = decide(
        rsi=rsi,
        last_price=last_price,
        moving_average=moving_average,
        trend=trend,
        oversold=oversold,
        overbought=overbought,
    )
    return Recommendation(action=action, reasons=tuple(r.value for r in reasons))
