"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept engine models and return plain multi-line strings
suitable for ``typer.echo()``.

The RSI zone label comes from ``SignalReport.rsi_zone``, i.e. the thresholds
that drove the recommendation.

No third-party dependencies (no ``rich``, no ``colorama``).

Report layout
-------------
::

  == bitcoin (30 points) ==
  Current price        67,842.50
  Moving average (7)   65,230.00   (price +4.00% vs MA)
  RSI                  32.50       [NEUTRAL]

  Predicted next       71,250.00   (+5.02% from current)
  Trend                UP
  Confidence           87%

  RECOMMENDATION: ACCUMULATE  (bullish)
    [x] RSI is Neutral
    [x] Price is above 7-day Moving Average
    [x] Model predicts upward trend
"""

from __future__ import annotations

from market_signals.models.signal import SignalReport
from market_signals.taxonomy.signal_taxonomy import RecommendationAction


def format_signal_report(report: SignalReport, ma_window: int = 7) -> str:
    """Render a ``SignalReport`` as an aligned plain-text block."""
    ind = report.indicators
    fc = report.forecast
    rec = report.recommendation
    title = report.asset or "series"

    lines = [
        f"  == {title} ({report.n_points} points) ==",
        f"  {'Current price':<20} {_money(report.last_price)}",
        f"  {f'Moving average ({ma_window})':<20} {_money(ind.moving_average):<12}"
        f"(price {_pct(report.price_vs_ma_pct)} vs MA)",
        f"  {'RSI':<20} {ind.rsi:<12.2f}[{report.rsi_zone}]",
        "",
        f"  {'Predicted next':<20} {_money(fc.predicted_value):<12}"
        f"({_pct(fc.predicted_change_pct)} from current)",
        f"  {'Trend':<20} {fc.trend_direction}",
        f"  {'Confidence':<20} {fc.confidence:.0f}%",
        "",
        f"  RECOMMENDATION: {rec.action.label}  ({_bias(rec.action)})",
    ]
    lines.extend(f"    [x] {reason}" for reason in rec.reasons)
    return "\n".join(lines)


def format_asset_list(assets: list[str], default_asset: str) -> str:
    """One asset per line, the default marked with ``*``."""
    if not assets:
        return "  (no assets configured)"
    return "\n".join(
        f"  {'*' if a == default_asset else ' '} {a}" for a in assets
    )


# ── Helpers ──────────────────────────────────────────────────────────────────

def _money(value: float) -> str:
    return f"{value:,.2f}"


def _pct(fraction: float) -> str:
    return f"{fraction:+.2%}"


def _bias(action: RecommendationAction) -> str:
    if action.is_bullish:
        return "bullish"
    if action.is_bearish:
        return "bearish"
    return "neutral"
