"""
Engine output models.

``IndicatorSnapshot`` holds RSI and the short moving average for one series.
``ForecastResult`` holds the one-step OLS extrapolation, its direction and
the volatility-based confidence score for the recent window.
``Recommendation`` is the discrete action plus its ordered reason list.
``SignalReport`` bundles all three for one end-to-end analysis.

All models are frozen.  They are recomputed from the input series on every
call and are never mutated in place.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from market_signals.taxonomy.signal_taxonomy import (
    RecommendationAction,
    RsiZone,
    SignalReason,
    TrendDirection,
)

# Required (RSI reason, MA reason) pair for every action.  The rule table in
# ``signals/rules.py`` can only ever produce these combinations.
ACTION_REASON_PAIRS: dict[RecommendationAction, tuple[SignalReason, SignalReason]] = {
    RecommendationAction.STRONG_BUY:  (SignalReason.RSI_OVERSOLD,   SignalReason.ABOVE_MA),
    RecommendationAction.BUY:         (SignalReason.RSI_OVERSOLD,   SignalReason.BELOW_MA),
    RecommendationAction.ACCUMULATE:  (SignalReason.RSI_NEUTRAL,    SignalReason.ABOVE_MA),
    RecommendationAction.HOLD:        (SignalReason.RSI_NEUTRAL,    SignalReason.BELOW_MA),
    RecommendationAction.SELL:        (SignalReason.RSI_OVERBOUGHT, SignalReason.ABOVE_MA),
    RecommendationAction.STRONG_SELL: (SignalReason.RSI_OVERBOUGHT, SignalReason.BELOW_MA),
}

_TREND_REASONS = frozenset({SignalReason.TREND_UP.value, SignalReason.TREND_DOWN.value})

_ZONE_REASONS: dict[RsiZone, SignalReason] = {
    RsiZone.OVERSOLD:   SignalReason.RSI_OVERSOLD,
    RsiZone.NEUTRAL:    SignalReason.RSI_NEUTRAL,
    RsiZone.OVERBOUGHT: SignalReason.RSI_OVERBOUGHT,
}


class IndicatorSnapshot(BaseModel):
    """RSI and moving average computed from one price series.

    Attributes:
        rsi:            Relative Strength Index in [0, 100].
        moving_average: Arithmetic mean of the most recent window.
    """

    model_config = ConfigDict(frozen=True)

    rsi: float
    moving_average: float

    @field_validator("rsi")
    @classmethod
    def validate_rsi_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"rsi must be in [0, 100], got {v}.")
        return v

class ForecastResult(BaseModel):
    """One-step-ahead forecast for the recent price window.

    Attributes:
        predicted_value: OLS line evaluated one step past the window.
        trend_direction: ``UP`` if ``predicted_value > last_price`` else ``DOWN``.
        confidence:      Volatility-based confidence score (percent).
        last_price:      Last price of the window the forecast was fitted on.
    """

    model_config = ConfigDict(frozen=True)

    predicted_value: float
    trend_direction: TrendDirection
    confidence: float
    last_price: float

    @field_validator("confidence")
    @classmethod
    def validate_confidence_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"confidence must be in [0, 100], got {v}.")
        return v

    @model_validator(mode="after")
    def validate_direction_matches_prediction(self) -> "ForecastResult":
        expected = (
            TrendDirection.UP if self.predicted_value > self.last_price
            else TrendDirection.DOWN
        )
        if self.trend_direction != expected:
            raise ValueError(
                f"trend_direction {self.trend_direction} contradicts "
                f"predicted_value={self.predicted_value} vs last_price={self.last_price}."
            )
        return self

    @property
    def predicted_change_pct(self) -> float:
        """Fractional change from ``last_price`` to ``predicted_value``."""
        if self.last_price <= 0:
            return 0.0
        return (self.predicted_value - self.last_price) / self.last_price


class Recommendation(BaseModel):
    """Discrete trading recommendation with its ordered justification list.

    ``reasons`` always has exactly three entries: the RSI reason, the
    moving-average reason, and the trend reason, in that order.  The action
    and reasons are validated against ``ACTION_REASON_PAIRS`` so the two can
    never disagree.  ``reasons`` is an immutable tuple.
    """

    model_config = ConfigDict(frozen=True)

    action: RecommendationAction
    reasons: tuple[str, ...]

    @model_validator(mode="after")
    def validate_reasons_agree_with_action(self) -> "Recommendation":
        if len(self.reasons) != 3:
            raise ValueError(
                f"reasons must contain exactly 3 entries, got {len(self.reasons)}."
            )
        rsi_reason, ma_reason = ACTION_REASON_PAIRS[self.action]
        if self.reasons[0] != rsi_reason.value or self.reasons[1] != ma_reason.value:
            raise ValueError(
                f"{self.action} requires reasons "
                f"['{rsi_reason.value}', '{ma_reason.value}', <trend>], "
                f"got {list(self.reasons)}."
            )
        if self.reasons[2] not in _TREND_REASONS:
            raise ValueError(f"Unknown trend reason '{self.reasons[2]}'.")
        return self


class SignalReport(BaseModel):
    """End-to-end analysis of one price series.

    Attributes:
        asset:           Optional asset label (e.g. ``"bitcoin"``).
        n_points:        Length of the analysed series.
        last_price:      Most recent price in the series.
        indicators:      RSI + moving average.
        forecast:        Forecast over the recent window.
        recommendation:  Action + reasons.
        rsi_zone:        Zone of ``indicators.rsi`` against the thresholds that
                         produced ``recommendation``.
        series_hash:     Short SHA-256 of the series (cache key / provenance).
    """

    model_config = ConfigDict(frozen=True)

    asset: Optional[str] = None
    n_points: int
    last_price: float
    indicators: IndicatorSnapshot
    forecast: ForecastResult
    recommendation: Recommendation
    rsi_zone: RsiZone
    series_hash: str

    @model_validator(mode="after")
    def validate_zone_matches_rsi_reason(self) -> "SignalReport":
        expected = _ZONE_REASONS[self.rsi_zone].value
        if self.recommendation.reasons[0] != expected:
            raise ValueError(
                f"rsi_zone {self.rsi_zone} disagrees with RSI reason "
                f"'{self.recommendation.reasons[0]}'."
            )
        return self

    @property
    def price_vs_ma_pct(self) -> float:
        """Fractional distance of ``last_price`` from the moving average."""
        ma = self.indicators.moving_average
        if ma <= 0:
            return 0.0
        return (self.last_price - ma) / ma
