"""
Market signal engine: the three public entry points plus an end-to-end helper.

Control flow
------------
    series ──► compute_indicators() ──┐
       │                              ├──► compute_recommendation() ──► caller
       └─► last N ─► compute_forecast()┘

``compute_indicators`` and ``compute_forecast`` are independent; the
recommendation consumes both together with the last price and the moving
average.  ``analyze_series`` runs the whole flow for one series and returns a
``SignalReport``.

All functions are pure.  ``SignalEngine`` adds an explicit, bounded LRU cache
keyed on a hash of the series and the engine parameters; it is the only
stateful object in the package and is safe to share between threads.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from collections.abc import Sequence
from typing import Optional

from market_signals.config import AppConfig
from market_signals.forecast.forecaster import (
    CONFIDENCE_CEILING,
    CONFIDENCE_FLOOR,
    confidence,
    forecast,
    trend_direction,
)
from market_signals.indicators.calculator import (
    DEFAULT_MA_WINDOW,
    DEFAULT_OVERBOUGHT,
    DEFAULT_OVERSOLD,
    DEFAULT_RSI_PERIOD,
    moving_average,
    rsi,
    rsi_zone,
)
from market_signals.models.signal import (
    ForecastResult,
    IndicatorSnapshot,
    Recommendation,
    SignalReport,
)
from market_signals.signals.rules import build_recommendation
from market_signals.validation import ensure_finite, validate_series

logger = logging.getLogger(__name__)


def compute_indicators(
    series: Sequence[float],
    rsi_period: int = DEFAULT_RSI_PERIOD,
    ma_window: int = DEFAULT_MA_WINDOW,
) -> IndicatorSnapshot:
    """RSI and moving average of ``series``.

    Raises:
        InvalidInputError: If ``series`` is empty (no moving average).
    """
    return IndicatorSnapshot(
        rsi=rsi(series, period=rsi_period),
        moving_average=moving_average(series, window=ma_window),
    )


def compute_forecast(
    recent_window: Sequence[float],
    confidence_floor: float = CONFIDENCE_FLOOR,
    confidence_ceiling: float = CONFIDENCE_CEILING,
) -> ForecastResult:
    """Forecast, trend direction and confidence for the recent window.

    Raises:
        InvalidInputError: If the window is empty or its maximum is <= 0.
    """
    score = confidence(recent_window, floor=confidence_floor, ceiling=confidence_ceiling)
    return ForecastResult(
        predicted_value=forecast(recent_window),
        trend_direction=trend_direction(recent_window),
        confidence=score,
        last_price=recent_window[-1],
    )


def compute_recommendation(
    snapshot: IndicatorSnapshot,
    forecast_result: ForecastResult,
    last_price: float,
    moving_average: Optional[float] = None,
    oversold: float = DEFAULT_OVERSOLD,
    overbought: float = DEFAULT_OVERBOUGHT,
) -> Recommendation:
    """Apply the signal rules.

    ``moving_average`` defaults to ``snapshot.moving_average``.
    """
    ma = snapshot.moving_average if moving_average is None else moving_average
    return build_recommendation(
        rsi=snapshot.rsi,
        last_price=last_price,
        moving_average=ma,
        trend=forecast_result.trend_direction,
        oversold=oversold,
        overbought=overbought,
    )


def series_hash(series: Sequence[float], config: AppConfig) -> str:
    """Return a 16-char SHA-256 hex digest of the series and engine parameters."""
    payload = json.dumps(
        {
            "prices": [float(p) for p in series],
            "indicators": config.indicators.model_dump(),
            "forecast": config.forecast.model_dump(),
            "signals": config.signals.model_dump(),
        },
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


def analyze_series(
    series: Sequence[float],
    config: Optional[AppConfig] = None,
    asset: Optional[str] = None,
) -> SignalReport:
    """Run indicators, forecast and rules over one series.

    The forecast window is the last ``config.forecast.window`` prices.

    Raises:
        InvalidInputError: If the series is empty, contains non-finite or
            non-positive prices, or any output is non-finite.
    """
    cfg = config or AppConfig()
    prices = validate_series(series)
    last_price = prices[-1]

    snapshot = compute_indicators(
        prices,
        rsi_period=cfg.indicators.rsi_period,
        ma_window=cfg.indicators.ma_window,
    )
    fc = compute_forecast(
        prices[-cfg.forecast.window:],
        confidence_floor=cfg.forecast.confidence_floor,
        confidence_ceiling=cfg.forecast.confidence_ceiling,
    )
    ensure_finite(
        "analyze_series",
        rsi=snapshot.rsi,
        moving_average=snapshot.moving_average,
        predicted_value=fc.predicted_value,
        confidence=fc.confidence,
    )
    rec = compute_recommendation(
        snapshot,
        fc,
        last_price=last_price,
        oversold=cfg.signals.oversold,
        overbought=cfg.signals.overbought,
    )

    report = SignalReport(
        asset=asset,
        n_points=len(prices),
        last_price=last_price,
        indicators=snapshot,
        forecast=fc,
        recommendation=rec,
        rsi_zone=rsi_zone(
            snapshot.rsi,
            oversold=cfg.signals.oversold,
            overbought=cfg.signals.overbought,
        ),
        series_hash=series_hash(prices, cfg),
    )
    logger.info(
        "Analyzed %s: %d points | rsi=%.2f | ma=%.4f | forecast=%.4f (%s) | %s",
        asset or "series",
        report.n_points,
        snapshot.rsi,
        snapshot.moving_average,
        fc.predicted_value,
        fc.trend_direction,
        rec.action,
        extra={
            "asset": asset,
            "series_hash": report.series_hash,
            "action": str(rec.action),
        },
    )
    return report


class SignalEngine:
    """Memoised front-end for :func:`analyze_series`.

    Reports are cached by ``(series_hash, asset)`` in a bounded LRU.  A
    ``cache_size`` of 0 disables caching.  A lock guards the cache so one
    engine can be shared between threads.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()
        self._max_entries = self.config.engine.cache_size
        self._cache: OrderedDict[tuple[str, Optional[str]], SignalReport] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def analyze(
        self,
        series: Sequence[float],
        asset: Optional[str] = None,
    ) -> SignalReport:
        """Return the cached report for ``series`` or compute and cache it."""
        prices = validate_series(series)
        key = (series_hash(prices, self.config), asset)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                self.hits += 1
                return cached
            self.misses += 1

        report = analyze_series(prices, config=self.config, asset=asset)

        if self._max_entries > 0:
            with self._lock:
                self._cache[key] = report
                self._cache.move_to_end(key)
                while len(self._cache) > self._max_entries:
                    self._cache.popitem(last=False)
        return report

    def clear(self) -> None:
        """Drop all cached reports and reset hit/miss counters."""
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
