"""
Shared pytest fixtures for the market signal engine test suite.

Provides:
  - Price series fixtures with hand-checked indicator values.
  - ``default_config``: an ``AppConfig`` built from model defaults only
    (no TOML, no environment), so tests never depend on local overrides.
  - Sample model factories for use in multiple test modules.

Hand-checked series
-------------------
oversold_bounce   : 300 → 100 in −20 steps, flat, then 115.
                    Last 14 diffs: ten −20, three 0, one +15.
                    RSI = 100 − 100 / (1 + 15/200) ≈ 6.977.
                    MA7 = 775 / 7 ≈ 110.71 < 115 → above MA → STRONG_BUY.
overbought_dip    : 100 → 300 in +20 steps, flat, then 285.
                    RSI = 100 − 100 / (1 + 200/15) ≈ 93.023.
                    MA7 = 2025 / 7 ≈ 289.29 >= 285 → below MA → STRONG_SELL.
choppy            : 100, 101, 100, 101, ... (15 points, ends on 100).
                    Seven +1 and seven −1 → RSI = 50.
                    MA7 = 703 / 7 ≈ 100.43 >= 100 → below MA → HOLD.
"""

from __future__ import annotations

import logging

import pytest

from market_signals.config import AppConfig
from market_signals.models.signal import (
    ForecastResult,
    IndicatorSnapshot,
    Recommendation,
)
from market_signals.taxonomy.signal_taxonomy import (
    RecommendationAction,
    SignalReason,
    TrendDirection,
)


# ── Price series ──────────────────────────────────────────────────────────────

@pytest.fixture
def rising_15() -> list[float]:
    """1..15, every difference +1, RSI 100."""
    return [float(i) for i in range(1, 16)]


@pytest.fixture
def falling_20() -> list[float]:
    """200, 195, ..., 105, every difference −5, RSI 0."""
    return [200.0 - 5.0 * i for i in range(20)]


@pytest.fixture
def rising_14() -> list[float]:
    """14 strictly increasing prices, one short of an RSI(14) window."""
    return [100.0 + 2.0 * i for i in range(14)]


@pytest.fixture
def oversold_bounce() -> list[float]:
    return [300.0 - 20.0 * i for i in range(11)] + [100.0, 100.0, 100.0, 115.0]


@pytest.fixture
def overbought_dip() -> list[float]:
    return [100.0 + 20.0 * i for i in range(11)] + [300.0, 300.0, 300.0, 285.0]


@pytest.fixture
def choppy() -> list[float]:
    return [100.0 if i % 2 == 0 else 101.0 for i in range(15)]


@pytest.fixture
def custom_threshold_bounce() -> list[float]:
    """120 → 111, then back up to 116.

    Last 14 diffs: nine −1, five +1 → RSI = 100 − 100 / (1 + 5/9) ≈ 35.71.
    Neutral under 30 / 70, oversold under 40 / 60.
    MA7 = 793 / 7 ≈ 113.29 < 116 → above MA.
    """
    return [120.0 - i for i in range(10)] + [112.0, 113.0, 114.0, 115.0, 116.0]


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo any ``configure_logging()`` call made during a test."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


# ── Sample models ─────────────────────────────────────────────────────────────

@pytest.fixture
def sample_snapshot() -> IndicatorSnapshot:
    return IndicatorSnapshot(rsi=25.0, moving_average=100.0)


@pytest.fixture
def sample_forecast_up() -> ForecastResult:
    return ForecastResult(
        predicted_value=110.0,
        trend_direction=TrendDirection.UP,
        confidence=90.0,
        last_price=105.0,
    )


@pytest.fixture
def sample_recommendation() -> Recommendation:
    return Recommendation(
        action=RecommendationAction.STRONG_BUY,
        reasons=[
            SignalReason.RSI_OVERSOLD.value,
            SignalReason.ABOVE_MA.value,
            SignalReason.TREND_UP.value,
        ],
    )
