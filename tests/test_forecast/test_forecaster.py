"""
Tests for market_signals/forecast/forecaster.py.

What we test
------------
forecast():
  - Two-point OLS extrapolation: [100, 102] → 104.
  - Single point echoes the value; empty window → 0.0.
  - Perfect line extrapolates exactly; flat window stays flat.
  - Hand-checked slope/intercept on a noisy window.

trend_direction():
  - UP when the forecast exceeds the last price, DOWN otherwise
    (including equality).
  - Empty window raises InvalidInputError.

confidence():
  - [90, 100, 95] → 90.
  - Flat window clamps to the 98 ceiling; wide range clamps to the 10 floor.
  - Custom floor / ceiling respected.
  - Empty window and non-positive maximum raise InvalidInputError.
"""

from __future__ import annotations

import pytest

from market_signals.errors import InvalidInputError
from market_signals.forecast.forecaster import confidence, forecast, trend_direction
from market_signals.taxonomy.signal_taxonomy import TrendDirection


# ── forecast ──────────────────────────────────────────────────────────────────

class TestForecast:
    def test_two_points(self):
        assert forecast([100.0, 102.0]) == pytest.approx(104.0)

    def test_single_point_echoes(self):
        assert forecast([50.0]) == 50.0

    def test_empty_is_zero(self):
        assert forecast([]) == 0.0

    def test_perfect_line(self):
        prices = [10.0, 13.0, 16.0, 19.0, 22.0, 25.0, 28.0]
        assert forecast(prices) == pytest.approx(31.0)

    def test_flat_window(self):
        assert forecast([7.0] * 7) == pytest.approx(7.0)

    def test_hand_checked_noisy_window(self):
        # x = 0..6, y as below: slope = -805/196, intercept = (775 + 21*805/196)/7
        prices = [140.0, 120.0, 100.0, 100.0, 100.0, 100.0, 115.0]
        slope = -805.0 / 196.0
        intercept = (775.0 - slope * 21.0) / 7.0
        assert forecast(prices) == pytest.approx(slope * 7.0 + intercept)

    def test_accepts_tuple(self):
        assert forecast((1.0, 2.0, 3.0)) == pytest.approx(4.0)


# ── trend_direction ───────────────────────────────────────────────────────────

class TestTrendDirection:
    def test_rising_is_up(self):
        assert trend_direction([100.0, 102.0]) == TrendDirection.UP

    def test_falling_is_down(self):
        assert trend_direction([102.0, 100.0]) == TrendDirection.DOWN

    def test_flat_is_down(self):
        # forecast == last price is not strictly greater
        assert trend_direction([5.0, 5.0, 5.0]) == TrendDirection.DOWN

    def test_single_point_is_down(self):
        assert trend_direction([50.0]) == TrendDirection.DOWN

    def test_rebound_after_slide_is_down(self):
        prices = [140.0, 120.0, 100.0, 100.0, 100.0, 100.0, 115.0]
        assert trend_direction(prices) == TrendDirection.DOWN

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError, match="empty"):
            trend_direction([])


# ── confidence ────────────────────────────────────────────────────────────────

class TestConfidence:
    def test_known_value(self):
        assert confidence([90.0, 100.0, 95.0]) == pytest.approx(90.0)

    def test_flat_window_hits_ceiling(self):
        assert confidence([100.0, 100.0, 100.0]) == 98.0

    def test_wide_range_hits_floor(self):
        # volatility = 0.95 → raw score 5, clamped to 10
        assert confidence([5.0, 100.0]) == 10.0

    def test_single_value_hits_ceiling(self):
        assert confidence([42.0]) == 98.0

    def test_custom_bounds(self):
        assert confidence([100.0, 100.0], floor=0.0, ceiling=100.0) == 100.0
        assert confidence([5.0, 100.0], floor=0.0, ceiling=100.0) == pytest.approx(5.0)

    def test_result_in_range(self, oversold_bounce):
        assert 10.0 <= confidence(oversold_bounce[-7:]) <= 98.0

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError, match="empty"):
            confidence([])

    def test_non_positive_max_raises(self):
        with pytest.raises(InvalidInputError, match="maximum"):
            confidence([0.0, 0.0])
