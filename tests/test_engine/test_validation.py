"""Tests for market_signals.validation."""

from __future__ import annotations

import pytest

from market_signals.errors import InvalidInputError
from market_signals.validation import ensure_finite, validate_series


class TestValidateSeries:
    def test_returns_float_list(self):
        assert validate_series((1, 2.5, 3)) == [1.0, 2.5, 3.0]

    def test_repeated_values_allowed(self):
        assert validate_series([5.0, 5.0, 5.0]) == [5.0, 5.0, 5.0]

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError, match="empty"):
            validate_series([])

    def test_reports_offending_indices(self):
        with pytest.raises(InvalidInputError, match=r"\[1\].*\[3\]"):
            validate_series([1.0, float("nan"), 2.0, -1.0])

    def test_rejects_strings_and_bools(self):
        with pytest.raises(InvalidInputError, match="not a number"):
            validate_series([1.0, "2"])
        with pytest.raises(InvalidInputError, match="not a number"):
            validate_series([True])

    def test_caps_reported_errors(self):
        with pytest.raises(InvalidInputError, match="and 5 more"):
            validate_series([0.0] * 15)

    def test_error_carries_operation(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_series([])
        assert exc_info.value.operation == "validate_series"


class TestEnsureFinite:
    def test_finite_passes(self):
        ensure_finite("op", a=1.0, b=-2.0)

    def test_nan_raises_with_name(self):
        with pytest.raises(InvalidInputError, match="b is not finite"):
            ensure_finite("op", a=1.0, b=float("nan"))
