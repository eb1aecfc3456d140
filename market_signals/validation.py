"""
Input validation for price series handed to the engine.

The calculator functions assume a clean series.  Callers that read prices
from files or other untrusted sources run them through ``validate_series()``
first so that NaN, infinities and non-positive prices never reach the maths.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Real

from market_signals.errors import InvalidInputError

_MAX_REPORTED = 10


def validate_series(prices: Sequence[float]) -> list[float]:
    """Check that ``prices`` is a non-empty series of finite positive numbers.

    Args:
        prices: Candidate price series, oldest first.

    Returns:
        The prices as a new list of floats.

    Raises:
        InvalidInputError: If the series is empty or any element is not a
            finite positive number.  The message lists up to 10 offending
            indices.
    """
    if len(prices) == 0:
        raise InvalidInputError("validate_series", "price series is empty")

    bad: list[str] = []
    for i, p in enumerate(prices):
        if isinstance(p, bool) or not isinstance(p, Real):
            bad.append(f"[{i}]={p!r} (not a number)")
        elif not math.isfinite(p):
            bad.append(f"[{i}]={p!r} (not finite)")
        elif p <= 0:
            bad.append(f"[{i}]={p!r} (not positive)")

    if bad:
        detail = ", ".join(bad[:_MAX_REPORTED])
        suffix = f", … and {len(bad) - _MAX_REPORTED} more" if len(bad) > _MAX_REPORTED else ""
        raise InvalidInputError(
            "validate_series", f"{len(bad)} invalid price(s): {detail}{suffix}"
        )

    return [float(p) for p in prices]


def ensure_finite(operation: str, **values: float) -> None:
    """Raise ``InvalidInputError`` if any named value is NaN or infinite."""
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidInputError(operation, f"{name} is not finite ({value!r})")
