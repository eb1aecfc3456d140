"""
Exceptions raised by the market signal engine.

Insufficient history is NOT an error: ``rsi()`` and ``forecast()`` return
documented fallback values instead.  ``InvalidInputError`` is reserved for
inputs on which a computation is undefined (empty windows, non-positive
maxima, non-finite prices).
"""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a price window cannot be used for a computation.

    Attributes:
        operation: Name of the computation that rejected the input.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {detail}")
