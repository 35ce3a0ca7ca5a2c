from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when chart input data cannot be coerced into engine value objects."""


class ChartConfigError(ValueError):
    """Raised when chart settings contain unknown keys or invalid values."""
