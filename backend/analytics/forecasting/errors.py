"""
analytics/forecasting/errors.py
────────────────────────────────
Exception hierarchy for the price forecasting engine.

Only :class:`PredictionError` ever reaches callers of
:func:`analytics.forecasting.engine.forecast`; the subclasses are raised
inside individual pipeline stages.
"""


class PredictionError(Exception):
    """A forecast could not be produced for the request."""


class InsufficientDataError(PredictionError):
    """Fewer than the minimum number of valid price points survived cleaning."""

    def __init__(self, valid_points: int, required: int = 2) -> None:
        self.valid_points = valid_points
        self.required = required
        super().__init__(
            f"Need at least {required} valid price points, got {valid_points}"
        )


class DegenerateSeriesError(PredictionError):
    """All normalised timestamps coincide, so the OLS slope is undefined."""
