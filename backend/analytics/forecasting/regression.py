"""
analytics/forecasting/regression.py
────────────────────────────────────
Regression Estimator: ordinary least squares over normalised time.

The time axis is re-expressed as hours elapsed since the first point so the
sums of squares stay small regardless of how large the absolute epoch
values are.

Every estimate is tagged with the path that produced it (see
:class:`EstimateMethod`) so callers and tests can tell a genuine
regression apart from the fallbacks.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from analytics.forecasting.errors import DegenerateSeriesError
from analytics.forecasting.series import elapsed_hours

logger = logging.getLogger(__name__)

# |n·Σxx − (Σx)²| below this means every x coincides.
DEGENERATE_DENOMINATOR = 1e-4


class EstimateMethod(str, Enum):
    """Which path produced a predicted price."""

    REGRESSION = "regression"
    MEAN_FALLBACK = "mean_fallback"
    TREND_FALLBACK = "trend_fallback"


@dataclass(frozen=True)
class Estimate:
    """
    A predicted price together with its provenance.

    Attributes:
        method:    Path that produced ``value``.
        value:     Predicted price.  Unguarded estimates may be negative.
        slope:     OLS slope in price units per hour (``None`` for the mean
                   fallback).
        intercept: OLS intercept at the first observation (``None`` for the
                   mean fallback).
    """

    method: EstimateMethod
    value: float
    slope: Optional[float] = None
    intercept: Optional[float] = None

    def with_value(self, value: float, method: Optional[EstimateMethod] = None) -> "Estimate":
        """Return a copy with a new value (and optionally a new method)."""
        return replace(self, value=value, method=method or self.method)


def fit_line(x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    """
    Closed-form OLS fit of ``y = slope · x + intercept``.

    Args:
        x: Independent variable (hours since the first point).
        y: Prices.

    Returns:
        ``(slope, intercept)``.

    Raises:
        DegenerateSeriesError: If the denominator is numerically zero.
    """
    n = len(x)
    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_xx = float(np.sum(x * x))

    logger.debug(
        "Regression sums: n=%d sum_x=%s sum_y=%s sum_xy=%s sum_xx=%s",
        n, sum_x, sum_y, sum_xy, sum_xx,
    )

    denominator = n * sum_xx - sum_x * sum_x
    if abs(denominator) < DEGENERATE_DENOMINATOR:
        raise DegenerateSeriesError(
            f"Regression denominator {denominator!r} is below {DEGENERATE_DENOMINATOR}"
        )

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def estimate_price(prices: pd.Series, target: pd.Timestamp) -> Estimate:
    """
    Extrapolate the OLS line through ``prices`` to ``target``.

    Falls back to the arithmetic mean price when the series spans zero
    time (all timestamps equal).

    Args:
        prices: Prepared price series (at least two points).
        target: UTC instant to predict for.

    Returns:
        Unguarded :class:`Estimate`.
    """
    origin = prices.index[0]
    x = elapsed_hours(prices.index, origin)
    y = prices.to_numpy(dtype=float)
    x_target = float((target - origin) / pd.Timedelta(hours=1))

    try:
        slope, intercept = fit_line(x, y)
    except DegenerateSeriesError as exc:
        mean_price = float(np.mean(y))
        logger.debug("%s; using mean price %s", exc, mean_price)
        return Estimate(method=EstimateMethod.MEAN_FALLBACK, value=mean_price)

    predicted = slope * x_target + intercept
    logger.debug(
        "OLS slope=%s/h intercept=%s → raw prediction %s at x=%.4fh",
        slope, intercept, predicted, x_target,
    )
    return Estimate(
        method=EstimateMethod.REGRESSION,
        value=predicted,
        slope=slope,
        intercept=intercept,
    )
