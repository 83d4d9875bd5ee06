"""
analytics/forecasting/guard.py
───────────────────────────────
Plausibility Guard for raw regression output.

A least-squares line fitted on a short, noisy window can run off to
absurd values for distant targets.  Predictions that move further from
the last observed close than ``GUARD_RANGE_MULTIPLIER`` × the historical price
range are replaced with a linear extrapolation of the most recent
``GUARD_WINDOW`` points.
"""

import logging

import pandas as pd

from analytics.forecasting.regression import Estimate, EstimateMethod

logger = logging.getLogger(__name__)

GUARD_RANGE_MULTIPLIER = 5.0
GUARD_WINDOW = 20


def trend_extrapolation(
    prices: pd.Series,
    target: pd.Timestamp,
    window: int = GUARD_WINDOW,
) -> float:
    """
    Project the last close forward along the recent per-point change.

    The average change is taken over the last ``window`` points (fewer if
    the series is shorter) and applied once per hour between the last
    observation and ``target``.

    Args:
        prices: Prepared price series.
        target: UTC instant to predict for.
        window: Number of trailing points to use.

    Returns:
        Extrapolated price (not clamped).
    """
    recent = prices.iloc[-window:]
    last_close = float(prices.iloc[-1])
    avg_change_per_hour = (float(recent.iloc[-1]) - float(recent.iloc[0])) / len(recent)
    hours_to_target = (target - prices.index[-1]) / pd.Timedelta(hours=1)
    return last_close + avg_change_per_hour * hours_to_target


def apply_plausibility_guard(
    estimate: Estimate,
    prices: pd.Series,
    target: pd.Timestamp,
) -> Estimate:
    """
    Bound a raw estimate and clamp it to be non-negative.

    The bound is measured from the last observed close, so a live ticker
    price that has drifted away from the candles does not trip it.  Only
    :attr:`EstimateMethod.REGRESSION` estimates are range-checked; a mean
    fallback already lies inside the observed price range.

    Args:
        estimate: Output of :func:`~analytics.forecasting.regression.estimate_price`.
        prices:   Prepared price series the estimate was fitted on.
        target:   UTC instant being predicted.

    Returns:
        Guarded :class:`Estimate` with ``value >= 0``.
    """
    if estimate.method is EstimateMethod.REGRESSION:
        last_close = float(prices.iloc[-1])
        historical_range = float(prices.max()) - float(prices.min())
        max_reasonable_change = historical_range * GUARD_RANGE_MULTIPLIER

        if abs(estimate.value - last_close) > max_reasonable_change:
            fallback = trend_extrapolation(prices, target)
            logger.warning(
                "Regression output %.6f is more than %.6f away from last close %.6f; "
                "using trend-based estimate %.6f",
                estimate.value, max_reasonable_change, last_close, fallback,
            )
            estimate = estimate.with_value(fallback, EstimateMethod.TREND_FALLBACK)

    if estimate.value < 0:
        logger.debug("Clamping negative prediction %s to 0", estimate.value)
        estimate = estimate.with_value(0.0)
    return estimate
