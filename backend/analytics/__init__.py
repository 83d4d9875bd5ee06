"""
analytics — Business logic for price forecasting.

Sub-packages
------------
    analytics.forecasting   Linear-trend forecasting engine (preparer,
                            estimator, guard, trend, confidence).
"""
