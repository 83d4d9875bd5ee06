"""
Pydantic schemas for request/response serialization.

Separate from the forecasting engine (analytics) and routes (HTTP layer).
"""

from schemas.forecast import ForecastRequest, ForecastResponse

__all__ = [
    "ForecastRequest",
    "ForecastResponse",
]
