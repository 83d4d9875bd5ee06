"""
analytics/forecasting/series.py
────────────────────────────────
Series Preparer: turns raw candle records into a clean price series.

Accepted record shapes
----------------------
- Positional kline rows as returned by the exchange REST API::

      [open_time_ms, open, high, low, close, volume, turnover]

  Only index 0 (open time) and index 4 (close) are read.
- Mappings carrying one of :data:`TIME_KEYS` and one of :data:`CLOSE_KEYS`.
- A ``pd.DataFrame`` with ``timestamp`` and ``close`` columns (the shape
  produced by the market-data fetchers).

The output is a ``pd.Series`` named ``close`` with a UTC
``DatetimeIndex`` ordered oldest → newest.  Each entry is one price point.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from analytics.forecasting.errors import InsufficientDataError, PredictionError

logger = logging.getLogger(__name__)

# Minimum number of valid points needed to fit a line.
MIN_POINTS = 2

# Positional kline layout.
KLINE_TIME_INDEX = 0
KLINE_CLOSE_INDEX = 4

TIME_KEYS: Tuple[str, ...] = ("timestamp", "open_time", "start_time", "time")
CLOSE_KEYS: Tuple[str, ...] = ("close", "close_price")

_ONE_HOUR = pd.Timedelta(hours=1)


# ── parsing helpers ───────────────────────────────────────────────────────────


def _parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse an instant in any supported representation.

    Numbers and numeric strings are epoch milliseconds; other strings go
    through the ISO-8601 parser.  Naive results are assumed to be UTC.

    Returns:
        A tz-aware UTC ``pd.Timestamp``, or ``None`` if unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (datetime, pd.Timestamp, np.datetime64)):
            ts = pd.Timestamp(value)
        elif isinstance(value, (int, np.integer)):
            ts = pd.Timestamp(int(value), unit="ms")
        elif isinstance(value, (float, np.floating)):
            if not math.isfinite(value):
                return None
            ts = pd.Timestamp(float(value), unit="ms")
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                millis = float(text)
            except ValueError:
                ts = pd.Timestamp(text)
            else:
                if not math.isfinite(millis):
                    return None
                ts = pd.Timestamp(int(millis), unit="ms")
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(ts):
        return None
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _parse_price(value: Any) -> Optional[float]:
    """Return ``value`` as a finite, strictly positive float, else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _extract_fields(record: Any) -> Optional[Tuple[Any, Any]]:
    """Pull the raw (open time, close) pair out of one candle record."""
    if isinstance(record, np.ndarray):
        record = record.tolist()

    if isinstance(record, Mapping):
        time_key = next((k for k in TIME_KEYS if k in record), None)
        close_key = next((k for k in CLOSE_KEYS if k in record), None)
        if time_key is None or close_key is None:
            return None
        return record[time_key], record[close_key]

    if isinstance(record, Sequence) and not isinstance(record, (str, bytes)):
        if len(record) <= KLINE_CLOSE_INDEX:
            return None
        return record[KLINE_TIME_INDEX], record[KLINE_CLOSE_INDEX]

    return None


def _iter_records(raw_candles: Any) -> Iterable[Any]:
    if raw_candles is None:
        return []
    if isinstance(raw_candles, pd.DataFrame):
        return raw_candles.to_dict("records")
    return raw_candles


# ── public API ────────────────────────────────────────────────────────────────


def normalise_instant(value: Any) -> pd.Timestamp:
    """
    Convert a caller-supplied instant into a UTC ``pd.Timestamp``.

    Args:
        value: ``datetime``, ``pd.Timestamp``, epoch milliseconds or an
               ISO-8601 string.

    Raises:
        PredictionError: If ``value`` cannot be interpreted as an instant.
    """
    ts = _parse_timestamp(value)
    if ts is None:
        raise PredictionError(f"Invalid target instant: {value!r}")
    return ts


def elapsed_hours(timestamps: pd.DatetimeIndex, origin: pd.Timestamp) -> np.ndarray:
    """Hours elapsed between ``origin`` and each timestamp, as floats."""
    return np.asarray((timestamps - origin) / _ONE_HOUR, dtype=float)


def prepare_series(raw_candles: Any, sort: bool = True) -> pd.Series:
    """
    Validate raw candle records and build the price series.

    Records whose close price is non-finite or ≤ 0, or whose timestamp
    does not parse, are dropped.  Duplicate timestamps are kept as-is.

    Args:
        raw_candles: Iterable of kline rows / mappings, or a DataFrame.
        sort:        Stable-sort the result by time when the input is not
                     already oldest → newest.  When ``False`` the caller's
                     order is trusted.

    Returns:
        pd.Series named ``close`` with a UTC DatetimeIndex.

    Raises:
        InsufficientDataError: If fewer than two valid points remain.
    """
    timestamps: List[pd.Timestamp] = []
    prices: List[float] = []
    dropped = 0

    for record in _iter_records(raw_candles):
        fields = _extract_fields(record)
        if fields is None:
            dropped += 1
            continue
        ts = _parse_timestamp(fields[0])
        price = _parse_price(fields[1])
        if ts is None or price is None:
            dropped += 1
            continue
        timestamps.append(ts)
        prices.append(price)

    if dropped:
        logger.debug("Dropped %d malformed candle record(s)", dropped)

    if len(prices) < MIN_POINTS:
        raise InsufficientDataError(len(prices), MIN_POINTS)

    index = pd.DatetimeIndex(timestamps, name="timestamp")
    series = pd.Series(prices, index=index, name="close", dtype=float)

    if sort and not series.index.is_monotonic_increasing:
        logger.warning(
            "Candles were not ordered oldest → newest; sorting %d points", len(series)
        )
        series = series.sort_index(kind="mergesort")

    logger.debug(
        "Prepared %d price points (%s → %s)",
        len(series),
        series.index[0].isoformat(),
        series.index[-1].isoformat(),
    )
    return series
