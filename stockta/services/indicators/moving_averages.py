"""
Moving Averages

Windowed statistics primitives shared by every other indicator.

Insufficient-data policy: the result always has the input length and every
position before the first full window is None.

Seed policy: EMA and Wilder smoothing both start from the arithmetic mean of
the first ``period`` values, placed at index ``period - 1``. There is no
"first value" seed anywhere in the package.
"""

from typing import Iterable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from stockta.schemas.indicators import IndicatorValues
from stockta.services.indicators.calculations import as_array, check_period, to_values


# =============================================================================
# ARRAY KERNELS (NaN-padded, used by other indicator modules)
# =============================================================================


def _sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average. A NaN inside a window makes that position NaN."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    result[period - 1 :] = sliding_window_view(data, period).mean(axis=1)
    return result


def _wma(data: np.ndarray, period: int) -> np.ndarray:
    """Weighted Moving Average, oldest weight 1 up to newest weight ``period``."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    weights = np.arange(1, period + 1, dtype=float)
    denominator = period * (period + 1) / 2
    result[period - 1 :] = sliding_window_view(data, period) @ weights / denominator
    return result


def _seed_start(data: np.ndarray, period: int) -> int:
    """
    Index of the first value of the seed window, skipping leading NaN.

    Returns -1 if fewer than ``period`` values follow it.
    """
    defined = np.flatnonzero(~np.isnan(data))
    if len(defined) == 0 or len(data) - defined[0] < period:
        return -1
    return int(defined[0])


def _ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average with SMA seed."""
    result = np.full(len(data), np.nan)
    start = _seed_start(data, period)
    if start < 0:
        return result

    k = 2 / (period + 1)
    first = start + period - 1
    result[first] = np.mean(data[start : first + 1])

    for i in range(first + 1, len(data)):
        result[i] = data[i] * k + result[i - 1] * (1 - k)

    return result


def _rma(data: np.ndarray, period: int) -> np.ndarray:
    """Wilder's smoothing (RMA) with SMA seed."""
    result = np.full(len(data), np.nan)
    start = _seed_start(data, period)
    if start < 0:
        return result

    first = start + period - 1
    result[first] = np.mean(data[start : first + 1])

    for i in range(first + 1, len(data)):
        result[i] = (result[i - 1] * (period - 1) + data[i]) / period

    return result


# =============================================================================
# PUBLIC API
# =============================================================================


def simple_moving_average(values: Iterable[float], period: int) -> IndicatorValues:
    """
    Trailing arithmetic mean over ``period`` values.

    >>> simple_moving_average([1, 2, 3, 4, 5], 3)
    (None, None, 2.0, 3.0, 4.0)
    """
    period = check_period(period)
    return to_values(_sma(as_array(values), period))


def weighted_moving_average(values: Iterable[float], period: int) -> IndicatorValues:
    """Linearly weighted trailing mean, normalised by period*(period+1)/2."""
    period = check_period(period)
    return to_values(_wma(as_array(values), period))


def exponential_moving_average(values: Iterable[float], period: int) -> IndicatorValues:
    """EMA with k = 2/(period+1), first defined value at index period-1."""
    period = check_period(period)
    return to_values(_ema(as_array(values), period))


def wilder_smoothing(values: Iterable[float], period: int) -> IndicatorValues:
    """Wilder's running average: avg = (avg*(period-1) + value) / period."""
    period = check_period(period)
    return to_values(_rma(as_array(values), period))


sma = simple_moving_average
wma = weighted_moving_average
ema = exponential_moving_average
rma = wilder_smoothing
