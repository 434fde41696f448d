"""
Volatility Indicators

Bollinger Bands, Average True Range and historical volatility.

ATR smoothing: Wilder's RMA seeded with the mean of the first ``period``
true ranges. This is the same smoothing RSI uses.
"""

import math
from typing import Iterable, Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from stockta.schemas.indicators import BollingerBandsResult, IndicatorValues
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.calculations import (
    as_array,
    check_period,
    check_same_length,
    to_values,
)
from stockta.services.indicators.moving_averages import _rma, _sma

SQUEEZE_BANDWIDTH_THRESHOLD = 10.0
TRADING_DAYS_PER_YEAR = 252


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


def _bollinger_bands(
    closes: np.ndarray, period: int, multiplier: float
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    middle = _sma(closes, period)

    # Population standard deviation of each trailing window
    std = np.full(len(closes), np.nan)
    if len(closes) >= period:
        std[period - 1 :] = sliding_window_view(closes, period).std(axis=1)

    upper = middle + (multiplier * std)
    lower = middle - (multiplier * std)

    with np.errstate(divide="ignore", invalid="ignore"):
        bandwidth = np.where(middle != 0, (upper - lower) / middle * 100, np.nan)
        percent_b = np.where(upper != lower, (closes - lower) / (upper - lower), np.nan)

    return upper, middle, lower, bandwidth, percent_b


def bollinger_bands(
    values: Iterable[float], period: int = 20, multiplier: float = 2.0
) -> BollingerBandsResult:
    """
    Bollinger Bands.

    ``bandwidth`` is (upper - lower) / middle * 100 and ``percent_b`` is the
    price position inside the bands; both are None where undefined.
    """
    period = check_period(period)
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float, np.number)):
        raise InvalidParameterError(f"multiplier must be a number, got {multiplier!r}")
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise InvalidParameterError(
            f"multiplier must be positive, got {multiplier}", {"multiplier": multiplier}
        )

    upper, middle, lower, bandwidth, percent_b = _bollinger_bands(
        as_array(values), period, float(multiplier)
    )
    return BollingerBandsResult(
        upper=to_values(upper),
        middle=to_values(middle),
        lower=to_values(lower),
        bandwidth=to_values(bandwidth),
        percent_b=to_values(percent_b),
    )


# =============================================================================
# AVERAGE TRUE RANGE
# =============================================================================


def _true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    if len(closes) == 0:
        return np.array([], dtype=float)

    # The bar before the first one is treated as closing at the first close
    prev_close = np.concatenate(([closes[0]], closes[:-1]))
    return np.maximum.reduce(
        [
            highs - lows,
            np.abs(highs - prev_close),
            np.abs(lows - prev_close),
        ]
    )


def true_range(
    highs: Iterable[float], lows: Iterable[float], closes: Iterable[float]
) -> IndicatorValues:
    closes_arr = as_array(closes, "closes")
    highs_arr = as_array(highs, "highs")
    lows_arr = as_array(lows, "lows")
    check_same_length(closes_arr, highs=highs_arr, lows=lows_arr)
    return to_values(_true_range(highs_arr, lows_arr, closes_arr))


def average_true_range(
    highs: Iterable[float],
    lows: Iterable[float],
    closes: Iterable[float],
    period: int = 14,
) -> IndicatorValues:
    """Average True Range, first defined at index ``period - 1``."""
    period = check_period(period)
    closes_arr = as_array(closes, "closes")
    highs_arr = as_array(highs, "highs")
    lows_arr = as_array(lows, "lows")
    check_same_length(closes_arr, highs=highs_arr, lows=lows_arr)

    return to_values(_rma(_true_range(highs_arr, lows_arr, closes_arr), period))


# =============================================================================
# HISTORICAL VOLATILITY
# =============================================================================


def historical_volatility(
    values: Iterable[float],
    period: int = 20,
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> Optional[float]:
    """
    Annualised volatility (%) of the last ``period`` simple returns.

    Returns None when fewer than ``period + 1`` prices are available or a
    zero price makes a return undefined.
    """
    period = check_period(period)
    trading_days = check_period(trading_days, "trading_days")
    closes = as_array(values)
    if len(closes) < period + 1:
        return None

    recent = closes[-(period + 1) :]
    if np.any(recent[:-1] == 0):
        return None

    returns = np.diff(recent) / recent[:-1]
    variance = float(np.mean((returns - returns.mean()) ** 2))
    return math.sqrt(variance * trading_days) * 100


atr = average_true_range
