"""
Momentum Indicators

RSI, MACD and the Stochastic Oscillator.
"""

from typing import Iterable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from stockta.schemas.indicators import (
    Crossover,
    IndicatorValues,
    MACDResult,
    StochasticResult,
)
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.calculations import (
    as_array,
    check_period,
    check_same_length,
    to_values,
)
from stockta.services.indicators.moving_averages import _ema, _sma


# =============================================================================
# RSI
# =============================================================================


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # No losses in the window: RS is infinite (or undefined when flat), RSI pinned to 100
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def _rsi(closes: np.ndarray, period: int) -> np.ndarray:
    """Relative Strength Index, Wilder's method."""
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # Seed: arithmetic mean of the first `period` changes
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))
    result[period] = _rsi_from_averages(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_from_averages(avg_gain, avg_loss)

    return result


def relative_strength_index(values: Iterable[float], period: int = 14) -> IndicatorValues:
    """
    RSI in [0, 100]. The first defined value sits at index ``period``
    (``period`` price changes are needed for the seed).
    """
    period = check_period(period)
    return to_values(_rsi(as_array(values), period))


# =============================================================================
# MACD
# =============================================================================


def _macd(
    closes: np.ndarray, fast: int, slow: int, signal: int
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    macd_line = _ema(closes, fast) - _ema(closes, slow)

    # Signal line is EMA of the defined part of the MACD line
    signal_line = _ema(macd_line, signal)

    histogram = macd_line - signal_line
    return macd_line, signal_line, histogram


def macd(
    values: Iterable[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """
    MACD (Moving Average Convergence Divergence).

    MACD line is defined from index ``slow - 1``; the signal line and
    histogram from ``slow + signal - 2``.
    """
    fast = check_period(fast, "fast")
    slow = check_period(slow, "slow")
    signal = check_period(signal, "signal")
    if fast >= slow:
        raise InvalidParameterError(
            f"fast period ({fast}) must be below slow period ({slow})",
            {"fast": fast, "slow": slow},
        )

    macd_line, signal_line, histogram = _macd(as_array(values), fast, slow, signal)
    return MACDResult(
        macd=to_values(macd_line),
        signal=to_values(signal_line),
        histogram=to_values(histogram),
    )


def macd_crossover(result: MACDResult) -> Crossover:
    """
    Compare the two most recent positions where both MACD and signal are
    defined.
    """
    pairs = [
        (m, s) for m, s in zip(result.macd, result.signal) if m is not None and s is not None
    ]
    if len(pairs) < 2:
        return Crossover.NONE

    (prev_macd, prev_signal), (curr_macd, curr_signal) = pairs[-2], pairs[-1]
    if prev_macd <= prev_signal and curr_macd > curr_signal:
        return Crossover.BULLISH
    if prev_macd >= prev_signal and curr_macd < curr_signal:
        return Crossover.BEARISH
    return Crossover.NONE


# =============================================================================
# STOCHASTIC
# =============================================================================


def _stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int,
    d_period: int,
) -> tuple[np.ndarray, np.ndarray]:
    k = np.full(len(closes), np.nan)

    if len(closes) >= k_period:
        highest_high = sliding_window_view(highs, k_period).max(axis=1)
        lowest_low = sliding_window_view(lows, k_period).min(axis=1)
        price_range = highest_high - lowest_low

        with np.errstate(divide="ignore", invalid="ignore"):
            raw_k = (closes[k_period - 1 :] - lowest_low) / price_range * 100

        # Flat window: %K is undefined, not 0/0
        k[k_period - 1 :] = np.where(price_range == 0, np.nan, raw_k)

    d = _sma(k, d_period)
    return k, d


def stochastic_oscillator(
    highs: Iterable[float],
    lows: Iterable[float],
    closes: Iterable[float],
    period: int = 14,
    signal_period: int = 3,
) -> StochasticResult:
    """
    Stochastic Oscillator.

    %K is None where the window high equals the window low; %D is the SMA
    of %K and is None wherever its window touches an undefined %K.
    """
    period = check_period(period)
    signal_period = check_period(signal_period, "signal_period")

    closes_arr = as_array(closes, "closes")
    highs_arr = as_array(highs, "highs")
    lows_arr = as_array(lows, "lows")
    check_same_length(closes_arr, highs=highs_arr, lows=lows_arr)

    k, d = _stochastic(highs_arr, lows_arr, closes_arr, period, signal_period)
    return StochasticResult(k=to_values(k), d=to_values(d))


rsi = relative_strength_index
stochastic = stochastic_oscillator
