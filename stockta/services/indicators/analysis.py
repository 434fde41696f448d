"""
Indicator Summaries

Latest-state readings built on top of the positional indicators, for
consumers (AI flows, scanners) that only need "where are we now".

Insufficient-data policy: every function returns None when the series is
too short to produce the reading; nothing here raises for short input.
"""

from typing import Iterable, Optional, Sequence

from stockta.schemas.indicators import (
    BandPosition,
    BollingerBandsResult,
    BollingerSummary,
    IndicatorValues,
    MACDResult,
    MACDSummary,
    MAPosition,
    MATrend,
    MovingAverageTrend,
    MovingAverageType,
    RSISignal,
    RSIZone,
    SignalStrength,
    TrendDirection,
)
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.calculations import as_array
from stockta.services.indicators.momentum import macd, macd_crossover, relative_strength_index
from stockta.services.indicators.moving_averages import (
    exponential_moving_average,
    simple_moving_average,
)
from stockta.services.indicators.volatility import SQUEEZE_BANDWIDTH_THRESHOLD, bollinger_bands

MA_TREND_THRESHOLD = 0.001  # 0.1% of the current MA
MA_POSITION_THRESHOLD = 0.005  # 0.5% of the current MA


# =============================================================================
# RSI
# =============================================================================


def summarize_rsi(
    rsi_values: IndicatorValues, overbought: float = 70, oversold: float = 30
) -> Optional[RSISignal]:
    if not 0 <= oversold < overbought <= 100:
        raise InvalidParameterError(
            f"Expected 0 <= oversold < overbought <= 100, got {oversold}/{overbought}",
            {"overbought": overbought, "oversold": oversold},
        )
    if not rsi_values or rsi_values[-1] is None:
        return None

    value = rsi_values[-1]
    if value >= overbought:
        zone = RSIZone.OVERBOUGHT
        strength = SignalStrength.STRONG if value >= 80 else SignalStrength.MODERATE
    elif value <= oversold:
        zone = RSIZone.OVERSOLD
        strength = SignalStrength.STRONG if value <= 20 else SignalStrength.MODERATE
    else:
        zone = RSIZone.NEUTRAL
        strength = SignalStrength.WEAK

    return RSISignal(value=value, zone=zone, strength=strength)


def rsi_signal(
    values: Iterable[float],
    period: int = 14,
    overbought: float = 70,
    oversold: float = 30,
) -> Optional[RSISignal]:
    """Current RSI with overbought/oversold zone and signal strength."""
    return summarize_rsi(relative_strength_index(values, period), overbought, oversold)


# =============================================================================
# MACD
# =============================================================================


def summarize_macd(result: MACDResult) -> Optional[MACDSummary]:
    if not result.macd or result.macd[-1] is None or result.signal[-1] is None:
        return None

    current_macd = result.macd[-1]
    current_signal = result.signal[-1]
    if current_macd > current_signal:
        trend = TrendDirection.BULLISH
    elif current_macd < current_signal:
        trend = TrendDirection.BEARISH
    else:
        trend = TrendDirection.NEUTRAL

    return MACDSummary(
        macd=current_macd,
        signal=current_signal,
        histogram=result.histogram[-1],
        trend=trend,
        crossover=macd_crossover(result),
    )


def macd_summary(
    values: Iterable[float], fast: int = 12, slow: int = 26, signal: int = 9
) -> Optional[MACDSummary]:
    """Latest MACD reading with trend and crossover."""
    return summarize_macd(macd(values, fast, slow, signal))


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


def summarize_bollinger(
    result: BollingerBandsResult, current_price: float
) -> Optional[BollingerSummary]:
    if not result.middle or result.middle[-1] is None or result.bandwidth[-1] is None:
        return None

    upper, lower = result.upper[-1], result.lower[-1]
    if current_price > upper:
        position = BandPosition.ABOVE_UPPER
    elif current_price < lower:
        position = BandPosition.BELOW_LOWER
    else:
        position = BandPosition.WITHIN_BANDS

    bandwidth = result.bandwidth[-1]
    return BollingerSummary(
        upper=upper,
        middle=result.middle[-1],
        lower=lower,
        bandwidth=bandwidth,
        position=position,
        squeeze=bandwidth < SQUEEZE_BANDWIDTH_THRESHOLD,
    )


def bollinger_summary(
    values: Iterable[float], period: int = 20, multiplier: float = 2.0
) -> Optional[BollingerSummary]:
    """Latest bands, price position relative to them and squeeze flag."""
    closes = as_array(values)
    if len(closes) == 0:
        return None
    return summarize_bollinger(bollinger_bands(closes, period, multiplier), float(closes[-1]))


# =============================================================================
# MOVING AVERAGE TREND
# =============================================================================


def summarize_moving_average(
    ma_values: IndicatorValues,
    current_price: float,
    period: int,
    ma_type: MovingAverageType = MovingAverageType.SMA,
) -> Optional[MovingAverageTrend]:
    if len(ma_values) < 2 or ma_values[-1] is None or ma_values[-2] is None:
        return None

    current_ma = ma_values[-1]
    previous_ma = ma_values[-2]

    trend_threshold = abs(current_ma) * MA_TREND_THRESHOLD
    if current_ma > previous_ma + trend_threshold:
        trend = MATrend.UPWARD
    elif current_ma < previous_ma - trend_threshold:
        trend = MATrend.DOWNWARD
    else:
        trend = MATrend.SIDEWAYS

    position_threshold = abs(current_ma) * MA_POSITION_THRESHOLD
    if current_price > current_ma + position_threshold:
        position = MAPosition.ABOVE
    elif current_price < current_ma - position_threshold:
        position = MAPosition.BELOW
    else:
        position = MAPosition.AT

    return MovingAverageTrend(
        period=period,
        ma_type=ma_type,
        value=current_ma,
        trend=trend,
        position=position,
    )


def moving_average_trend(
    values: Iterable[float],
    period: int,
    ma_type: MovingAverageType = MovingAverageType.SMA,
) -> Optional[MovingAverageTrend]:
    """Latest MA value, its slope direction and where price sits against it."""
    try:
        ma_type = MovingAverageType(ma_type)
    except ValueError as e:
        raise InvalidParameterError(f"Unsupported moving average type: {ma_type!r}") from e

    closes = as_array(values)
    if ma_type == MovingAverageType.EMA:
        ma_values = exponential_moving_average(closes, period)
    else:
        ma_values = simple_moving_average(closes, period)

    if len(closes) == 0:
        return None
    return summarize_moving_average(ma_values, float(closes[-1]), period, ma_type)


def moving_average_trends(
    values: Iterable[float],
    periods: Sequence[int] = (20, 50, 200),
    ma_type: MovingAverageType = MovingAverageType.SMA,
) -> list[MovingAverageTrend]:
    """Trend readings for several periods; periods without enough data are skipped."""
    closes = as_array(values)
    results = (moving_average_trend(closes, period, ma_type) for period in periods)
    return [result for result in results if result is not None]
