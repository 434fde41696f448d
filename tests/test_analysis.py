"""
Tests for the latest-state indicator summaries.
"""

import pytest

from stockta.schemas.indicators import (
    BandPosition,
    BollingerBandsResult,
    Crossover,
    MACDResult,
    MAPosition,
    MATrend,
    MovingAverageType,
    RSIZone,
    SignalStrength,
    TrendDirection,
)
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.analysis import (
    bollinger_summary,
    macd_summary,
    moving_average_trend,
    moving_average_trends,
    rsi_signal,
    summarize_bollinger,
    summarize_macd,
    summarize_rsi,
)


# ============================================================================
# RSI SIGNAL
# ============================================================================

class TestRSISignal:
    def test_strong_overbought_on_rally(self):
        signal = rsi_signal([100 + i * 2 for i in range(20)])

        assert signal.value == 100.0
        assert signal.zone == RSIZone.OVERBOUGHT
        assert signal.strength == SignalStrength.STRONG

    def test_strong_oversold_on_selloff(self):
        signal = rsi_signal([100 - i * 2 for i in range(20)])

        assert signal.value == 0.0
        assert signal.zone == RSIZone.OVERSOLD
        assert signal.strength == SignalStrength.STRONG

    @pytest.mark.parametrize(
        "value,zone,strength",
        [
            (72.0, RSIZone.OVERBOUGHT, SignalStrength.MODERATE),
            (85.0, RSIZone.OVERBOUGHT, SignalStrength.STRONG),
            (25.0, RSIZone.OVERSOLD, SignalStrength.MODERATE),
            (15.0, RSIZone.OVERSOLD, SignalStrength.STRONG),
            (50.0, RSIZone.NEUTRAL, SignalStrength.WEAK),
        ],
    )
    def test_zones(self, value, zone, strength):
        signal = summarize_rsi((None, 40.0, value))

        assert signal.zone == zone
        assert signal.strength == strength

    def test_custom_thresholds(self):
        signal = summarize_rsi((65.0,), overbought=60, oversold=40)
        assert signal.zone == RSIZone.OVERBOUGHT

    def test_insufficient_data(self):
        assert rsi_signal([100, 101, 102]) is None

    def test_inverted_thresholds_rejected(self):
        with pytest.raises(InvalidParameterError):
            summarize_rsi((50.0,), overbought=30, oversold=70)


# ============================================================================
# MACD SUMMARY
# ============================================================================

class TestMACDSummary:
    def test_bullish_crossover(self):
        result = MACDResult(macd=(1.0, 2.0), signal=(1.5, 1.5), histogram=(-0.5, 0.5))
        summary = summarize_macd(result)

        assert summary.trend == TrendDirection.BULLISH
        assert summary.crossover == Crossover.BULLISH
        assert summary.histogram == 0.5

    def test_bearish_without_cross(self):
        result = MACDResult(macd=(-1.0, -2.0), signal=(0.5, 0.0), histogram=(-1.5, -2.0))
        summary = summarize_macd(result)

        assert summary.trend == TrendDirection.BEARISH
        assert summary.crossover == Crossover.NONE

    def test_equal_lines_are_neutral(self):
        result = MACDResult(macd=(1.0,), signal=(1.0,), histogram=(0.0,))
        assert summarize_macd(result).trend == TrendDirection.NEUTRAL

    def test_undefined_signal(self):
        result = MACDResult(macd=(None, 1.0), signal=(None, None), histogram=(None, None))
        assert summarize_macd(result) is None

    def test_from_prices(self, sample_prices):
        summary = macd_summary(sample_prices, fast=3, slow=6, signal=3)

        assert summary is not None
        assert summary.histogram == pytest.approx(summary.macd - summary.signal)

    def test_insufficient_data(self, sample_prices):
        assert macd_summary(sample_prices) is None


# ============================================================================
# BOLLINGER SUMMARY
# ============================================================================

class TestBollingerSummary:
    def test_known_window(self):
        summary = bollinger_summary([1, 2, 3, 4, 5], period=5)

        assert summary.middle == 3.0
        assert summary.bandwidth == pytest.approx(188.5618, rel=1e-5)
        assert summary.position == BandPosition.WITHIN_BANDS
        assert summary.squeeze is False

    def test_spike_above_upper(self):
        summary = bollinger_summary([10.0] * 19 + [20.0], period=20)

        assert summary.position == BandPosition.ABOVE_UPPER
        assert summary.squeeze is False

    def test_drop_below_lower(self):
        summary = bollinger_summary([10.0] * 19 + [0.0], period=20)
        assert summary.position == BandPosition.BELOW_LOWER

    def test_tight_range_is_squeeze(self):
        summary = bollinger_summary([100.0, 101.0] * 10, period=20)

        assert summary.squeeze is True
        assert summary.position == BandPosition.WITHIN_BANDS

    def test_explicit_price(self):
        result = BollingerBandsResult(
            upper=(12.0,), middle=(10.0,), lower=(8.0,), bandwidth=(40.0,), percent_b=(0.5,)
        )
        assert summarize_bollinger(result, current_price=7.5).position == BandPosition.BELOW_LOWER

    def test_insufficient_data(self):
        assert bollinger_summary([1, 2, 3], period=20) is None
        assert bollinger_summary([], period=20) is None


# ============================================================================
# MOVING AVERAGE TREND
# ============================================================================

class TestMovingAverageTrend:
    def test_rising(self):
        trend = moving_average_trend(list(range(1, 31)), period=5)

        assert trend.value == 28.0
        assert trend.trend == MATrend.UPWARD
        assert trend.position == MAPosition.ABOVE
        assert trend.ma_type == MovingAverageType.SMA

    def test_falling(self):
        trend = moving_average_trend(list(range(30, 0, -1)), period=5)

        assert trend.trend == MATrend.DOWNWARD
        assert trend.position == MAPosition.BELOW

    def test_flat(self):
        trend = moving_average_trend([50.0] * 10, period=5)

        assert trend.trend == MATrend.SIDEWAYS
        assert trend.position == MAPosition.AT

    def test_ema_variant(self):
        trend = moving_average_trend(list(range(1, 31)), period=5, ma_type="EMA")

        assert trend.ma_type == MovingAverageType.EMA
        assert trend.trend == MATrend.UPWARD

    def test_needs_two_defined_values(self):
        assert moving_average_trend([1, 2, 3, 4, 5], period=5) is None

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidParameterError):
            moving_average_trend([1, 2, 3], period=2, ma_type="HMA")

    def test_multiple_periods_skip_short_ones(self):
        trends = moving_average_trends(list(range(1, 61)), periods=(5, 20, 50, 100))
        assert [t.period for t in trends] == [5, 20, 50]
