"""
Tests for Bollinger Bands, ATR and historical volatility.
"""

import math

import numpy as np
import pytest

from stockta.services.base import InvalidParameterError, LengthMismatchError
from stockta.services.indicators.volatility import (
    average_true_range,
    bollinger_bands,
    historical_volatility,
    true_range,
)


class TestBollingerBands:
    def test_known_window(self):
        result = bollinger_bands([1, 2, 3, 4, 5], period=5, multiplier=2)
        std = math.sqrt(2)  # population std of 1..5

        assert result.middle == (None, None, None, None, 3.0)
        assert result.upper[4] == pytest.approx(3 + 2 * std)
        assert result.lower[4] == pytest.approx(3 - 2 * std)
        assert result.bandwidth[4] == pytest.approx(4 * std / 3 * 100)
        assert result.percent_b[4] == pytest.approx((5 - (3 - 2 * std)) / (4 * std))

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_band_ordering(self, seed):
        rng = np.random.RandomState(seed)
        closes = list(50 + np.cumsum(rng.normal(0, 2, 150)))
        result = bollinger_bands(closes, period=20, multiplier=2.5)

        for upper, middle, lower in zip(result.upper, result.middle, result.lower):
            if upper is not None and middle is not None and lower is not None:
                assert upper >= middle >= lower

    def test_flat_series_collapses_bands(self):
        result = bollinger_bands([10.0] * 6, period=3)

        assert result.upper[2:] == result.middle[2:] == result.lower[2:]
        assert result.bandwidth[2:] == (0.0,) * 4
        assert result.percent_b == (None,) * 6

    def test_insufficient_prefix(self):
        result = bollinger_bands(list(range(1, 11)), period=4)
        assert result.upper[:3] == (None, None, None)
        assert result.lower[3] is not None

    @pytest.mark.parametrize("multiplier", [0, -1.0, float("inf")])
    def test_invalid_multiplier(self, multiplier):
        with pytest.raises(InvalidParameterError):
            bollinger_bands([1, 2, 3], period=2, multiplier=multiplier)


class TestAverageTrueRange:
    highs = [10, 15, 12]
    lows = [8, 13, 11]
    closes = [9, 14, 11.5]

    def test_true_range_uses_previous_close(self):
        # first bar compares against its own close
        assert true_range(self.highs, self.lows, self.closes) == (2.0, 6.0, 3.0)

    def test_wilder_smoothed(self):
        result = average_true_range(self.highs, self.lows, self.closes, period=2)

        assert result[0] is None
        assert result[1] == pytest.approx(4.0)
        assert result[2] == pytest.approx((4.0 * 1 + 3.0) / 2)

    def test_empty(self):
        assert average_true_range([], [], [], period=3) == ()

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            average_true_range([1, 2, 3], [1, 2], [1, 2, 3], period=2)

    def test_non_positive_period(self):
        with pytest.raises(InvalidParameterError):
            average_true_range(self.highs, self.lows, self.closes, period=0)


class TestHistoricalVolatility:
    def test_alternating_returns(self):
        # returns +10%, -10% -> population std 0.1
        result = historical_volatility([100, 110, 99], period=2)
        assert result == pytest.approx(math.sqrt(0.01 * 252) * 100)

    def test_constant_growth_has_no_volatility(self):
        assert historical_volatility([100, 110, 121], period=2) == pytest.approx(0.0, abs=1e-9)

    def test_insufficient(self):
        assert historical_volatility([100, 101], period=2) is None

    def test_zero_price(self):
        assert historical_volatility([0, 1, 2], period=2) is None
