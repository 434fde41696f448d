"""
Pytest configuration and fixtures for indicator engine tests.
"""

import pytest
from datetime import datetime, timedelta
from typing import List

from stockta.schemas.market import OHLCV, SeriesIdentity, SymbolData
from stockta.services.indicators import IndicatorCache, IndicatorEngine, PriceSeries


SAMPLE_PRICES = [
    100, 102, 101, 103, 105, 104, 106, 108, 107, 109,
    111, 110, 112, 114, 113, 115, 117, 116, 118, 120,
    119, 121, 123, 122, 124, 126, 125, 127, 129, 128,
]


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


def make_candles(closes: List[float], start: datetime = datetime(2024, 1, 1)) -> List[OHLCV]:
    """Helper to build daily candles around a close series."""
    return [
        OHLCV(
            timestamp=start + timedelta(days=i),
            open=close - 0.5,
            high=close + 1,
            low=close - 1,
            close=close,
            volume=1_000_000 + i * 10_000,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def sample_prices() -> List[float]:
    return list(SAMPLE_PRICES)


@pytest.fixture
def sample_candles() -> List[OHLCV]:
    return make_candles(SAMPLE_PRICES)


@pytest.fixture
def symbol_data(sample_candles) -> SymbolData:
    return SymbolData(symbol="VNM", revision=1, ohlcv=sample_candles)


@pytest.fixture
def full_series(symbol_data) -> PriceSeries:
    return PriceSeries.from_symbol_data(symbol_data)


@pytest.fixture
def closes_only_series(sample_prices) -> PriceSeries:
    return PriceSeries(identity=SeriesIdentity(symbol="FPT", revision=3), closes=sample_prices)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache() -> IndicatorCache:
    """Fresh enabled, unbounded cache."""
    return IndicatorCache()


@pytest.fixture
def engine(full_series, cache) -> IndicatorEngine:
    return IndicatorEngine(full_series, cache=cache)
