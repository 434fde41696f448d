"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries + IndicatorRequest
    Output: IndicatorResult

RESPONSIBILITIES:
    - Calculate technical indicators (SMA, EMA, WMA, RSI, MACD, Stochastic,
      Bollinger Bands, ATR, OBV)
    - Detect pivot support/resistance levels
    - Summarize the latest state of an indicator (zones, trends, crossovers)
    - Memoize results per (series identity, kind, parameters)

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockta.services.indicators.analysis import (
    bollinger_summary,
    macd_summary,
    moving_average_trend,
    moving_average_trends,
    rsi_signal,
)
from stockta.services.indicators.cache import CacheEntry, CacheKey, CacheStats, IndicatorCache
from stockta.services.indicators.calculations import PriceSeries, get_last_valid
from stockta.services.indicators.interface import IndicatorServiceInterface
from stockta.services.indicators.levels import (
    cluster_levels,
    detect_support_resistance,
    nearest_levels,
)
from stockta.services.indicators.momentum import (
    macd,
    macd_crossover,
    relative_strength_index,
    stochastic_oscillator,
)
from stockta.services.indicators.moving_averages import (
    exponential_moving_average,
    simple_moving_average,
    weighted_moving_average,
    wilder_smoothing,
)
from stockta.services.indicators.service import DEFAULT_CALCULATORS, IndicatorEngine
from stockta.services.indicators.volatility import (
    average_true_range,
    bollinger_bands,
    historical_volatility,
    true_range,
)
from stockta.services.indicators.volume import on_balance_volume

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorEngine",
    "DEFAULT_CALCULATORS",
    "IndicatorCache",
    "CacheEntry",
    "CacheKey",
    "CacheStats",
    "PriceSeries",
    "get_last_valid",
    # Moving averages
    "simple_moving_average",
    "weighted_moving_average",
    "exponential_moving_average",
    "wilder_smoothing",
    # Momentum
    "relative_strength_index",
    "macd",
    "macd_crossover",
    "stochastic_oscillator",
    # Volatility
    "bollinger_bands",
    "average_true_range",
    "true_range",
    "historical_volatility",
    # Volume
    "on_balance_volume",
    # Levels
    "detect_support_resistance",
    "cluster_levels",
    "nearest_levels",
    # Summaries
    "rsi_signal",
    "macd_summary",
    "bollinger_summary",
    "moving_average_trend",
    "moving_average_trends",
]
