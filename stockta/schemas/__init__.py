"""
StockTA Schema Contracts

This module defines the contracts at the indicator engine boundary.
"""

from stockta.schemas.market import (
    OHLCV,
    PriceSource,
    SeriesIdentity,
    SymbolData,
)
from stockta.schemas.indicators import (
    PARAMS_MODELS,
    ATRParams,
    BandPosition,
    BollingerBandsResult,
    BollingerParams,
    BollingerSummary,
    Crossover,
    IndicatorKind,
    IndicatorParams,
    IndicatorRequest,
    IndicatorResult,
    IndicatorValues,
    MACDParams,
    MACDResult,
    MACDSummary,
    MAPosition,
    MATrend,
    MovingAverageParams,
    MovingAverageTrend,
    MovingAverageType,
    OBVParams,
    PivotLevel,
    RSIParams,
    RSISignal,
    RSIZone,
    SignalStrength,
    StochasticParams,
    StochasticResult,
    SupportResistanceLevels,
    SupportResistanceParams,
    TrendDirection,
)

__all__ = [
    # Market
    "OHLCV",
    "PriceSource",
    "SeriesIdentity",
    "SymbolData",
    # Indicators
    "PARAMS_MODELS",
    "ATRParams",
    "BandPosition",
    "BollingerBandsResult",
    "BollingerParams",
    "BollingerSummary",
    "Crossover",
    "IndicatorKind",
    "IndicatorParams",
    "IndicatorRequest",
    "IndicatorResult",
    "IndicatorValues",
    "MACDParams",
    "MACDResult",
    "MACDSummary",
    "MAPosition",
    "MATrend",
    "MovingAverageParams",
    "MovingAverageTrend",
    "MovingAverageType",
    "OBVParams",
    "PivotLevel",
    "RSIParams",
    "RSISignal",
    "RSIZone",
    "SignalStrength",
    "StochasticParams",
    "StochasticResult",
    "SupportResistanceLevels",
    "SupportResistanceParams",
    "TrendDirection",
]
