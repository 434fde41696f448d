"""
StockTA - technical indicator engine.

In-process library used by the stock analysis flows: computes indicators
over a price/volume series and memoizes the results per series snapshot.
"""

from stockta.schemas import IndicatorKind, IndicatorRequest, PriceSource, SeriesIdentity
from stockta.services.base import (
    IndicatorError,
    InvalidParameterError,
    LengthMismatchError,
    MissingInputError,
)
from stockta.services.indicators import IndicatorCache, IndicatorEngine, PriceSeries

__version__ = "0.1.0"

__all__ = [
    "IndicatorEngine",
    "IndicatorCache",
    "PriceSeries",
    "IndicatorKind",
    "IndicatorRequest",
    "PriceSource",
    "SeriesIdentity",
    "IndicatorError",
    "InvalidParameterError",
    "LengthMismatchError",
    "MissingInputError",
]
