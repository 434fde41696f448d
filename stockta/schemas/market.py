"""
CONTRACT 1: Market Data

Input boundary of the indicator engine. Price bars are produced by an
external data layer; the engine only reads them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class PriceSource(str, Enum):
    """Which price series a single-series indicator reads."""

    CLOSE = "close"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    HL2 = "hl2"
    HLC3 = "hlc3"


# =============================================================================
# SERIES IDENTITY
# =============================================================================


class SeriesIdentity(BaseModel):
    """
    Stable identifier of one data snapshot.

    Two series with the same identity must hold the same data. Whenever
    the data layer appends or corrects bars it must bump ``revision``.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1, description="Instrument code, e.g. 'VNM'")
    revision: int = Field(default=0, ge=0, description="Data revision counter")

    def __str__(self) -> str:
        return f"{self.symbol}@{self.revision}"


# =============================================================================
# PRICE BARS
# =============================================================================


class OHLCV(BaseModel):
    """Single candlestick data point."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    volume: float = Field(..., ge=0)


class SymbolData(BaseModel):
    """Complete candle history for a single symbol at one revision."""

    symbol: str
    revision: int = Field(default=0, ge=0)
    ohlcv: list[OHLCV]
    current_price: Optional[float] = None

    @field_validator("ohlcv")
    @classmethod
    def timestamps_strictly_increasing(cls, candles: list[OHLCV]) -> list[OHLCV]:
        for prev, curr in zip(candles, candles[1:]):
            if curr.timestamp <= prev.timestamp:
                raise ValueError(
                    f"Candle timestamps must be strictly increasing "
                    f"({prev.timestamp.isoformat()} >= {curr.timestamp.isoformat()})"
                )
        return candles

    @property
    def identity(self) -> SeriesIdentity:
        return SeriesIdentity(symbol=self.symbol, revision=self.revision)
