"""
Technical Indicator Calculations

Shared array helpers and the series-bearing context used by every
indicator module.
NO LLM INVOLVEMENT - All math is deterministic.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

import numpy as np

from stockta.schemas.indicators import IndicatorValues
from stockta.schemas.market import OHLCV, PriceSource, SeriesIdentity, SymbolData
from stockta.services.base import (
    InvalidParameterError,
    LengthMismatchError,
    MissingInputError,
)


# =============================================================================
# VALIDATION
# =============================================================================


def check_period(period: int, name: str = "period") -> int:
    """Reject anything but a positive integer window length."""
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)):
        raise InvalidParameterError(
            f"{name} must be an integer, got {type(period).__name__}",
            {name: period},
        )
    if period <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {period}", {name: period})
    return int(period)


def as_array(values: Iterable[float], name: str = "values") -> np.ndarray:
    """Convert a numeric sequence to a 1-D float array of finite values."""
    try:
        arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must contain only numbers: {e}") from e

    if arr.ndim != 1:
        raise InvalidParameterError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        bad = int(np.flatnonzero(~np.isfinite(arr))[0])
        raise InvalidParameterError(
            f"{name} must contain only finite numbers (index {bad} is {arr[bad]})",
            {"index": bad},
        )
    return arr


def check_same_length(closes: np.ndarray, **others: np.ndarray) -> None:
    """Every auxiliary series must align index-for-index with closes."""
    for name, arr in others.items():
        if len(arr) != len(closes):
            raise LengthMismatchError(
                f"{name} has {len(arr)} values but closes has {len(closes)}",
                {"series": name, "length": len(arr), "expected": len(closes)},
            )


# =============================================================================
# CONVERSION
# =============================================================================


def to_values(arr: np.ndarray) -> IndicatorValues:
    """Turn a NaN-padded array into positional values (None = insufficient)."""
    return tuple(None if np.isnan(v) else float(v) for v in arr)


def get_last_valid(values: Sequence[Optional[float]]) -> Optional[float]:
    """Get last defined value from positional values or a NaN-padded array."""
    for v in reversed(values):
        if v is not None and not np.isnan(v):
            return float(v)
    return None


# =============================================================================
# SERIES CONTEXT
# =============================================================================


def _frozen(values: Optional[Iterable[float]], name: str) -> Optional[np.ndarray]:
    if values is None:
        return None
    arr = np.array(as_array(values, name), dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class PriceSeries:
    """
    Aligned OHLCV arrays for one instrument snapshot.

    Closes are required; the other series are optional and must match the
    close length when present. Arrays are read-only: new data means a new
    PriceSeries with a new identity.
    """

    identity: SeriesIdentity
    closes: np.ndarray
    highs: Optional[np.ndarray] = None
    lows: Optional[np.ndarray] = None
    volumes: Optional[np.ndarray] = None
    opens: Optional[np.ndarray] = None
    timestamps: Optional[tuple[datetime, ...]] = None

    def __post_init__(self):
        if isinstance(self.identity, str):
            object.__setattr__(self, "identity", SeriesIdentity(symbol=self.identity))
        if self.closes is None:
            raise MissingInputError("A price series requires closes", {"missing": ["closes"]})

        for name in ("closes", "highs", "lows", "volumes", "opens"):
            object.__setattr__(self, name, _frozen(getattr(self, name), name))

        aux = {
            name: getattr(self, name)
            for name in ("highs", "lows", "volumes", "opens")
            if getattr(self, name) is not None
        }
        check_same_length(self.closes, **aux)

        if self.timestamps is not None:
            stamps = tuple(self.timestamps)
            if len(stamps) != len(self.closes):
                raise LengthMismatchError(
                    f"timestamps has {len(stamps)} values but closes has {len(self.closes)}",
                    {"series": "timestamps"},
                )
            object.__setattr__(self, "timestamps", stamps)

    def __len__(self) -> int:
        return len(self.closes)

    @classmethod
    def from_candles(
        cls, symbol: str, candles: Sequence[OHLCV], revision: int = 0
    ) -> "PriceSeries":
        """Build a full OHLCV series from candle models."""
        return cls(
            identity=SeriesIdentity(symbol=symbol, revision=revision),
            opens=[c.open for c in candles],
            highs=[c.high for c in candles],
            lows=[c.low for c in candles],
            closes=[c.close for c in candles],
            volumes=[c.volume for c in candles],
            timestamps=tuple(c.timestamp for c in candles),
        )

    @classmethod
    def from_symbol_data(cls, symbol_data: SymbolData) -> "PriceSeries":
        return cls.from_candles(symbol_data.symbol, symbol_data.ohlcv, symbol_data.revision)

    def require(self, *names: str) -> None:
        """Raise MissingInputError if any named auxiliary series is absent."""
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise MissingInputError(
                f"Series {self.identity} has no {', '.join(missing)}",
                {"missing": missing, "series": str(self.identity)},
            )

    def source(self, source: PriceSource = PriceSource.CLOSE) -> np.ndarray:
        """Select the price series a single-series indicator reads."""
        try:
            source = PriceSource(source)
        except ValueError as e:
            raise InvalidParameterError(f"Unsupported price source: {source!r}") from e

        if source == PriceSource.CLOSE:
            return self.closes
        if source == PriceSource.OPEN:
            self.require("opens")
            return self.opens
        if source == PriceSource.HIGH:
            self.require("highs")
            return self.highs
        if source == PriceSource.LOW:
            self.require("lows")
            return self.lows
        if source == PriceSource.HL2:
            self.require("highs", "lows")
            return (self.highs + self.lows) / 2.0
        # HLC3
        self.require("highs", "lows")
        return (self.highs + self.lows + self.closes) / 3.0
