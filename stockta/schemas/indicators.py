"""
CONTRACT 2: Indicator Engine

Input: PriceSeries + IndicatorRequest
Output: IndicatorResult

Every indicator kind is a member of a closed enumeration with exactly one
parameter model and one result shape. Positional results are tuples where
``None`` marks a position without enough data ("insufficient") and a float
is a defined value.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockta.schemas.market import PriceSource, SeriesIdentity


IndicatorValues = tuple[Optional[float], ...]


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    SMA = "sma"
    EMA = "ema"
    WMA = "wma"
    RSI = "rsi"
    MACD = "macd"
    STOCHASTIC = "stochastic"
    BOLLINGER = "bollinger"
    ATR = "atr"
    OBV = "obv"
    SUPPORT_RESISTANCE = "support_resistance"


class MovingAverageType(str, Enum):
    SMA = "SMA"
    EMA = "EMA"


class Crossover(str, Enum):
    BULLISH = "bullish_crossover"
    BEARISH = "bearish_crossover"
    NONE = "none"


class TrendDirection(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RSIZone(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class SignalStrength(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class BandPosition(str, Enum):
    ABOVE_UPPER = "above_upper"
    BELOW_LOWER = "below_lower"
    WITHIN_BANDS = "within_bands"


class MATrend(str, Enum):
    UPWARD = "upward"
    DOWNWARD = "downward"
    SIDEWAYS = "sideways"


class MAPosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"
    AT = "at"


# =============================================================================
# INPUT: Parameters per indicator kind
# =============================================================================


class IndicatorParams(BaseModel):
    """Base for parameter models. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class MovingAverageParams(IndicatorParams):
    period: int = Field(default=20, gt=0)
    source: PriceSource = PriceSource.CLOSE


class RSIParams(IndicatorParams):
    period: int = Field(default=14, gt=0)
    source: PriceSource = PriceSource.CLOSE


class MACDParams(IndicatorParams):
    fast: int = Field(default=12, gt=0)
    slow: int = Field(default=26, gt=0)
    signal: int = Field(default=9, gt=0)
    source: PriceSource = PriceSource.CLOSE

    @model_validator(mode="after")
    def fast_below_slow(self) -> "MACDParams":
        if self.fast >= self.slow:
            raise ValueError(f"fast period ({self.fast}) must be below slow period ({self.slow})")
        return self


class StochasticParams(IndicatorParams):
    period: int = Field(default=14, gt=0)
    signal_period: int = Field(default=3, gt=0)


class BollingerParams(IndicatorParams):
    period: int = Field(default=20, gt=0)
    multiplier: float = Field(default=2.0, gt=0)
    source: PriceSource = PriceSource.CLOSE


class ATRParams(IndicatorParams):
    period: int = Field(default=14, gt=0)


class OBVParams(IndicatorParams):
    pass


class SupportResistanceParams(IndicatorParams):
    lookback: int = Field(default=5, ge=1)
    source: PriceSource = PriceSource.CLOSE


PARAMS_MODELS: dict[IndicatorKind, type[IndicatorParams]] = {
    IndicatorKind.SMA: MovingAverageParams,
    IndicatorKind.EMA: MovingAverageParams,
    IndicatorKind.WMA: MovingAverageParams,
    IndicatorKind.RSI: RSIParams,
    IndicatorKind.MACD: MACDParams,
    IndicatorKind.STOCHASTIC: StochasticParams,
    IndicatorKind.BOLLINGER: BollingerParams,
    IndicatorKind.ATR: ATRParams,
    IndicatorKind.OBV: OBVParams,
    IndicatorKind.SUPPORT_RESISTANCE: SupportResistanceParams,
}


class IndicatorRequest(BaseModel):
    """
    Request for one indicator over one series snapshot.
    Sent by: AI flows / request handlers
    Received by: IndicatorEngine
    """

    kind: IndicatorKind
    params: dict[str, Union[int, float, str]] = Field(default_factory=dict)
    series_identity: Optional[SeriesIdentity] = Field(
        default=None,
        description="Snapshot the caller expects; must match the engine's series",
    )


# =============================================================================
# OUTPUT: Result shapes
# =============================================================================


class IndicatorOutput(BaseModel):
    """Base for multi-sequence results. Immutable so cached values stay intact."""

    model_config = ConfigDict(frozen=True)


class MACDResult(IndicatorOutput):
    macd: IndicatorValues
    signal: IndicatorValues
    histogram: IndicatorValues


class BollingerBandsResult(IndicatorOutput):
    upper: IndicatorValues
    middle: IndicatorValues
    lower: IndicatorValues
    bandwidth: IndicatorValues
    percent_b: IndicatorValues


class StochasticResult(IndicatorOutput):
    k: IndicatorValues
    d: IndicatorValues


class PivotLevel(IndicatorOutput):
    index: int = Field(..., ge=0)
    value: float


class SupportResistanceLevels(IndicatorOutput):
    """
    Pivot levels in scan order. Plateaus are reported once per equal
    extremum, so adjacent duplicates are expected.
    """

    supports: tuple[PivotLevel, ...] = ()
    resistances: tuple[PivotLevel, ...] = ()

    @property
    def support_values(self) -> list[float]:
        return [level.value for level in self.supports]

    @property
    def resistance_values(self) -> list[float]:
        return [level.value for level in self.resistances]


IndicatorResult = Union[
    IndicatorValues,
    MACDResult,
    BollingerBandsResult,
    StochasticResult,
    SupportResistanceLevels,
]


# =============================================================================
# OUTPUT: Whole-result summaries (latest state only)
# =============================================================================


class RSISignal(IndicatorOutput):
    value: float = Field(..., ge=0, le=100)
    zone: RSIZone
    strength: SignalStrength


class MACDSummary(IndicatorOutput):
    macd: float
    signal: float
    histogram: float
    trend: TrendDirection
    crossover: Crossover = Crossover.NONE


class BollingerSummary(IndicatorOutput):
    upper: float
    middle: float
    lower: float
    bandwidth: float = Field(..., description="(upper - lower) / middle * 100")
    position: BandPosition
    squeeze: bool


class MovingAverageTrend(IndicatorOutput):
    period: int
    ma_type: MovingAverageType
    value: float
    trend: MATrend
    position: MAPosition
