"""
Indicator Engine Service Implementation

One engine is bound to one PriceSeries snapshot. Results are memoized in an
IndicatorCache under a key derived from the series identity, the indicator
kind and its validated parameters.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations, no network or disk I/O.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from stockta.schemas.indicators import (
    PARAMS_MODELS,
    ATRParams,
    BollingerBandsResult,
    BollingerParams,
    BollingerSummary,
    IndicatorKind,
    IndicatorParams,
    IndicatorRequest,
    IndicatorResult,
    IndicatorValues,
    MACDParams,
    MACDResult,
    MACDSummary,
    MovingAverageParams,
    MovingAverageTrend,
    MovingAverageType,
    OBVParams,
    RSIParams,
    RSISignal,
    StochasticParams,
    StochasticResult,
    SupportResistanceLevels,
    SupportResistanceParams,
)
from stockta.schemas.market import PriceSource, SeriesIdentity
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.analysis import (
    summarize_bollinger,
    summarize_macd,
    summarize_moving_average,
    summarize_rsi,
)
from stockta.services.indicators.cache import CacheKey, IndicatorCache
from stockta.services.indicators.calculations import PriceSeries
from stockta.services.indicators.interface import IndicatorServiceInterface
from stockta.services.indicators.levels import detect_support_resistance, nearest_levels
from stockta.services.indicators.momentum import (
    macd,
    relative_strength_index,
    stochastic_oscillator,
)
from stockta.services.indicators.moving_averages import (
    exponential_moving_average,
    simple_moving_average,
    weighted_moving_average,
)
from stockta.services.indicators.volatility import (
    average_true_range,
    bollinger_bands,
    historical_volatility,
)
from stockta.services.indicators.volume import on_balance_volume

logger = logging.getLogger(__name__)

Calculator = Callable[[PriceSeries, IndicatorParams], IndicatorResult]


# =============================================================================
# DISPATCH TABLE
# =============================================================================


def _calc_sma(series: PriceSeries, params: MovingAverageParams) -> IndicatorValues:
    return simple_moving_average(series.source(params.source), params.period)


def _calc_ema(series: PriceSeries, params: MovingAverageParams) -> IndicatorValues:
    return exponential_moving_average(series.source(params.source), params.period)


def _calc_wma(series: PriceSeries, params: MovingAverageParams) -> IndicatorValues:
    return weighted_moving_average(series.source(params.source), params.period)


def _calc_rsi(series: PriceSeries, params: RSIParams) -> IndicatorValues:
    return relative_strength_index(series.source(params.source), params.period)


def _calc_macd(series: PriceSeries, params: MACDParams) -> MACDResult:
    return macd(series.source(params.source), params.fast, params.slow, params.signal)


def _calc_stochastic(series: PriceSeries, params: StochasticParams) -> StochasticResult:
    series.require("highs", "lows")
    return stochastic_oscillator(
        series.highs, series.lows, series.closes, params.period, params.signal_period
    )


def _calc_bollinger(series: PriceSeries, params: BollingerParams) -> BollingerBandsResult:
    return bollinger_bands(series.source(params.source), params.period, params.multiplier)


def _calc_atr(series: PriceSeries, params: ATRParams) -> IndicatorValues:
    series.require("highs", "lows")
    return average_true_range(series.highs, series.lows, series.closes, params.period)


def _calc_obv(series: PriceSeries, params: OBVParams) -> IndicatorValues:
    series.require("volumes")
    return on_balance_volume(series.closes, series.volumes)


def _calc_support_resistance(
    series: PriceSeries, params: SupportResistanceParams
) -> SupportResistanceLevels:
    return detect_support_resistance(series.source(params.source), params.lookback)


DEFAULT_CALCULATORS: dict[IndicatorKind, Calculator] = {
    IndicatorKind.SMA: _calc_sma,
    IndicatorKind.EMA: _calc_ema,
    IndicatorKind.WMA: _calc_wma,
    IndicatorKind.RSI: _calc_rsi,
    IndicatorKind.MACD: _calc_macd,
    IndicatorKind.STOCHASTIC: _calc_stochastic,
    IndicatorKind.BOLLINGER: _calc_bollinger,
    IndicatorKind.ATR: _calc_atr,
    IndicatorKind.OBV: _calc_obv,
    IndicatorKind.SUPPORT_RESISTANCE: _calc_support_resistance,
}

_unhandled = set(IndicatorKind) - set(DEFAULT_CALCULATORS)
if _unhandled:
    raise RuntimeError(f"No calculator registered for: {sorted(k.value for k in _unhandled)}")


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}"
        for err in error.errors()
    )


def _coerce_kind(kind: Union[IndicatorKind, str]) -> IndicatorKind:
    try:
        return IndicatorKind(kind)
    except ValueError as e:
        supported = ", ".join(k.value for k in IndicatorKind)
        raise InvalidParameterError(
            f"Unsupported indicator kind: {kind!r} (supported: {supported})",
            {"kind": kind},
        ) from e


# =============================================================================
# ENGINE
# =============================================================================


class IndicatorEngine(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Usage:
        series = PriceSeries.from_symbol_data(symbol_data)
        engine = IndicatorEngine(series)
        rsi = engine.rsi(14)
        bands = engine.compute("bollinger", {"period": 20, "multiplier": 2})

    The engine never mutates its series. When the data layer produces a new
    revision, call rebind() (or build a new engine) so old entries are dropped.
    """

    def __init__(
        self,
        series: PriceSeries,
        cache: Optional[IndicatorCache] = None,
        calculators: Optional[Mapping[IndicatorKind, Calculator]] = None,
    ):
        self._series = series
        self._cache = cache if cache is not None else IndicatorCache.from_settings()
        self._calculators = dict(DEFAULT_CALCULATORS)
        for kind, func in (calculators or {}).items():
            self._calculators[_coerce_kind(kind)] = func

    @property
    def series(self) -> PriceSeries:
        return self._series

    @property
    def identity(self) -> SeriesIdentity:
        return self._series.identity

    @property
    def cache(self) -> IndicatorCache:
        return self._cache

    @property
    def current_price(self) -> Optional[float]:
        if len(self._series) == 0:
            return None
        return float(self._series.closes[-1])

    # ============ Request handling ============

    def resolve(
        self,
        kind: Union[IndicatorKind, str],
        params: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> tuple[IndicatorKind, IndicatorParams]:
        """Validate kind and parameters, applying the kind's defaults."""
        kind = _coerce_kind(kind)

        if isinstance(params, BaseModel):
            params = params.model_dump()
        elif params is not None and not isinstance(params, Mapping):
            raise InvalidParameterError(
                f"params must be a mapping, got {type(params).__name__}", {"kind": kind.value}
            )
        merged = {**(params or {}), **overrides}

        try:
            validated = PARAMS_MODELS[kind].model_validate(merged)
        except ValidationError as e:
            raise InvalidParameterError(
                f"Invalid parameters for {kind.value}: {_describe_validation_error(e)}",
                {"kind": kind.value, "params": merged},
            ) from e
        return kind, validated

    def cache_key(self, kind: IndicatorKind, params: IndicatorParams) -> CacheKey:
        return CacheKey(series=self.identity, kind=kind, params=params.model_dump_json())

    def compute(
        self,
        kind: Union[IndicatorKind, str],
        params: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> IndicatorResult:
        kind, validated = self.resolve(kind, params, **overrides)
        key = self.cache_key(kind, validated)
        calculator = self._calculators[kind]

        def run() -> IndicatorResult:
            try:
                return calculator(self._series, validated)
            except Exception as e:
                logger.warning(f"Indicator computation failed for {key}: {e}")
                raise

        return self._cache.get_or_compute(key, run)

    def validate_input(
        self, input_data: Union[IndicatorRequest, Mapping[str, Any]]
    ) -> IndicatorRequest:
        """Coerce a request map into an IndicatorRequest bound to this series."""
        if not isinstance(input_data, IndicatorRequest):
            try:
                input_data = IndicatorRequest.model_validate(input_data)
            except ValidationError as e:
                raise InvalidParameterError(
                    f"Invalid indicator request: {_describe_validation_error(e)}",
                    {"request": input_data},
                ) from e

        if input_data.series_identity is not None and input_data.series_identity != self.identity:
            raise InvalidParameterError(
                f"Request targets series {input_data.series_identity} "
                f"but engine is bound to {self.identity}",
                {
                    "requested": str(input_data.series_identity),
                    "bound": str(self.identity),
                },
            )
        return input_data

    def execute(self, input_data: Union[IndicatorRequest, Mapping[str, Any]]) -> IndicatorResult:
        request = self.validate_input(input_data)
        return self.compute(request.kind, request.params)

    # ============ Typed helpers ============

    def sma(self, period: int = 20, source: PriceSource = PriceSource.CLOSE) -> IndicatorValues:
        return self.compute(IndicatorKind.SMA, period=period, source=source)

    def ema(self, period: int = 20, source: PriceSource = PriceSource.CLOSE) -> IndicatorValues:
        return self.compute(IndicatorKind.EMA, period=period, source=source)

    def wma(self, period: int = 20, source: PriceSource = PriceSource.CLOSE) -> IndicatorValues:
        return self.compute(IndicatorKind.WMA, period=period, source=source)

    def rsi(self, period: int = 14, source: PriceSource = PriceSource.CLOSE) -> IndicatorValues:
        return self.compute(IndicatorKind.RSI, period=period, source=source)

    def macd(
        self,
        fast: int = 12,
        slow: int = 26,
        signal: int = 9,
        source: PriceSource = PriceSource.CLOSE,
    ) -> MACDResult:
        return self.compute(IndicatorKind.MACD, fast=fast, slow=slow, signal=signal, source=source)

    def stochastic(self, period: int = 14, signal_period: int = 3) -> StochasticResult:
        return self.compute(IndicatorKind.STOCHASTIC, period=period, signal_period=signal_period)

    def bollinger(
        self,
        period: int = 20,
        multiplier: float = 2.0,
        source: PriceSource = PriceSource.CLOSE,
    ) -> BollingerBandsResult:
        return self.compute(
            IndicatorKind.BOLLINGER, period=period, multiplier=multiplier, source=source
        )

    def atr(self, period: int = 14) -> IndicatorValues:
        return self.compute(IndicatorKind.ATR, period=period)

    def obv(self) -> IndicatorValues:
        return self.compute(IndicatorKind.OBV)

    def support_resistance(
        self, lookback: int = 5, source: PriceSource = PriceSource.CLOSE
    ) -> SupportResistanceLevels:
        return self.compute(IndicatorKind.SUPPORT_RESISTANCE, lookback=lookback, source=source)

    # ============ Summaries (latest state, None when too short) ============

    def rsi_signal(
        self, period: int = 14, overbought: float = 70, oversold: float = 30
    ) -> Optional[RSISignal]:
        return summarize_rsi(self.rsi(period), overbought, oversold)

    def macd_summary(self, fast: int = 12, slow: int = 26, signal: int = 9) -> Optional[MACDSummary]:
        return summarize_macd(self.macd(fast, slow, signal))

    def bollinger_summary(
        self, period: int = 20, multiplier: float = 2.0
    ) -> Optional[BollingerSummary]:
        bands = self.bollinger(period, multiplier)
        if self.current_price is None:
            return None
        return summarize_bollinger(bands, self.current_price)

    def moving_average_trend(
        self, period: int, ma_type: MovingAverageType = MovingAverageType.SMA
    ) -> Optional[MovingAverageTrend]:
        try:
            ma_type = MovingAverageType(ma_type)
        except ValueError as e:
            raise InvalidParameterError(f"Unsupported moving average type: {ma_type!r}") from e

        ma_values = self.ema(period) if ma_type == MovingAverageType.EMA else self.sma(period)
        if self.current_price is None:
            return None
        return summarize_moving_average(ma_values, self.current_price, period, ma_type)

    def moving_average_trends(
        self,
        periods: Sequence[int] = (20, 50, 200),
        ma_type: MovingAverageType = MovingAverageType.SMA,
    ) -> list[MovingAverageTrend]:
        results = (self.moving_average_trend(period, ma_type) for period in periods)
        return [result for result in results if result is not None]

    def volatility(self, period: int = 20) -> Optional[float]:
        """Annualised historical volatility (%) of the closes."""
        return historical_volatility(self._series.closes, period)

    def key_levels(
        self, lookback: int = 5, limit: int = 5, tolerance_pct: Optional[float] = None
    ) -> tuple[list[float], list[float]]:
        """Nearest (supports, resistances) around the current price."""
        levels = self.support_resistance(lookback)
        if self.current_price is None:
            return [], []
        return nearest_levels(levels, self.current_price, limit, tolerance_pct)

    # ============ Lifecycle ============

    def invalidate(self) -> int:
        """Drop every cached result for this engine's series identity."""
        return self._cache.invalidate(self.identity)

    def rebind(self, series: PriceSeries) -> "IndicatorEngine":
        """
        Engine over a new snapshot sharing this cache and calculators.
        Entries of the old identity are dropped when the identity changes.
        """
        if series.identity != self.identity:
            logger.info(f"Rebinding indicator engine {self.identity} -> {series.identity}")
            self.invalidate()
        return IndicatorEngine(series, cache=self._cache, calculators=self._calculators)

    def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True
