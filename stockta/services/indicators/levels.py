"""
Support / Resistance Levels

Pivot detection over a symmetric window, plus the post-processing helpers
callers use to turn raw pivots into a short list of key levels.
"""

from typing import Iterable, Optional, Union

from stockta.schemas.indicators import PivotLevel, SupportResistanceLevels
from stockta.services.base import InvalidParameterError
from stockta.services.indicators.calculations import as_array, check_period


def detect_support_resistance(
    values: Iterable[float], lookback: int = 5
) -> SupportResistanceLevels:
    """
    Find local extrema in a symmetric window of ``lookback`` bars per side.

    Index i (lookback <= i < n - lookback) is a support when it equals the
    window minimum and a resistance when it equals the window maximum.
    Every member of a plateau passes the test, so duplicates are reported
    as-is; use cluster_levels() to merge them.
    """
    lookback = check_period(lookback, "lookback")
    data = as_array(values)

    supports = []
    resistances = []
    for i in range(lookback, len(data) - lookback):
        window = data[i - lookback : i + lookback + 1]
        current = data[i]
        if current == window.min():
            supports.append(PivotLevel(index=i, value=float(current)))
        if current == window.max():
            resistances.append(PivotLevel(index=i, value=float(current)))

    return SupportResistanceLevels(supports=tuple(supports), resistances=tuple(resistances))


def cluster_levels(
    levels: Iterable[Union[PivotLevel, float]], tolerance_pct: float = 0.5
) -> list[float]:
    """
    Merge price levels lying within ``tolerance_pct`` percent of the first
    level of their cluster. Returns cluster means in ascending order.
    """
    if tolerance_pct < 0:
        raise InvalidParameterError(
            f"tolerance_pct must not be negative, got {tolerance_pct}",
            {"tolerance_pct": tolerance_pct},
        )

    prices = sorted(
        level.value if isinstance(level, PivotLevel) else float(level) for level in levels
    )
    clusters: list[list[float]] = []
    for price in prices:
        if clusters:
            anchor = clusters[-1][0]
            if price == anchor or (
                anchor != 0 and (price - anchor) / abs(anchor) * 100 <= tolerance_pct
            ):
                clusters[-1].append(price)
                continue
        clusters.append([price])

    return [sum(cluster) / len(cluster) for cluster in clusters]


def nearest_levels(
    levels: SupportResistanceLevels,
    current_price: float,
    limit: int = 5,
    tolerance_pct: Optional[float] = None,
) -> tuple[list[float], list[float]]:
    """
    Key levels around the current price.

    Returns: (support_levels, resistance_levels)
        supports strictly below price, nearest first;
        resistances strictly above price, nearest first.
    """
    limit = check_period(limit, "limit")

    if tolerance_pct is None:
        support_prices = sorted(set(levels.support_values))
        resistance_prices = sorted(set(levels.resistance_values))
    else:
        support_prices = cluster_levels(levels.supports, tolerance_pct)
        resistance_prices = cluster_levels(levels.resistances, tolerance_pct)

    support = sorted((p for p in support_prices if p < current_price), reverse=True)
    resistance = sorted(p for p in resistance_prices if p > current_price)
    return support[:limit], resistance[:limit]
