"""
Tests for On-Balance Volume and support/resistance detection.
"""

import pytest

from stockta.schemas.indicators import PivotLevel, SupportResistanceLevels
from stockta.services.base import InvalidParameterError, LengthMismatchError
from stockta.services.indicators.levels import (
    cluster_levels,
    detect_support_resistance,
    nearest_levels,
)
from stockta.services.indicators.volume import on_balance_volume


def make_levels(supports, resistances) -> SupportResistanceLevels:
    return SupportResistanceLevels(
        supports=tuple(PivotLevel(index=i, value=v) for i, v in enumerate(supports)),
        resistances=tuple(PivotLevel(index=i, value=v) for i, v in enumerate(resistances)),
    )


# ============================================================================
# OBV
# ============================================================================

class TestOnBalanceVolume:
    def test_direction_weighted_volume(self):
        result = on_balance_volume([10, 11, 11, 10, 12], [100, 200, 300, 400, 500])
        assert result == (0.0, 200.0, 200.0, -200.0, 300.0)

    def test_monotonic_rise_accumulates_all_volume(self):
        volumes = [5, 10, 15, 20]
        result = on_balance_volume([1, 2, 3, 4], volumes)
        assert result[-1] == sum(volumes[1:])

    def test_every_position_defined(self, sample_prices):
        result = on_balance_volume(sample_prices, [1000] * len(sample_prices))
        assert None not in result

    def test_empty(self):
        assert on_balance_volume([], []) == ()

    def test_single_bar(self):
        assert on_balance_volume([10], [100]) == (0.0,)

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            on_balance_volume([1, 2, 3], [100, 200])


# ============================================================================
# SUPPORT / RESISTANCE
# ============================================================================

class TestDetectSupportResistance:
    def test_local_extrema(self):
        levels = detect_support_resistance([1, 3, 2, 5, 1], lookback=1)

        assert [(p.index, p.value) for p in levels.resistances] == [(1, 3.0), (3, 5.0)]
        assert [(p.index, p.value) for p in levels.supports] == [(2, 2.0)]

    def test_plateau_reports_every_member(self):
        levels = detect_support_resistance([5, 3, 3, 5], lookback=1)
        assert [p.index for p in levels.supports] == [1, 2]

    def test_edges_never_qualify(self):
        levels = detect_support_resistance([0, 5, 6, 7, 8, 20], lookback=2)
        indices = {p.index for p in levels.supports + levels.resistances}
        assert indices <= {2, 3}

    def test_too_short_for_window(self):
        levels = detect_support_resistance([1, 2, 3], lookback=2)
        assert levels.supports == ()
        assert levels.resistances == ()

    def test_value_accessors(self):
        levels = detect_support_resistance([1, 3, 2, 5, 1], lookback=1)
        assert levels.resistance_values == [3.0, 5.0]
        assert levels.support_values == [2.0]

    @pytest.mark.parametrize("lookback", [0, -2])
    def test_invalid_lookback(self, lookback):
        with pytest.raises(InvalidParameterError):
            detect_support_resistance([1, 2, 3, 4, 5], lookback=lookback)


class TestClusterLevels:
    def test_merges_within_tolerance(self):
        assert cluster_levels([105, 100, 100.2], tolerance_pct=0.5) == pytest.approx([100.1, 105])

    def test_accepts_pivots(self):
        pivots = [PivotLevel(index=0, value=50.0), PivotLevel(index=4, value=50.1)]
        assert cluster_levels(pivots, tolerance_pct=1.0) == pytest.approx([50.05])

    def test_zero_tolerance_merges_only_duplicates(self):
        assert cluster_levels([10, 10, 10.01], tolerance_pct=0) == [10.0, 10.01]

    def test_negative_tolerance_rejected(self):
        with pytest.raises(InvalidParameterError):
            cluster_levels([1, 2], tolerance_pct=-1)


class TestNearestLevels:
    def test_split_around_price(self):
        levels = make_levels([95, 99, 97, 99], [104, 101, 98])
        supports, resistances = nearest_levels(levels, current_price=100)

        assert supports == [99.0, 97.0, 95.0]
        assert resistances == [101.0, 104.0]

    def test_limit(self):
        levels = make_levels([90, 91, 92, 93], [])
        supports, resistances = nearest_levels(levels, current_price=100, limit=2)

        assert supports == [93.0, 92.0]
        assert resistances == []

    def test_clustered(self):
        levels = make_levels([95.0, 95.2, 90.0], [])
        supports, _ = nearest_levels(levels, current_price=100, tolerance_pct=0.5)
        assert supports == pytest.approx([95.1, 90.0])
