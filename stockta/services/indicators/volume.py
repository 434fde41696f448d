"""
Volume Indicators

On-Balance Volume.
"""

from typing import Iterable

import numpy as np

from stockta.schemas.indicators import IndicatorValues
from stockta.services.indicators.calculations import as_array, check_same_length, to_values


def _obv(closes: np.ndarray, volumes: np.ndarray) -> np.ndarray:
    result = np.zeros(len(closes))
    if len(closes) < 2:
        return result

    # +1 up, -1 down, 0 unchanged
    direction = np.sign(np.diff(closes))
    result[1:] = np.cumsum(direction * volumes[1:])
    return result


def on_balance_volume(closes: Iterable[float], volumes: Iterable[float]) -> IndicatorValues:
    """
    On-Balance Volume. The counter starts at 0 on the first bar, so every
    position is defined.
    """
    closes_arr = as_array(closes, "closes")
    volumes_arr = as_array(volumes, "volumes")
    check_same_length(closes_arr, volumes=volumes_arr)
    return to_values(_obv(closes_arr, volumes_arr))


obv = on_balance_volume
