"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Any, Mapping, Optional, Union

from stockta.services.base import BaseService
from stockta.schemas.indicators import IndicatorKind, IndicatorRequest, IndicatorResult


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorResult]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - kind: which indicator
        - params: indicator parameters (defaults applied per kind)
        - series_identity: snapshot the caller expects (optional)

    OUTPUT: IndicatorResult
        - positional values, or a multi-sequence / level-set model
    """

    @property
    def name(self) -> str:
        return "IndicatorEngine"

    @abstractmethod
    def execute(self, input_data: Union[IndicatorRequest, Mapping[str, Any]]) -> IndicatorResult:
        """Compute (or serve from cache) the requested indicator. Accepts a request map."""
        pass

    @abstractmethod
    def compute(
        self,
        kind: Union[IndicatorKind, str],
        params: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> IndicatorResult:
        """
        Compute one indicator over the bound series.

        Args:
            kind: Indicator kind or its string value
            params: Parameter map; missing keys take the kind's defaults
            **overrides: Individual parameters, applied over params

        Returns:
            The indicator result for this kind
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
