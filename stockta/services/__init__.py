"""
StockTA Services

Every service has an explicit input and output contract.
"""

from stockta.services.base import (
    BaseService,
    ServiceError,
    IndicatorError,
    InvalidParameterError,
    LengthMismatchError,
    MissingInputError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "IndicatorError",
    "InvalidParameterError",
    "LengthMismatchError",
    "MissingInputError",
]
