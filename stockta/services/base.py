"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can validate its inputs
    - Can check its health

    Services are synchronous: indicator work is CPU-bound and
    has no suspension points.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema

        Raises:
            ServiceError: If execution fails
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass

    def validate_input(self, input_data: InputT) -> InputT:
        """
        Validate input data.
        Default implementation returns input as-is (Pydantic handles validation).
        Override for custom validation logic.
        """
        return input_data


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class IndicatorError(ServiceError):
    """Base error raised by the indicator engine and its calculations."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("IndicatorEngine", message, details)


class InvalidParameterError(IndicatorError):
    """Non-positive period, unknown indicator kind or malformed parameters."""
    pass


class LengthMismatchError(InvalidParameterError):
    """Auxiliary series length disagrees with the close series."""
    pass


class MissingInputError(IndicatorError):
    """A required auxiliary series (highs, lows, volumes) is absent."""
    pass
