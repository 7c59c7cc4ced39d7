"""Custom exceptions for request dispatch."""

from typing import Any


class MediatorError(Exception):
    """Base exception for all dispatch-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgumentError(MediatorError, ValueError):
    """Raised when a required argument is missing or of an unsupported kind."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Argument '{argument}' must not be None",
            details={"argument": argument},
        )
        self.argument = argument


class ServiceNotRegisteredError(MediatorError, LookupError):
    """Raised when a required service has no registration in the provider."""

    def __init__(self, service_type: Any) -> None:
        super().__init__(
            f"No service for type '{_type_name(service_type)}' has been registered.",
            details={"service_type": _type_name(service_type)},
        )
        self.service_type = service_type


class InvalidPipelineStateError(MediatorError, RuntimeError):
    """Raised when the provider returns a missing entry among pipeline behaviors."""

    def __init__(self, request_type: type, index: int) -> None:
        super().__init__(
            "Pipeline behavior is None.",
            details={"request_type": _type_name(request_type), "index": index},
        )
        self.request_type = request_type
        self.index = index


class OperationCancelledError(MediatorError):
    """Raised when a handler or behavior observes a cancelled token."""

    def __init__(self, message: str = "The operation was cancelled.") -> None:
        super().__init__(message)


def _type_name(service_type: Any) -> str:
    # Parameterised generics (CommandHandler[X]) have no __qualname__, their repr is informative
    if isinstance(service_type, type):
        return f"{service_type.__module__}.{service_type.__qualname__}"
    return repr(service_type)


__all__ = [
    "MediatorError",
    "InvalidArgumentError",
    "ServiceNotRegisteredError",
    "InvalidPipelineStateError",
    "OperationCancelledError",
]
