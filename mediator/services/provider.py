"""Service provider contract and the lookups the dispatcher builds on it.

The provider is whatever dependency-injection container the host application
uses. The dispatcher only needs a nullable ``get_service`` lookup and the
convention that asking for ``Sequence[X]`` yields every instance registered
for ``X``. Containers that can fail on their own when a service is missing
may also expose ``get_required_service``, which is then preferred.
"""

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, cast, runtime_checkable

from mediator.exceptions import InvalidArgumentError, ServiceNotRegisteredError


__all__ = [
    "IServiceProvider",
    "ISupportRequiredService",
    "get_required_service",
    "get_services",
    "service_sequence_key",
]


T = TypeVar("T")


@runtime_checkable
class IServiceProvider(Protocol):
    """Protocol for service lookup.

    ``get_service`` returns the registered instance or ``None``. Absent and
    registered-as-``None`` are treated the same.
    """

    def get_service(self, service_type: Any) -> Any | None:
        """Return the instance registered for ``service_type`` or ``None``."""
        ...


@runtime_checkable
class ISupportRequiredService(Protocol):
    """Optional fast path for providers that fail on their own."""

    def get_required_service(self, service_type: Any) -> Any:
        """Return the instance registered for ``service_type`` or raise."""
        ...


def service_sequence_key(service_type: Any) -> Any:
    """Return the descriptor under which all ``service_type`` instances live."""
    return Sequence[service_type]


def get_required_service(provider: IServiceProvider, service_type: type[T] | Any) -> T:
    """Get the service registered for ``service_type`` or raise.

    Args:
        provider: Provider to resolve from
        service_type: Service descriptor, a class or a parameterised generic

    Returns:
        The registered instance, never ``None``

    Raises:
        InvalidArgumentError: If ``provider`` or ``service_type`` is None
        ServiceNotRegisteredError: If nothing is registered for ``service_type``
    """
    if provider is None:
        raise InvalidArgumentError("provider")
    if service_type is None:
        raise InvalidArgumentError("service_type")

    if isinstance(provider, ISupportRequiredService):
        return cast(T, provider.get_required_service(service_type))

    service = provider.get_service(service_type)
    if service is None:
        raise ServiceNotRegisteredError(service_type)

    return cast(T, service)


def get_services(provider: IServiceProvider, service_type: type[T] | Any) -> list[T]:
    """Get every service registered for ``service_type``, in provider order.

    An empty list is returned when nothing is registered. Entries are passed
    through as-is, including ``None`` entries a misbehaving provider returns.

    Raises:
        InvalidArgumentError: If ``provider`` or ``service_type`` is None
    """
    if provider is None:
        raise InvalidArgumentError("provider")
    if service_type is None:
        raise InvalidArgumentError("service_type")

    services = provider.get_service(service_sequence_key(service_type))
    if services is None:
        return []

    return list(services)
