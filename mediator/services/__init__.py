"""Service lookup used by the dispatcher."""

from .provider import (
    IServiceProvider,
    ISupportRequiredService,
    get_required_service,
    get_services,
    service_sequence_key,
)


__all__ = [
    "IServiceProvider",
    "ISupportRequiredService",
    "get_required_service",
    "get_services",
    "service_sequence_key",
]
