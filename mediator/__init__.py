"""In-process mediator: send commands and queries through a behavior pipeline.

Key components:
- Command / Query: request markers
- CommandHandler / QueryHandler: terminal units of work
- CommandBehavior / QueryBehavior: middleware around handlers
- RequestDispatcher: resolves and runs the pipeline for a request
- Sender: facade callers depend on
"""

from ._version import __version__
from .cancellation import CancellationToken
from .contracts import (
    Command,
    CommandBehavior,
    CommandHandler,
    IRequestDispatcher,
    ISender,
    Query,
    QueryBehavior,
    QueryHandler,
    Request,
    RequestDelegate,
)
from .dispatcher import RequestDispatcher
from .exceptions import (
    InvalidArgumentError,
    InvalidPipelineStateError,
    MediatorError,
    OperationCancelledError,
    ServiceNotRegisteredError,
)
from .sender import Sender
from .services import IServiceProvider, get_required_service, get_services


__all__ = [
    "__version__",
    "CancellationToken",
    "Command",
    "CommandBehavior",
    "CommandHandler",
    "IRequestDispatcher",
    "ISender",
    "IServiceProvider",
    "InvalidArgumentError",
    "InvalidPipelineStateError",
    "MediatorError",
    "OperationCancelledError",
    "Query",
    "QueryBehavior",
    "QueryHandler",
    "Request",
    "RequestDelegate",
    "RequestDispatcher",
    "Sender",
    "ServiceNotRegisteredError",
    "get_required_service",
    "get_services",
]
