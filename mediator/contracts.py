"""Request, handler and behavior contracts.

Requests come in two flavours:

- ``Command``: carries no result. Served by a ``CommandHandler[C]`` and
  wrapped by zero or more ``CommandBehavior[C]``.
- ``Query[R]``: carries a result of type ``R``. Served by a
  ``QueryHandler[Q, R]`` and wrapped by zero or more ``QueryBehavior[Q, R]``.

The parameterised handler and behavior classes double as the service
descriptors the dispatcher asks the provider for, so registering a handler
means registering it under e.g. ``QueryHandler[GetUser, User]``.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import (
    Any,
    Generic,
    Protocol,
    TypeVar,
    get_args,
    get_origin,
    overload,
    runtime_checkable,
)

from .cancellation import CancellationToken
from .exceptions import InvalidArgumentError


__all__ = [
    # Requests
    "Request",
    "Command",
    "Query",
    "resolve_result_type",
    # Handlers and behaviors
    "RequestDelegate",
    "CommandHandler",
    "QueryHandler",
    "CommandBehavior",
    "QueryBehavior",
    # Dispatch entry points
    "IRequestDispatcher",
    "ISender",
]


TResult = TypeVar("TResult")
TCommand = TypeVar("TCommand", bound="Command")
TQuery = TypeVar("TQuery", bound="Query[Any]")


# === Requests ===


class Request:
    """Marker base for everything that can be sent through the dispatcher."""


class Command(Request):
    """A request that produces no result."""


class Query(Request, Generic[TResult]):
    """A request that produces a result of type ``TResult``.

    Example:
        .. code-block:: python

            @dataclass(frozen=True)
            class GetUser(Query[User]):
                user_id: int
    """


def resolve_result_type(request_type: type) -> Any:
    """Return the ``R`` a query class declares through ``Query[R]``.

    The MRO is walked from the most-derived class, so subclasses of a
    specialised query inherit its result type.

    Raises:
        InvalidArgumentError: If no concrete ``Query[...]`` base is found.
    """
    for klass in request_type.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            if get_origin(base) is not Query:
                continue
            args = get_args(base)
            if not args or isinstance(args[0], TypeVar):
                continue
            # list[T] and friends are still open
            if getattr(args[0], "__parameters__", ()):
                continue
            return args[0]

    raise InvalidArgumentError(
        "result_type",
        f"Cannot determine the result type of {request_type.__qualname__}; "
        "subclass Query[...] with a concrete type or pass result_type explicitly",
    )


# === Handlers and behaviors ===


RequestDelegate = Callable[[], Awaitable[TResult]]
"""The rest of the chain: later behaviors, then the handler."""


class CommandHandler(ABC, Generic[TCommand]):
    """Terminal unit of work for a command type."""

    @abstractmethod
    async def handle(self, request: TCommand, cancellation: CancellationToken) -> None:
        pass


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """Terminal unit of work for a query type."""

    @abstractmethod
    async def handle(
        self, request: TQuery, cancellation: CancellationToken
    ) -> TResult:
        pass


class CommandBehavior(ABC, Generic[TCommand]):
    """Middleware wrapping the handling of a command type.

    A behavior may run code before and after ``call_next``, skip it entirely
    to short-circuit the pipeline, or observe failures raised downstream.
    """

    @abstractmethod
    async def handle(
        self,
        request: TCommand,
        call_next: RequestDelegate[None],
        cancellation: CancellationToken,
    ) -> None:
        pass


class QueryBehavior(ABC, Generic[TQuery, TResult]):
    """Middleware wrapping the handling of a query type.

    Same contract as :class:`CommandBehavior`; the value returned by
    ``call_next`` may be returned as-is, replaced or transformed.
    """

    @abstractmethod
    async def handle(
        self,
        request: TQuery,
        call_next: RequestDelegate[TResult],
        cancellation: CancellationToken,
    ) -> TResult:
        pass


# === Dispatch entry points ===


@runtime_checkable
class IRequestDispatcher(Protocol):
    """Protocol for objects that resolve and run the pipeline for a request."""

    @overload
    async def send(
        self,
        request: Command,
        cancellation: CancellationToken | None = None,
    ) -> None: ...

    @overload
    async def send(
        self,
        request: Query[TResult],
        cancellation: CancellationToken | None = None,
        *,
        result_type: type[TResult] | None = None,
    ) -> TResult: ...

    async def send(
        self,
        request: Request,
        cancellation: CancellationToken | None = None,
        *,
        result_type: Any = None,
    ) -> Any: ...


@runtime_checkable
class ISender(Protocol):
    """Protocol callers depend on to send requests."""

    @overload
    async def send(
        self,
        request: Command,
        cancellation: CancellationToken | None = None,
    ) -> None: ...

    @overload
    async def send(
        self,
        request: Query[TResult],
        cancellation: CancellationToken | None = None,
        *,
        result_type: type[TResult] | None = None,
    ) -> TResult: ...

    async def send(
        self,
        request: Request,
        cancellation: CancellationToken | None = None,
        *,
        result_type: Any = None,
    ) -> Any: ...
