"""Sender facade over a request dispatcher."""

from typing import Any, TypeVar, overload

from .cancellation import CancellationToken
from .contracts import Command, IRequestDispatcher, Query, Request
from .exceptions import InvalidArgumentError


__all__ = ["Sender"]


TResult = TypeVar("TResult")


class Sender:
    """Forwards requests to a dispatcher.

    Callers depend on :class:`~mediator.contracts.ISender` rather than on a
    concrete dispatcher, which keeps the dispatcher swappable in tests.
    """

    def __init__(self, dispatcher: IRequestDispatcher) -> None:
        if dispatcher is None:
            raise InvalidArgumentError("dispatcher")
        self._dispatcher = dispatcher

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
    ) -> Any:
        if result_type is None:
            return await self._dispatcher.send(request, cancellation)  # type: ignore[call-overload]
        return await self._dispatcher.send(
            request,  # type: ignore[arg-type]
            cancellation,
            result_type=result_type,
        )
