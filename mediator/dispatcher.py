"""Request dispatcher.

Resolves the handler and the pipeline behaviors registered for the runtime
type of a request, composes them into a single chain and runs it. The first
behavior the provider returns is the outermost one; the handler is innermost.
"""

import inspect
import time
from functools import lru_cache
from typing import Any, NamedTuple, TypeVar, overload

import structlog

from .cancellation import CancellationToken
from .config.settings import DispatchSettings
from .contracts import (
    Command,
    CommandBehavior,
    CommandHandler,
    Query,
    QueryBehavior,
    QueryHandler,
    Request,
    RequestDelegate,
    resolve_result_type,
)
from .exceptions import InvalidArgumentError, InvalidPipelineStateError
from .services.provider import IServiceProvider, get_required_service, get_services


__all__ = ["RequestDispatcher"]


logger = structlog.get_logger(__name__)

TResult = TypeVar("TResult")


class _Descriptors(NamedTuple):
    """Service descriptors for one request type."""

    handler: Any
    behavior: Any


@lru_cache(maxsize=None)
def _command_descriptors(request_type: type) -> _Descriptors:
    return _Descriptors(
        handler=CommandHandler[request_type],  # type: ignore[valid-type]
        behavior=CommandBehavior[request_type],  # type: ignore[valid-type]
    )


@lru_cache(maxsize=None)
def _declared_result_type(request_type: type) -> Any:
    return resolve_result_type(request_type)


@lru_cache(maxsize=None)
def _query_descriptors(request_type: type, result_type: Any) -> _Descriptors:
    return _Descriptors(
        handler=QueryHandler[request_type, result_type],  # type: ignore[valid-type]
        behavior=QueryBehavior[request_type, result_type],  # type: ignore[valid-type]
    )


async def _resolve(result: Any) -> Any:
    # Sync handlers and behaviors return plain values
    if inspect.isawaitable(result):
        return await result
    return result


def _wrap(
    behavior: Any,
    request: Request,
    call_next: RequestDelegate[Any],
    cancellation: CancellationToken,
) -> RequestDelegate[Any]:
    """Bind ``behavior`` around ``call_next``.

    Kept outside the build loop so each closure captures its own behavior
    and continuation.
    """

    async def _invoke() -> Any:
        return await _resolve(behavior.handle(request, call_next, cancellation))

    return _invoke


class RequestDispatcher:
    """Dispatches commands and queries through their pipeline to a handler.

    The dispatcher keeps no per-call state and may be shared between
    concurrent callers.
    """

    def __init__(
        self,
        provider: IServiceProvider,
        settings: DispatchSettings | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            provider: Service provider handlers and behaviors are resolved from
            settings: Optional dispatch settings, defaults are used when omitted
        """
        if provider is None:
            raise InvalidArgumentError("provider")

        self._provider = provider
        self._settings = settings or DispatchSettings()

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
        """Send a request to its handler through the registered behaviors.

        Args:
            request: Command or query to dispatch
            cancellation: Token forwarded to every behavior and the handler
            result_type: Query result type, inferred from ``Query[R]`` when omitted

        Returns:
            None for commands, the handler's (possibly behavior-transformed)
            result for queries

        Raises:
            InvalidArgumentError: If the request is None or not a Command/Query
            ServiceNotRegisteredError: If no handler is registered
            InvalidPipelineStateError: If the provider returned a None behavior
        """
        if request is None:
            raise InvalidArgumentError("request")

        token = cancellation if cancellation is not None else CancellationToken.none()

        if isinstance(request, Query):
            return await self._send_query(request, token, result_type)

        if isinstance(request, Command):
            if result_type is not None:
                raise InvalidArgumentError(
                    "result_type", "result_type is only valid when sending a query"
                )
            await self._send_command(request, token)
            return None

        raise InvalidArgumentError(
            "request",
            f"{type(request).__qualname__} is neither a Command nor a Query",
        )

    async def _send_command(
        self, request: Command, cancellation: CancellationToken
    ) -> None:
        request_type = type(request)
        descriptors = _command_descriptors(request_type)
        await self._run_pipeline(request, descriptors, cancellation, None)

    async def _send_query(
        self,
        request: Query[TResult],
        cancellation: CancellationToken,
        result_type: Any,
    ) -> TResult:
        request_type = type(request)
        if result_type is None:
            result_type = _declared_result_type(request_type)

        descriptors = _query_descriptors(request_type, result_type)
        result: TResult = await self._run_pipeline(
            request, descriptors, cancellation, result_type
        )
        return result

    async def _run_pipeline(
        self,
        request: Request,
        descriptors: _Descriptors,
        cancellation: CancellationToken,
        result_type: Any,
    ) -> Any:
        request_type = type(request)
        handler = get_required_service(self._provider, descriptors.handler)
        behaviors = get_services(self._provider, descriptors.behavior)

        async def _invoke_handler() -> Any:
            return await _resolve(handler.handle(request, cancellation))

        pipeline: RequestDelegate[Any] = _invoke_handler
        for index in range(len(behaviors) - 1, -1, -1):
            behavior = behaviors[index]
            if behavior is None:
                raise InvalidPipelineStateError(request_type, index)
            pipeline = _wrap(behavior, request, pipeline, cancellation)

        if not self._settings.log_requests:
            return await pipeline()

        logger.debug(
            "request_dispatching",
            request_type=request_type.__qualname__,
            result_type=getattr(result_type, "__qualname__", repr(result_type))
            if result_type is not None
            else None,
            behavior_count=len(behaviors),
        )
        start = time.perf_counter()
        result = await pipeline()
        logger.debug(
            "request_dispatched",
            request_type=request_type.__qualname__,
            duration_ms=round((time.perf_counter() - start) * 1000, 3),
        )
        return result
