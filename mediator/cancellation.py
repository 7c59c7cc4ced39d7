"""Cooperative cancellation signal threaded through a dispatch chain.

The dispatcher never inspects the token; it forwards the same instance to every
behavior and to the handler. Honouring it is up to the code that receives it.
"""

import asyncio
import threading
from collections.abc import Callable

import structlog

from .exceptions import OperationCancelledError


logger = structlog.get_logger(__name__)


class CancellationToken:
    """A one-shot cancellation signal.

    Once cancelled, a token stays cancelled. Callbacks registered with
    :meth:`register` run exactly once, on the thread that calls :meth:`cancel`
    (or immediately if the token is already cancelled). Registration and
    cancellation may happen on different threads.
    """

    _NONE: "CancellationToken | None" = None

    def __init__(self, *, can_be_cancelled: bool = True) -> None:
        self._cancelled = False
        self._can_be_cancelled = can_be_cancelled
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return the shared token that is never cancelled."""
        if cls._NONE is None:
            cls._NONE = cls(can_be_cancelled=False)
        return cls._NONE

    @property
    def can_be_cancelled(self) -> bool:
        return self._can_be_cancelled

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def callback_count(self) -> int:
        """Number of callbacks still waiting for cancellation."""
        with self._lock:
            return len(self._callbacks)

    def cancel(self) -> None:
        """Signal cancellation and run registered callbacks."""
        if not self._can_be_cancelled:
            raise RuntimeError("This cancellation token cannot be cancelled")

        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []

        logger.debug("cancellation_requested", callback_count=len(callbacks))
        for callback in callbacks:
            callback()

    def register(self, callback: Callable[[], None]) -> bool:
        """Run ``callback`` when the token is cancelled.

        Returns:
            True if the callback was stored and may later be passed to
            :meth:`unregister`, False if it already ran or never will
        """
        with self._lock:
            if not self._cancelled:
                if not self._can_be_cancelled:
                    return False
                self._callbacks.append(callback)
                return True

        callback()
        return False

    def unregister(self, callback: Callable[[], None]) -> bool:
        """Drop a callback that has not run yet.

        Returns:
            True if the callback was removed
        """
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def raise_if_cancelled(self) -> None:
        """Raise :class:`OperationCancelledError` if cancellation was requested."""
        if self._cancelled:
            raise OperationCancelledError()

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        if self._cancelled:
            return

        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def _resolve() -> None:
            if not waiter.done():
                waiter.set_result(None)

        def _on_cancel() -> None:
            loop.call_soon_threadsafe(_resolve)

        if not self.register(_on_cancel):
            # Cancelled already (resolution scheduled) or never cancellable
            await waiter
            return

        try:
            await waiter
        finally:
            self.unregister(_on_cancel)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        if not self._can_be_cancelled:
            state = "none"
        return f"<CancellationToken {state}>"


__all__ = ["CancellationToken"]
