"""Cancellation token shared between a retry invocation and its canceller.

The engine checks the token before every attempt and before every
operation, and waits on it between attempts so a backoff ends as soon as
the token is cancelled. Operations that are already running are not
interrupted.

Example:
    >>> token = CancelToken(timeout=5.0)   # cancels itself with DeadlineExceeded
    >>> err = execute_with_cancel(poll_job, Retry(attempts=100, delay=0.5), token)
    >>> isinstance(err, DeadlineExceeded)
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from retrykit.foundation.errors import Cancelled, DeadlineExceeded

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("retrykit.concurrency")

Callback = Callable[[], None]


@dataclass(slots=True)
class CancelToken:
    """Thread-safe, idempotent cancellation signal.

    The first cancel() wins: its reason is kept and later calls are no-ops.
    Used as a context manager it cancels itself on exit, which also stops
    a pending timeout timer.

    Attributes:
        timeout: Optional seconds after which the token cancels itself
            with DeadlineExceeded
    """

    timeout: float | None = None
    _event: threading.Event = field(default_factory=threading.Event, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _reason: BaseException | None = field(default=None, repr=False)
    _callbacks: list[Callback] = field(default_factory=list, repr=False)
    _timer: threading.Timer | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.timeout is not None:
            self._timer = threading.Timer(self.timeout, self.cancel, args=(DeadlineExceeded(),))
            self._timer.daemon = True
            self._timer.start()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    @property
    def reason(self) -> BaseException | None:
        """Reason passed to the winning cancel() call, None until cancelled."""
        return self._reason

    def cancel(self, reason: BaseException | None = None) -> bool:
        """Cancel the token.

        Args:
            reason: Error surfaced by the engine (default: Cancelled())

        Returns:
            True if this call cancelled the token, False if it already was
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason if reason is not None else Cancelled()
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        if self._timer is not None:
            self._timer.cancel()
        logger.debug(f"Token cancelled: {self._reason}")
        for cb in callbacks:
            try:
                cb()
            except Exception:
                logger.exception(f"Cancel callback {cb!r} failed")
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout elapses. Returns whether cancelled."""
        return self._event.wait(timeout)

    async def wait_async(self, timeout: float | None = None) -> bool:
        """Sleep until cancelled or timeout elapses without blocking the loop."""
        if self._event.is_set():
            return True
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[None] = loop.create_future()

        def wake() -> None:
            loop.call_soon_threadsafe(lambda: fut.done() or fut.set_result(None))

        self.add_callback(wake)
        try:
            await asyncio.wait({fut}, timeout=timeout)
        finally:
            self.remove_callback(wake)
            fut.cancel()
        return self._event.is_set()

    def add_callback(self, fn: Callback) -> None:
        """Register fn to run once on cancel; runs immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(fn)
                return
        fn()

    def remove_callback(self, fn: Callback) -> None:
        with self._lock:
            if fn in self._callbacks:
                self._callbacks.remove(fn)

    def __enter__(self) -> CancelToken:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cancel()
