"""Retry configuration and the attempt loop.

An invocation runs a group of operations once per attempt until the group
succeeds, an operation asks to stop, the CancelToken is cancelled, or the
attempt budget runs out. Failures are exception instances returned by the
operations; anything an operation raises is captured as a PanicError and
retried like an ordinary failure.

Outcomes (the single return value):
- None: the group succeeded
- last failure: every attempt failed
- unwrapped StopRetry error: an operation returned or raised StopRetry
- token.reason: the token was cancelled
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, Callable, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat

from retrykit.foundation.errors import PanicError, find_stop, unwrap_stop
from retrykit.runtime.concurrency import CancelToken

from .backoff import DelayMethod, constant_delay, get_method

if TYPE_CHECKING:
    from retrykit.foundation.config import RetrySettings


logger = logging.getLogger("retrykit.retry")

Operation = Callable[[], object]
AsyncOperation = Callable[[], Union[Awaitable[object], object]]

# Raised objects that are never converted into PanicError
_PASSTHROUGH: tuple[type[BaseException], ...] = (KeyboardInterrupt, SystemExit, GeneratorExit, asyncio.CancelledError)


class Retry(BaseModel):
    """Retry configuration.

    The zero value does nothing: with ``attempts <= 0`` no operation is
    invoked and the result is None. Instances are frozen and safe to share
    between concurrent invocations.

    Attributes:
        attempts: Attempt budget
        delay: Base delay in seconds handed to the delay method (0 = no wait)
        max_delay: Ceiling applied to whatever the delay method returns
        method: Delay method (default: constant_delay)

    Example:
        >>> r = Retry(attempts=5, delay=0.2, method=IncrementalDelay(max_delay=1.0))
        >>> err = r.do(connect, authenticate)
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Retry",
            "description": "Attempt budget and backoff for retried operations",
            "examples": [{"attempts": 3, "delay": 0.5, "max_delay": 5.0}],
        },
    )

    attempts: int = 0
    delay: NonNegativeFloat = 0.0
    max_delay: NonNegativeFloat | None = None
    method: DelayMethod | None = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_settings(cls, settings: RetrySettings | None = None) -> Retry:
        """Build from environment settings (RETRYKIT_RETRY_*)."""
        if settings is None:
            from retrykit.foundation.config import get_settings
            settings = get_settings().retry
        return cls(
            attempts=settings.attempts,
            delay=settings.delay,
            max_delay=settings.max_delay,
            method=get_method(settings.method, settings.method_max_delay),
        )

    def get_delay(self, attempt: int) -> float:
        """Wait before the attempt following ``attempt``, never negative."""
        wait = (self.method or constant_delay)(attempt, self.delay)
        if wait < 0:
            logger.warning(f"Delay method returned negative wait {wait!r} for attempt {attempt}; using 0")
            wait = 0.0
        return wait if self.max_delay is None else min(wait, self.max_delay)

    def do(self, *operations: Operation, cancel: CancelToken | None = None) -> BaseException | None:
        """Run operations as one group per attempt. See execute_with_cancel."""
        if cancel is None:
            return execute(operations, self)
        return execute_with_cancel(operations, self, cancel)

    async def ado(self, *operations: AsyncOperation, cancel: CancelToken | None = None) -> BaseException | None:
        """Async counterpart of do()."""
        return await execute_async(operations, self, cancel)


def _as_group(operations: Operation | Sequence[Operation]) -> tuple[Operation, ...]:
    group = (operations,) if callable(operations) else tuple(operations)
    if not group:
        raise ValueError("at least one operation is required")
    return group


def _failure(result: object) -> BaseException | None:
    return result if isinstance(result, BaseException) else None


def _capture(op: Callable[..., object], fault: BaseException) -> PanicError:
    logger.warning(f"Operation {getattr(op, '__qualname__', op)!r} raised {fault!r}")
    return PanicError.capture(fault)


def _run_group(group: tuple[Operation, ...], token: CancelToken) -> BaseException | None:
    for op in group:
        if token.cancelled:
            return token.reason
        try:
            err = _failure(_sync_result(op, op()))
        except _PASSTHROUGH:
            raise
        except BaseException as fault:
            err = _capture(op, fault)
        if err is not None:
            return err
    return None


def _sync_result(op: Operation, result: object) -> object:
    """Reject awaitables handed to the sync engine; their body would never run."""
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError(f"{getattr(op, '__qualname__', op)!r} returned an awaitable; use execute_async or Retry.ado")
    return result


def _terminal(err: BaseException, token: CancelToken) -> tuple[bool, BaseException | None]:
    """Classify a failed attempt: (stop now, result to return)."""
    if (stop := find_stop(err)) is not None:
        logger.debug(f"Stopped by {stop!r}")
        return True, unwrap_stop(stop)
    if token.cancelled and err is token.reason:
        return True, err
    return False, err


def execute(operations: Operation | Sequence[Operation], retry: Retry) -> BaseException | None:
    """Execute operations with retry, using a token owned by this call.

    Args:
        operations: One callable or a non-empty sequence run in order per attempt
        retry: Retry configuration

    Returns:
        None on success, otherwise the error for the outcome
    """
    with CancelToken() as token:
        return execute_with_cancel(operations, retry, token)


def execute_with_cancel(
    operations: Operation | Sequence[Operation],
    retry: Retry,
    token: CancelToken,
) -> BaseException | None:
    """Execute operations with retry until success, stop, cancellation or exhaustion.

    The token is checked before each attempt and each operation, and the
    backoff wait returns early when it is cancelled.
    """
    group = _as_group(operations)
    err: BaseException | None = None

    for attempt in range(1, retry.attempts + 1):
        if token.cancelled:
            return token.reason
        if (err := _run_group(group, token)) is None:
            return None
        done, result = _terminal(err, token)
        if done:
            return result
        if attempt == retry.attempts:
            break

        delay = retry.get_delay(attempt)
        logger.info(f"Retry {attempt + 1}/{retry.attempts} after {delay:.3f}s ({type(err).__name__})")
        token.wait(delay)

    return err


# ─────────────────────────────────────────────────────────────────────────────
# Async
# ─────────────────────────────────────────────────────────────────────────────


async def _run_group_async(group: tuple[AsyncOperation, ...], token: CancelToken) -> BaseException | None:
    for op in group:
        if token.cancelled:
            return token.reason
        try:
            result = op()
            if inspect.isawaitable(result):
                result = await result
            err = _failure(result)
        except _PASSTHROUGH:
            raise
        except BaseException as fault:
            err = _capture(op, fault)
        if err is not None:
            return err
    return None


async def execute_async(
    operations: AsyncOperation | Sequence[AsyncOperation],
    retry: Retry,
    token: CancelToken | None = None,
) -> BaseException | None:
    """Async version of execute_with_cancel.

    Operations may be coroutine functions or plain callables. Backoff waits
    do not block the event loop, and cancelling the surrounding task
    propagates asyncio.CancelledError as usual.
    """
    group = _as_group(operations)
    if token is None:
        token = CancelToken()
    err: BaseException | None = None

    for attempt in range(1, retry.attempts + 1):
        if token.cancelled:
            return token.reason
        if (err := await _run_group_async(group, token)) is None:
            return None
        done, result = _terminal(err, token)
        if done:
            return result
        if attempt == retry.attempts:
            break

        delay = retry.get_delay(attempt)
        logger.info(f"Retry {attempt + 1}/{retry.attempts} after {delay:.3f}s ({type(err).__name__})")
        await token.wait_async(delay)

    return err
