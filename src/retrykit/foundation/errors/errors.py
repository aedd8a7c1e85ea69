"""Error types and cause-chain helpers for the retry engine.

Failures travel as exception instances. Operations return them (ordinary
failure) or raise them (captured as PanicError). StopRetry asks the engine
to give up immediately; Cancelled is the reason a CancelToken carries.

Chains are followed through ``__cause__`` only, the explicit ``raise ... from``
link, so an error is "caused by" X when X appears anywhere along it.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterator
from typing import Self

# Fixed marker that prefixes every PanicError message
PANIC_MARKER = "operation raised an exception"


class RetryError(Exception):
    """Base class for errors produced by retrykit itself."""


class StopRetry(RetryError):
    """Stop retrying and return the wrapped error.

    The wrapped error may itself be a StopRetry; the engine unwraps every
    layer and returns the innermost error. A StopRetry wrapping ``None``
    stops the loop and reports success.

    Example:
        >>> def fetch() -> Exception | None:
        ...     if response.status == 404:
        ...         return StopRetry(NotFound(url))
        ...     return None if response.ok else TransientError(response.status)
    """

    __slots__ = ("err",)

    def __init__(self, err: BaseException | None = None) -> None:
        self.err = err
        super().__init__(err)
        self.__cause__ = err

    def __str__(self) -> str:
        return str(self.err) if self.err is not None else "retry stopped"

    def __repr__(self) -> str:
        return f"StopRetry({self.err!r})"


class PanicError(RetryError):
    """An operation raised instead of returning.

    Attributes:
        fault: The object that was raised
        stack: Formatted traceback captured at the raise site

    The original fault is kept as ``__cause__`` when it is an Exception, so
    ``caused_by(err, fault)`` holds. Other BaseException subclasses only
    contribute their text.
    """

    __slots__ = ("fault", "stack")

    def __init__(self, fault: BaseException, stack: str) -> None:
        self.fault = fault
        self.stack = stack
        super().__init__(f"{PANIC_MARKER}: {fault!r}\n{stack}")
        if isinstance(fault, Exception):
            self.__cause__ = fault

    def __reduce__(self) -> tuple[type[Self], tuple[BaseException, str]]:
        return type(self), (self.fault, self.stack)

    @classmethod
    def capture(cls, fault: BaseException) -> Self:
        """Build from a caught exception, formatting its traceback."""
        return cls(fault, "".join(traceback.format_exception(fault)))


class Cancelled(RetryError):
    """Default reason carried by a cancelled CancelToken."""

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class DeadlineExceeded(Cancelled):
    """Reason carried by a CancelToken whose timeout elapsed."""

    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)


# ─────────────────────────────────────────────────────────────────────────────
# Chain helpers
# ─────────────────────────────────────────────────────────────────────────────


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield err and each ``__cause__`` after it. Stops on cycles."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__


def find_stop(err: BaseException | None) -> StopRetry | None:
    """First StopRetry along the cause chain of err, if any."""
    return next((e for e in iter_chain(err) if isinstance(e, StopRetry)), None)


def unwrap_stop(err: BaseException | None) -> BaseException | None:
    """Peel nested StopRetry layers until a non-StopRetry error (or None)."""
    seen: set[int] = set()
    while isinstance(err, StopRetry) and id(err) not in seen:
        seen.add(id(err))
        err = err.err
    return err


def caused_by(err: BaseException | None, target: BaseException | type[BaseException]) -> bool:
    """Check whether target appears along the cause chain of err.

    Args:
        err: Error returned by the engine (or any exception)
        target: Exception instance (matched by identity or equality) or
            exception class (matched with isinstance)

    Example:
        >>> boom = ValueError("boom")
        >>> caused_by(StopRetry(StopRetry(boom)), boom)
        True
        >>> caused_by(PanicError.capture(boom), ValueError)
        True
    """
    if isinstance(target, type):
        return any(isinstance(e, target) for e in iter_chain(err))
    return any(e is target or e == target for e in iter_chain(err))
