"""retrykit: run operations until they succeed, stop, get cancelled or run out of attempts.

Operations are zero-argument callables. Returning None means success,
returning an exception instance is a retryable failure, and raising is
captured as a PanicError and retried too. Returning (or raising)
StopRetry(err) ends the loop with err.

Example:
    >>> from retrykit import Retry, IncrementalDelay, StopRetry, CancelToken
    >>>
    >>> r = Retry(attempts=4, delay=0.1, method=IncrementalDelay(max_delay=0.5))
    >>> err = r.do(open_connection, send_handshake)
    >>>
    >>> # Give up after 10 seconds no matter how many attempts remain
    >>> with CancelToken(timeout=10.0) as token:
    ...     err = r.do(wait_for_replica, cancel=token)
"""

from retrykit.foundation.config import RetrykitSettings, clear_settings_cache, get_settings
from retrykit.foundation.errors import (
    PANIC_MARKER,
    Cancelled,
    DeadlineExceeded,
    PanicError,
    RetryError,
    StopRetry,
    caused_by,
    find_stop,
    iter_chain,
    unwrap_stop,
)
from retrykit.runtime.concurrency import CancelToken
from retrykit.runtime.observability import configure_logging, configure_logging_from_settings
from retrykit.runtime.retry import (
    AsyncOperation,
    DelayMethod,
    ExponentialDelay,
    IncrementalDelay,
    Operation,
    Retry,
    constant_delay,
    execute,
    execute_async,
    execute_with_cancel,
    get_method,
    incremental_delay,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "Retry",
    "Operation",
    "AsyncOperation",
    # Execution
    "execute",
    "execute_with_cancel",
    "execute_async",
    # Delay methods
    "DelayMethod",
    "constant_delay",
    "incremental_delay",
    "IncrementalDelay",
    "ExponentialDelay",
    "get_method",
    # Cancellation
    "CancelToken",
    # Errors
    "RetryError",
    "StopRetry",
    "PanicError",
    "Cancelled",
    "DeadlineExceeded",
    "PANIC_MARKER",
    "iter_chain",
    "find_stop",
    "unwrap_stop",
    "caused_by",
    # Settings & logging
    "RetrykitSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
    "configure_logging_from_settings",
]
