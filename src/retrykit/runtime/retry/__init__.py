"""Retry engine with pluggable delay methods.

Example:
    >>> from retrykit.runtime.retry import Retry, IncrementalDelay, StopRetry
    >>>
    >>> def fetch() -> Exception | None:
    ...     resp = session.get(url)
    ...     if resp.status_code == 404:
    ...         return StopRetry(LookupError(url))
    ...     return None if resp.ok else ConnectionError(resp.status_code)
    >>>
    >>> err = Retry(attempts=5, delay=0.2, method=IncrementalDelay()).do(fetch)
"""

from retrykit.foundation.errors import StopRetry

from .backoff import (
    DelayMethod,
    ExponentialDelay,
    IncrementalDelay,
    MethodName,
    constant_delay,
    get_method,
    incremental_delay,
)
from .policy import (
    AsyncOperation,
    Operation,
    Retry,
    execute,
    execute_async,
    execute_with_cancel,
)

__all__ = [
    # Delay methods
    "DelayMethod",
    "constant_delay",
    "incremental_delay",
    "IncrementalDelay",
    "ExponentialDelay",
    "MethodName",
    "get_method",
    # Configuration
    "Retry",
    "Operation",
    "AsyncOperation",
    "StopRetry",
    # Execution
    "execute",
    "execute_with_cancel",
    "execute_async",
]
