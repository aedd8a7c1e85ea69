"""Error types for retrykit.

- StopRetry: Stop retrying and return the wrapped error
- PanicError: An operation raised instead of returning
- Cancelled/DeadlineExceeded: CancelToken reasons
- iter_chain/find_stop/unwrap_stop/caused_by: Cause-chain inspection
"""

from .errors import (
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

__all__ = [
    # Error types
    "RetryError", "StopRetry", "PanicError", "Cancelled", "DeadlineExceeded", "PANIC_MARKER",
    # Chain helpers
    "iter_chain", "find_stop", "unwrap_stop", "caused_by",
]
