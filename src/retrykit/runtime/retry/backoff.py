"""Delay methods for the retry engine.

A delay method maps the 1-based attempt number and the configured base
delay (seconds) to the time to wait before the next attempt:
- constant_delay: Base delay unchanged (default)
- IncrementalDelay: Linear growth with a cap and half-range jitter
- ExponentialDelay: Exponential growth with optional jitter

A base delay of zero always means "do not wait".
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable


@runtime_checkable
class DelayMethod(Protocol):
    """Protocol for delay calculation.

    Called synchronously between attempts, so implementations should be
    cheap and must not block.
    """

    def __call__(self, attempt: int, delay: float) -> float:
        """Calculate wait in seconds.

        Args:
            attempt: 1-based number of the attempt that just failed
            delay: Base delay from the Retry configuration

        Returns:
            Seconds to wait before the next attempt
        """
        ...


def constant_delay(attempt: int, delay: float) -> float:
    """Always wait the base delay."""
    return delay


@dataclass(frozen=True, slots=True)
class IncrementalDelay:
    """Linearly increasing delay with a cap and jitter.

    Wait = min(delay, max_delay) * attempt + jitter, where jitter is drawn
    uniformly from [0, min(delay, max_delay)) and halved. The jitter keeps
    concurrent retriers from waking up in lockstep.

    Attributes:
        max_delay: Cap applied to the base delay before scaling (default: 1.0)
        rng: Random source for jitter; inject a seeded one for determinism

    Example:
        >>> method = IncrementalDelay(max_delay=0.3)
        >>> 0.6 <= method(2, 0.5) < 0.75
        True
    """

    max_delay: float = 1.0
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def __call__(self, attempt: int, delay: float) -> float:
        if delay <= 0:
            return 0.0
        effective = min(delay, self.max_delay)
        return effective * attempt + self.rng.random() * effective / 2


@dataclass(frozen=True, slots=True)
class ExponentialDelay:
    """Exponential backoff with optional jitter.

    Wait = min(delay * multiplier ^ (attempt - 1), max_delay) * jitter

    Attributes:
        multiplier: Exponential growth factor (default: 2.0)
        max_delay: Maximum delay cap in seconds (default: 30.0)
        jitter: Scale by a random factor in [0.5, 1.5) (default: True)
        rng: Random source for jitter
    """

    multiplier: float = 2.0
    max_delay: float = 30.0
    jitter: bool = True
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def __call__(self, attempt: int, delay: float) -> float:
        if delay <= 0:
            return 0.0
        d = min(delay * (self.multiplier ** (attempt - 1)), self.max_delay)
        return d * (0.5 + self.rng.random()) if self.jitter else d


# Incremental delay capped at one second
incremental_delay = IncrementalDelay()

MethodName = Literal["constant", "incremental", "exponential"]


def get_method(name: MethodName, max_delay: float | None = None) -> DelayMethod:
    """Resolve a delay method by name, as used by environment settings.

    Args:
        name: "constant", "incremental" or "exponential"
        max_delay: Cap for incremental/exponential methods (their default if None)
    """
    match name:
        case "constant":
            return constant_delay
        case "incremental":
            return IncrementalDelay() if max_delay is None else IncrementalDelay(max_delay=max_delay)
        case "exponential":
            return ExponentialDelay() if max_delay is None else ExponentialDelay(max_delay=max_delay)
        case _:
            raise ValueError(f"Unknown delay method: {name}. Use 'constant', 'incremental', or 'exponential'")
