"""Tests for delay methods."""

from __future__ import annotations

import random

import pytest

from retrykit import ExponentialDelay, IncrementalDelay, constant_delay, get_method, incremental_delay
from retrykit.runtime.retry import DelayMethod


class FixedRandom(random.Random):
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


def test_constant_ignores_attempt() -> None:
    assert [constant_delay(i, 0.25) for i in range(1, 5)] == [0.25] * 4
    assert constant_delay(3, 0.0) == 0.0


def test_incremental_zero_delay_is_zero() -> None:
    for cap in (0.001, 1.0, 100.0):
        method = IncrementalDelay(max_delay=cap)
        assert all(method(i, 0.0) == 0.0 for i in range(1, 20))


def test_incremental_bounds_grow_linearly() -> None:
    method = IncrementalDelay(max_delay=1.0, rng=random.Random(7))
    delay = 0.1
    for attempt in range(1, 20):
        wait = method(attempt, delay)
        assert delay * attempt <= wait < delay * attempt + delay / 2


def test_incremental_clamps_to_cap() -> None:
    method = IncrementalDelay(max_delay=0.3, rng=random.Random(1))
    for attempt in range(1, 10):
        wait = method(attempt, 10.0)
        assert 0.3 * attempt <= wait < 0.3 * attempt + 0.15


def test_incremental_jitter_is_half_range() -> None:
    assert IncrementalDelay(rng=FixedRandom(0.0))(2, 0.4) == pytest.approx(0.8)
    assert IncrementalDelay(rng=FixedRandom(0.5))(2, 0.4) == pytest.approx(0.9)
    assert IncrementalDelay(rng=FixedRandom(0.999))(2, 0.4) < 1.0


def test_incremental_seeded_rng_is_deterministic() -> None:
    a = IncrementalDelay(rng=random.Random(42))
    b = IncrementalDelay(rng=random.Random(42))
    assert [a(i, 0.5) for i in range(1, 6)] == [b(i, 0.5) for i in range(1, 6)]


def test_default_incremental_caps_at_one_second() -> None:
    assert incremental_delay.max_delay == 1.0
    assert 2.0 <= incremental_delay(2, 10.0) < 2.5


def test_exponential_without_jitter() -> None:
    method = ExponentialDelay(max_delay=0.5, jitter=False)
    waits = [method(i, 0.1) for i in range(1, 6)]
    assert waits == pytest.approx([0.1, 0.2, 0.4, 0.5, 0.5])
    assert method(3, 0.0) == 0.0


def test_exponential_jitter_range() -> None:
    method = ExponentialDelay(rng=random.Random(3))
    for attempt in range(1, 6):
        base = 0.1 * 2 ** (attempt - 1)
        assert 0.5 * base <= method(attempt, 0.1) < 1.5 * base


def test_methods_satisfy_protocol() -> None:
    assert isinstance(constant_delay, DelayMethod)
    assert isinstance(IncrementalDelay(), DelayMethod)
    assert isinstance(ExponentialDelay(), DelayMethod)


def test_get_method_by_name() -> None:
    assert get_method("constant") is constant_delay
    inc = get_method("incremental", 2.0)
    assert isinstance(inc, IncrementalDelay) and inc.max_delay == 2.0
    exp = get_method("exponential")
    assert isinstance(exp, ExponentialDelay) and exp.max_delay == 30.0
    with pytest.raises(ValueError):
        get_method("fibonacci")  # type: ignore[arg-type]
