"""Tests for error types and cause-chain helpers."""

from __future__ import annotations

import pickle

from retrykit import (
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


def _raised(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:
        return caught


def test_stop_text_and_cause() -> None:
    inner = ValueError("bad input")
    stop = StopRetry(inner)
    assert str(stop) == "bad input"
    assert repr(stop) == "StopRetry(ValueError('bad input'))"
    assert stop.__cause__ is inner
    assert isinstance(stop, RetryError)
    assert str(StopRetry()) == "retry stopped"


def test_unwrap_nested_stops() -> None:
    inner = ValueError("x")
    assert unwrap_stop(StopRetry(StopRetry(StopRetry(inner)))) is inner
    assert unwrap_stop(StopRetry(StopRetry())) is None
    assert unwrap_stop(inner) is inner
    assert unwrap_stop(None) is None


def test_find_stop_through_panic() -> None:
    stop = StopRetry(ValueError("x"))
    panic = PanicError.capture(_raised(stop))
    assert find_stop(panic) is stop
    assert find_stop(PanicError.capture(_raised(ValueError("y")))) is None


def test_caused_by_instance_and_class() -> None:
    inner = KeyError("k")
    err = StopRetry(StopRetry(inner))
    assert caused_by(err, inner)
    assert caused_by(err, KeyError)
    assert caused_by(err, StopRetry)
    assert not caused_by(err, ValueError("k"))
    assert not caused_by(None, KeyError)


def test_iter_chain_stops_on_cycles() -> None:
    a, b = ValueError("a"), ValueError("b")
    a.__cause__ = b
    b.__cause__ = a
    assert list(iter_chain(a)) == [a, b]


def test_panic_error_text() -> None:
    fault = _raised(RuntimeError("kaboom"))
    err = PanicError.capture(fault)
    text = str(err)
    assert text.startswith(f"{PANIC_MARKER}: RuntimeError('kaboom')")
    assert "Traceback (most recent call last)" in text
    assert err.stack in text
    assert err.__cause__ is fault


def test_panic_error_pickles() -> None:
    err = PanicError.capture(_raised(RuntimeError("kaboom")))
    copy = pickle.loads(pickle.dumps(err))
    assert isinstance(copy, PanicError)
    assert str(copy) == str(err)
    assert copy.stack == err.stack
    assert repr(copy.fault) == "RuntimeError('kaboom')"
    assert copy.__cause__ is copy.fault


def test_cancel_reasons() -> None:
    assert str(Cancelled()) == "operation cancelled"
    assert str(DeadlineExceeded()) == "deadline exceeded"
    assert isinstance(DeadlineExceeded(), Cancelled)
