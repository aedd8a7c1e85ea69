"""Tests for environment configuration."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from retrykit import IncrementalDelay, Retry, clear_settings_cache, constant_delay, get_settings
from retrykit.foundation.config import RetrySettings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Reread the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults() -> None:
    settings = get_settings()
    assert settings.retry.attempts == 3
    assert settings.retry.method == "constant"
    assert settings.logging.level == "INFO"
    assert get_settings() is settings


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYKIT_RETRY_ATTEMPTS", "7")
    monkeypatch.setenv("RETRYKIT_RETRY_DELAY", "0.25")
    monkeypatch.setenv("RETRYKIT_RETRY_METHOD", "Incremental")
    monkeypatch.setenv("RETRYKIT_RETRY_METHOD_MAX_DELAY", "2.5")
    monkeypatch.setenv("RETRYKIT_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.retry.attempts == 7
    assert settings.retry.delay == 0.25
    assert settings.retry.method == "incremental"
    assert settings.logging.level == "DEBUG"

    r = Retry.from_settings()
    assert r.attempts == 7
    assert r.delay == 0.25
    assert isinstance(r.method, IncrementalDelay)
    assert r.method.max_delay == 2.5


def test_from_explicit_settings() -> None:
    r = Retry.from_settings(RetrySettings(attempts=2, delay=0.0, max_delay=1.0))
    assert r.attempts == 2
    assert r.max_delay == 1.0
    assert r.method is constant_delay


def test_invalid_method_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYKIT_RETRY_METHOD", "fibonacci")
    with pytest.raises(ValueError):
        get_settings()
