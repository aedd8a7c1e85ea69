"""Cancellation primitives for the retry engine."""

from .cancel import CancelToken

__all__ = ["CancelToken"]
