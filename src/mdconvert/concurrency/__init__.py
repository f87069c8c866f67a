"""Concurrency helpers for mdconvert."""

from .manager import ConcurrencyManager

__all__ = ["ConcurrencyManager"]
