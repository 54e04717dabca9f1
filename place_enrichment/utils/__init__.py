"""Shared utilities."""

from .cache import ExpiringBoundedCache

__all__ = ["ExpiringBoundedCache"]
