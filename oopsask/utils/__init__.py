"""Utility helpers for the translation service."""

from .rate_limit import RateLimiter

__all__ = ["RateLimiter"]
