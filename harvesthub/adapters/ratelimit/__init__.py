"""Rate limiter adapters."""

from .memory import SlidingWindowRateLimiter

__all__ = ["SlidingWindowRateLimiter"]
