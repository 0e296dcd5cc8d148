"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems
or holds shared mutable state:
- Tomorrow.io API client (HTTP)
- Rate limiter (process-wide API quota)
- Alert cache (process-wide memoization)
- Configuration loading (environment/files/Secret Manager)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.tomorrow_client import TomorrowClient
from src.shell.rate_limiter import RateLimiter
from src.shell.alert_cache import AlertCache
from src.shell.config_loader import load_config, Config

__all__ = [
    "TomorrowClient",
    "RateLimiter",
    "AlertCache",
    "load_config",
    "Config",
]
