"""
Remote level lookup (AREDL) and the fetch coordinator that fronts it with the cache.
"""
from .base import RemoteResponse, FetchFn
from .http_retry import get_with_retries
from .aredl import fetch_level, level_url, make_fetch_fn
from .coordinator import FetchCoordinator

__all__ = [
    "RemoteResponse",
    "FetchFn",
    "get_with_retries",
    "fetch_level",
    "level_url",
    "make_fetch_fn",
    "FetchCoordinator",
]
