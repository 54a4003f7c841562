"""
Verifier cache: in-memory store with expiry-aware reads, and its durable JSON copy.
"""
from .store import CacheStore, ReadWriteLock, NEGATIVE_TTL_SECONDS
from .cache_file import CacheFile, CACHE_FILENAME, LEGACY_CACHE_FILENAME, load_legacy_text

__all__ = [
    "CacheStore",
    "ReadWriteLock",
    "NEGATIVE_TTL_SECONDS",
    "CacheFile",
    "CACHE_FILENAME",
    "LEGACY_CACHE_FILENAME",
    "load_legacy_text",
]
