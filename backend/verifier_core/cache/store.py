"""
Thread-safe in-memory verifier cache.
  • Any number of concurrent lookups; one writer at a time
  • Negative entries (no names) expire after negative_ttl seconds, checked at read time
  • Positive entries never expire; only clear() removes them
  • Never touches disk or network; persistence is the caller's follow-up step
"""
import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Hashable, Iterator, Mapping, Optional

from verifier_core.models.verifier_record import VerifierRecord

logger = logging.getLogger(__name__)

NEGATIVE_TTL_SECONDS = 30 * 60


class ReadWriteLock:
    """Shared/exclusive lock. Waiting writers block new readers so they cannot starve."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CacheStore:
    """Map of lookup key -> VerifierRecord with expiry-aware reads."""

    def __init__(
        self,
        negative_ttl: float = NEGATIVE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._entries: Dict[Hashable, VerifierRecord] = {}
        self._lock = ReadWriteLock()
        self._negative_ttl = negative_ttl
        self._clock = clock

    @property
    def negative_ttl(self) -> float:
        return self._negative_ttl

    def _is_expired(self, record: VerifierRecord, now: float) -> bool:
        if not record.is_negative:
            return False
        return now - record.fetched_at > self._negative_ttl

    def lookup(self, key: Hashable) -> Optional[VerifierRecord]:
        """Stored record if present and fresh, else None. Expired entries stay stored."""
        with self._lock.read():
            record = self._entries.get(key)
        if record is None:
            return None
        if self._is_expired(record, self._clock()):
            logger.debug("CACHE_EXPIRED key=%s fetched_at=%s", key, int(record.fetched_at))
            return None
        return record

    def store(self, key: Hashable, record: VerifierRecord) -> None:
        with self._lock.write():
            self._entries[key] = record
        logger.debug("CACHE_STORE key=%s names=%d", key, len(record.names))

    def snapshot(self) -> Dict[Hashable, VerifierRecord]:
        """Consistent copy of every entry, expired ones included."""
        with self._lock.read():
            return dict(self._entries)

    def replace_all(self, records: Mapping[Hashable, VerifierRecord]) -> None:
        """Swap in a full set of records (startup load from the cache file)."""
        with self._lock.write():
            self._entries = dict(records)
        logger.info("CACHE_REPLACE entries=%d", len(records))

    def clear(self) -> None:
        with self._lock.write():
            count = len(self._entries)
            self._entries = {}
        logger.info("CACHE_CLEAR removed=%d", count)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
