"""
Fetch coordination: cache check, one in-flight remote call per key, parse, store, persist, notify.

resolve() never blocks on the network. Each key with a fetch in flight gets its
own daemon thread, so a slow key never queues behind another one. Observers
are called on that thread (or synchronously on a cache hit). Callers that own
a single-threaded context must hand the outcome back to it themselves; the
returned Future is the handoff.

Outcomes:
  FOUND       : positive record (cached or freshly fetched)
  NOT_FOUND   : negative record; non-2xx status, transport error, or no submissions
  UNAVAILABLE : 2xx body that was not a JSON object; cache left untouched

A fetch_fn that never returns keeps its key in flight forever and every later
resolve() for that key waits on it. fetch_fn owns its own timeout.
"""
import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, Dict, Hashable, List, Optional, Set, Tuple

from verifier_core.cache.cache_file import CacheFile
from verifier_core.cache.store import CacheStore
from verifier_core.external_apis.base import FetchFn, RemoteResponse
from verifier_core.models.verifier_record import ResolveOutcome, VerifierRecord
from verifier_core.parsing.record_parser import RecordParseError, parse_record

logger = logging.getLogger(__name__)

Observer = Callable[[ResolveOutcome], None]
_Waiter = Tuple[Future, Optional[Observer]]


class FetchCoordinator:
    def __init__(
        self,
        store: CacheStore,
        cache_file: Optional[CacheFile] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._cache_file = cache_file
        self._clock = clock
        self._lock = threading.Lock()
        # key -> waiters still to be notified; presence of the key means a fetch is in flight
        self._in_flight: Dict[Hashable, List[_Waiter]] = {}
        self._threads: Set[threading.Thread] = set()
        self._closed = False
        self._persist_lock = threading.Lock()

    def resolve(
        self,
        key: Hashable,
        fetch_fn: FetchFn,
        on_complete: Optional[Observer] = None,
    ) -> "Future[ResolveOutcome]":
        """
        Resolve key from cache or remote. on_complete gets the outcome exactly once;
        the returned Future completes with the same outcome.
        Raises RuntimeError if a new fetch is needed after shutdown().
        """
        waiter: _Waiter = (Future(), on_complete)

        cached = self._store.lookup(key)
        if cached is None:
            with self._lock:
                waiters = self._in_flight.get(key)
                if waiters is not None:
                    waiters.append(waiter)
                    logger.info("FETCH_JOIN key=%s waiters=%d", key, len(waiters))
                    return waiter[0]
                # A fetch may have finished between the lookup above and taking the lock.
                cached = self._store.lookup(key)
                if cached is None:
                    if self._closed:
                        raise RuntimeError("cannot start a fetch after shutdown")
                    thread = threading.Thread(
                        target=self._run_fetch,
                        args=(key, fetch_fn),
                        name=f"verifier-fetch-{key}",
                        daemon=True,
                    )
                    self._in_flight[key] = [waiter]
                    self._threads.add(thread)
                    try:
                        thread.start()
                    except RuntimeError:
                        del self._in_flight[key]
                        self._threads.discard(thread)
                        raise
                    logger.info("FETCH_START key=%s", key)
                    return waiter[0]

        logger.debug("CACHE_HIT key=%s names=%d", key, len(cached.names))
        outcome = ResolveOutcome.from_record(cached)
        self._call_observers(key, [waiter], outcome)
        waiter[0].set_result(outcome)
        return waiter[0]

    def clear_cache(self) -> None:
        """
        Drop every entry and delete the durable copy. Shares the persist lock so a
        save already under way cannot write pre-clear entries back afterwards.
        Fetches still in flight may repopulate the cache when they complete.
        """
        with self._persist_lock:
            self._store.clear()
            if self._cache_file is None:
                return
            try:
                self._cache_file.delete()
            except OSError as e:
                logger.error("CACHE_DELETE failed path=%s: %s", self._cache_file.path, e)

    def pending_keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._in_flight)

    def shutdown(self, wait: bool = True) -> None:
        """Refuse new fetches; with wait, block until running fetches have notified their waiters."""
        with self._lock:
            self._closed = True
            threads = list(self._threads)
        if wait:
            for thread in threads:
                # an observer may shut down from inside its own fetch thread
                if thread is not threading.current_thread():
                    thread.join()

    def __enter__(self) -> "FetchCoordinator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def _run_fetch(self, key: Hashable, fetch_fn: FetchFn) -> None:
        try:
            try:
                outcome = self._complete_fetch(key, fetch_fn)
            except Exception:
                logger.exception("FETCH_ERROR unexpected failure key=%s", key)
                outcome = ResolveOutcome.unavailable()
            self._drain(key, outcome)
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())

    def _complete_fetch(self, key: Hashable, fetch_fn: FetchFn) -> ResolveOutcome:
        try:
            response = fetch_fn()
        except Exception as e:
            logger.warning("FETCH_FAILED key=%s error=%s: %s", key, type(e).__name__, e)
            response = RemoteResponse(None, None, f"{type(e).__name__}: {e}")

        if response is None or not response.ok:
            record = VerifierRecord.negative(key, fetched_at=self._clock())
            logger.info(
                "FETCH_NOT_FOUND key=%s status=%s error=%s",
                key,
                getattr(response, "status_code", None),
                getattr(response, "error", "") or "-",
            )
        else:
            try:
                record = parse_record(response.body, key, fetched_at=self._clock())
            except RecordParseError as e:
                logger.warning("FETCH_UNAVAILABLE key=%s error=%s", key, e)
                return ResolveOutcome.unavailable()
            logger.info(
                "FETCH_RESOLVED key=%s names=%s proof=%s legacy=%s",
                key, list(record.names), bool(record.proof_url), record.legacy,
            )

        self._store.store(key, record)
        self._persist()
        return ResolveOutcome.from_record(record)

    def _persist(self) -> None:
        """Best-effort save; snapshot and write are serialized so the newest snapshot lands last."""
        if self._cache_file is None:
            return
        with self._persist_lock:
            try:
                self._cache_file.save(self._store.snapshot())
            except OSError as e:
                logger.error("CACHE_SAVE failed path=%s: %s", self._cache_file.path, e)

    def _drain(self, key: Hashable, outcome: ResolveOutcome) -> None:
        # Observers that join while others are being notified are picked up by the next pass.
        # Futures complete only once the in-flight marker is gone.
        futures: List[Future] = []
        while True:
            with self._lock:
                waiters = self._in_flight.get(key) or []
                if not waiters:
                    self._in_flight.pop(key, None)
                    break
                self._in_flight[key] = []
            self._call_observers(key, waiters, outcome)
            futures.extend(future for future, _ in waiters)
        for future in futures:
            future.set_result(outcome)

    @staticmethod
    def _call_observers(key: Hashable, waiters: List[_Waiter], outcome: ResolveOutcome) -> None:
        for _, on_complete in waiters:
            if on_complete is None:
                continue
            try:
                on_complete(outcome)
            except Exception:
                logger.exception("OBSERVER_ERROR key=%s", key)
