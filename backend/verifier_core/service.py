"""
Composition root: builds the cache, its durable file and the coordinator, and
exposes level lookups plus the administrative cache clear.
"""
import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Optional

from verifier_core import config
from verifier_core.cache.cache_file import (
    CACHE_FILENAME,
    LEGACY_CACHE_FILENAME,
    CacheFile,
    load_legacy_text,
)
from verifier_core.cache.store import CacheStore
from verifier_core.external_apis.aredl import make_fetch_fn
from verifier_core.external_apis.base import FetchFn
from verifier_core.external_apis.coordinator import FetchCoordinator, Observer
from verifier_core.models.level_key import LevelKey, Variant
from verifier_core.models.verifier_record import ResolveOutcome

logger = logging.getLogger(__name__)


class VerifierService:
    def __init__(self, store: CacheStore, cache_file: CacheFile, coordinator: FetchCoordinator):
        self.store = store
        self.cache_file = cache_file
        self.coordinator = coordinator

    def load(self, legacy_path: Optional[Path] = None) -> int:
        """
        Populate the store from the durable copy. When no JSON cache exists yet,
        import the older tab-separated file once and write it out as JSON.
        Returns the number of records loaded.
        """
        if self.cache_file.exists():
            records = self.cache_file.load()
        else:
            legacy_path = legacy_path or self.cache_file.path.with_name(LEGACY_CACHE_FILENAME)
            records = load_legacy_text(legacy_path)
            if records:
                try:
                    self.cache_file.save(records)
                except OSError as e:
                    logger.error("CACHE_SAVE legacy import not written: %s", e)
        self.store.replace_all(records)
        return len(records)

    def resolve(
        self,
        key: LevelKey,
        on_complete: Optional[Observer] = None,
        fetch_fn: Optional[FetchFn] = None,
    ) -> "Future[ResolveOutcome]":
        return self.coordinator.resolve(key, fetch_fn or make_fetch_fn(key), on_complete)

    def lookup_level(
        self,
        level_id: int,
        two_player: bool = False,
        on_complete: Optional[Observer] = None,
    ) -> "Future[ResolveOutcome]":
        """Raises ValueError for level ids <= 0."""
        variant = Variant.TWO_PLAYER if two_player else Variant.STANDARD
        return self.resolve(LevelKey(level_id, variant), on_complete)

    def clear_cache(self) -> None:
        self.coordinator.clear_cache()

    def close(self) -> None:
        self.coordinator.shutdown(wait=True)

    def __enter__(self) -> "VerifierService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_service(
    cache_dir: Optional[Path] = None,
    negative_ttl: Optional[float] = None,
    load: bool = True,
) -> VerifierService:
    """Wire up a service from config; arguments override the environment."""
    cache_dir = Path(cache_dir) if cache_dir is not None else config.get_cache_dir()
    store = CacheStore(
        negative_ttl=negative_ttl if negative_ttl is not None else config.get_negative_ttl_seconds()
    )
    cache_file = CacheFile(cache_dir / CACHE_FILENAME)
    coordinator = FetchCoordinator(store, cache_file)
    service = VerifierService(store, cache_file, coordinator)
    if load:
        count = service.load()
        logger.info("SERVICE ready cache_dir=%s entries=%d", cache_dir, count)
    return service
