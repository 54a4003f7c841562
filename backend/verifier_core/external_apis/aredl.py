"""
AREDL level lookup (no key required).
GET {base}/{level_id} or {base}/{level_id}_2p for the two-player variant.
"""
import logging
from typing import Optional

from verifier_core.config import (
    get_api_base_url,
    get_max_retries,
    get_request_timeout,
    get_user_agent,
)
from verifier_core.external_apis.base import FetchFn, RemoteResponse
from verifier_core.external_apis.http_retry import get_with_retries
from verifier_core.models.level_key import LevelKey

logger = logging.getLogger(__name__)


def level_url(key: LevelKey, base_url: Optional[str] = None) -> str:
    base = (base_url or get_api_base_url()).rstrip("/")
    return f"{base}/{key.wire_path}"


def fetch_level(
    key: LevelKey,
    base_url: Optional[str] = None,
    timeout: Optional[int] = None,
    max_retries: Optional[int] = None,
    user_agent: Optional[str] = None,
) -> RemoteResponse:
    """One GET for a level. Transport failures come back as RemoteResponse(None, error=...)."""
    url = level_url(key, base_url)
    resp = get_with_retries(
        url,
        headers={"User-Agent": user_agent or get_user_agent()},
        timeout=timeout if timeout is not None else get_request_timeout(),
        max_retries=max_retries if max_retries is not None else get_max_retries(),
    )
    if resp.status_code is None:
        logger.warning("AREDL fetch failed after retries key=%s error=%s", key, resp.error)
    elif resp.status_code == 404:
        logger.info("AREDL level not listed key=%s", key)
    elif not resp.ok:
        logger.warning("AREDL request failed key=%s status=%s", key, resp.status_code)
    return resp


def make_fetch_fn(key: LevelKey, **kwargs) -> FetchFn:
    """Bind fetch_level to one key for FetchCoordinator.resolve."""
    def _fetch() -> RemoteResponse:
        return fetch_level(key, **kwargs)
    return _fetch
