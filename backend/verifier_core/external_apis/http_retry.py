"""
Remote GET for the level list API, retried with exponential backoff.

Only transport failures (timeouts, refused or dropped connections) are retried.
Any HTTP status, 404 and 5xx included, is an answer from the server and comes
back as-is in a RemoteResponse for the caller to classify.
"""
import logging
import time
from typing import Mapping, Optional

import requests

from verifier_core.external_apis.base import RemoteResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0


def _describe(exc: requests.RequestException) -> str:
    if isinstance(exc, requests.Timeout):
        return f"timed out: {exc}"
    return f"{type(exc).__name__}: {exc}"


def get_with_retries(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 10,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> RemoteResponse:
    """
    RemoteResponse(status, raw bytes) for the first request that reaches the server,
    or RemoteResponse(None, error=...) once every attempt failed in transport.
    """
    error = ""
    attempts = max(1, max_retries)
    for attempt in range(1, attempts + 1):
        try:
            resp = requests.get(url, headers=dict(headers or {}), timeout=timeout)
        except requests.RequestException as e:
            error = _describe(e)
        else:
            return RemoteResponse(resp.status_code, resp.content)
        logger.warning("EXTERNAL_API attempt=%d/%d url=%s error=%s", attempt, attempts, url, error)
        if attempt < attempts:
            time.sleep(initial_backoff * 2 ** (attempt - 1))
    return RemoteResponse(None, None, error)
