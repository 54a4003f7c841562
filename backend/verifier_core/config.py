"""
Paths, remote API settings, and cache tuning.
Values are read lazily from the environment; scripts load backend/.env first.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# backend/verifier_core/config.py -> parent=verifier_core, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

DEFAULT_API_BASE_URL = "https://api.aredl.net/v2/api/aredl/levels"
DEFAULT_USER_AGENT = "Mozilla/5.0"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("CONFIG: %s=%r is not an integer, using %s", name, raw, default)
        return default


# --- Remote list API ---
def get_api_base_url() -> str:
    return os.environ.get("AREDL_API_BASE_URL", DEFAULT_API_BASE_URL).strip().rstrip("/")

def get_user_agent() -> str:
    return os.environ.get("AREDL_USER_AGENT", DEFAULT_USER_AGENT).strip() or DEFAULT_USER_AGENT

def get_request_timeout() -> int:
    return _env_int("AREDL_TIMEOUT", 10)

def get_max_retries() -> int:
    return max(1, _env_int("AREDL_MAX_RETRIES", 3))


# --- Cache ---
def get_cache_dir() -> Path:
    raw = os.environ.get("VERIFIER_CACHE_DIR", "").strip()
    return Path(raw) if raw else _REPO_ROOT / "data"

def get_negative_ttl_seconds() -> int:
    return _env_int("VERIFIER_NEGATIVE_TTL", 30 * 60)


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: api_base_url=%s user_agent=%s timeout=%ds max_retries=%d "
        "cache_dir=%s cache_dir_exists=%s negative_ttl=%ds",
        get_api_base_url(), get_user_agent(), get_request_timeout(), get_max_retries(),
        get_cache_dir(), get_cache_dir().exists(), get_negative_ttl_seconds(),
    )
