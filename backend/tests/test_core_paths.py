"""
Unit tests for config path resolution and environment overrides.
  cd backend && python -m pytest tests/test_core_paths.py -v
"""
import logging
from pathlib import Path

import pytest

from verifier_core import config


def test_backend_dir_resolution():
    """_BACKEND_DIR holds the verifier_core package; _REPO_ROOT is its parent."""
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "verifier_core").is_dir()
    assert config._REPO_ROOT == config._BACKEND_DIR.parent


def test_default_cache_dir(monkeypatch):
    """Cache dir defaults to repo_root/data."""
    monkeypatch.delenv("VERIFIER_CACHE_DIR", raising=False)
    assert config.get_cache_dir() == config._REPO_ROOT / "data"


def test_cache_dir_override(monkeypatch, tmp_path):
    """VERIFIER_CACHE_DIR overrides the default."""
    monkeypatch.setenv("VERIFIER_CACHE_DIR", str(tmp_path))
    assert config.get_cache_dir() == Path(tmp_path)


def test_api_defaults(monkeypatch):
    """Base URL and user agent match the public API defaults."""
    for name in ("AREDL_API_BASE_URL", "AREDL_USER_AGENT", "AREDL_TIMEOUT", "AREDL_MAX_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    assert config.get_api_base_url() == "https://api.aredl.net/v2/api/aredl/levels"
    assert config.get_user_agent() == "Mozilla/5.0"
    assert config.get_request_timeout() == 10
    assert config.get_max_retries() == 3


def test_base_url_trailing_slash(monkeypatch):
    """Trailing slashes are dropped so URLs join cleanly."""
    monkeypatch.setenv("AREDL_API_BASE_URL", "http://localhost:8000/levels/")
    assert config.get_api_base_url() == "http://localhost:8000/levels"


@pytest.mark.parametrize("raw,expected", [("", 1800), ("60", 60), ("abc", 1800)])
def test_negative_ttl(monkeypatch, raw, expected):
    """Bad integers fall back to the default."""
    monkeypatch.setenv("VERIFIER_NEGATIVE_TTL", raw)
    assert config.get_negative_ttl_seconds() == expected


def test_retry_floor(monkeypatch):
    """Retry count never drops below one."""
    monkeypatch.setenv("AREDL_MAX_RETRIES", "-2")
    assert config.get_max_retries() == 1


def test_log_config(caplog):
    """log_config emits one CONFIG line."""
    with caplog.at_level(logging.INFO, logger="verifier_core.config"):
        config.log_config()
    assert "CONFIG:" in caplog.text
