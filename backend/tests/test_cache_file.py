"""
Unit tests for the durable cache file and legacy import.
Run from backend: python -m pytest tests/test_cache_file.py -v
"""
import json
import logging
from unittest.mock import patch

import pytest

from verifier_core.cache.cache_file import CacheFile, load_legacy_text
from verifier_core.models.level_key import LevelKey, Variant
from verifier_core.models.verifier_record import VerifierRecord


def test_save_and_load(tmp_path):
    """Saved records load back equal, including names past the two-name label."""
    path = tmp_path / "verifier_cache.json"
    cache_file = CacheFile(path)
    a, b = LevelKey(1000), LevelKey(1000, Variant.TWO_PLAYER)
    snapshot = {
        a: VerifierRecord(a, ("A", "B", "C"), "http://x", True, 1_700_000_000.0),
        b: VerifierRecord.negative(b, fetched_at=1_700_000_100.0),
    }
    cache_file.save(snapshot)
    assert cache_file.load() == snapshot


def test_file_format(tmp_path):
    """One JSON object keyed by wire key with four named fields."""
    path = tmp_path / "verifier_cache.json"
    key = LevelKey(42, Variant.TWO_PLAYER)
    CacheFile(path).save({key: VerifierRecord(key, ("A",), "http://x", False, 1_700_000_000.9)})
    data = json.loads(path.read_text())
    assert data == {
        "42_2p": {"names": ["A"], "proof_url": "http://x", "legacy": False, "fetched_at": 1700000000}
    }


def test_missing_file_is_empty(tmp_path):
    """No file -> empty cache, not an error."""
    assert CacheFile(tmp_path / "nope.json").load() == {}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", ""])
def test_malformed_file_is_empty(tmp_path, caplog, content):
    """Corrupt file -> empty cache plus a warning."""
    path = tmp_path / "verifier_cache.json"
    path.write_text(content)
    with caplog.at_level(logging.WARNING):
        assert CacheFile(path).load() == {}
    assert "malformed" in caplog.text


def test_bad_entries_skipped(tmp_path):
    """Entries with bad keys or field types are dropped individually."""
    path = tmp_path / "verifier_cache.json"
    path.write_text(json.dumps({
        "1": {"names": ["ok"], "proof_url": "", "legacy": False, "fetched_at": 5},
        "abc": {"names": ["bad key"], "proof_url": "", "legacy": False, "fetched_at": 5},
        "-3": {"names": [], "proof_url": "", "legacy": False, "fetched_at": 5},
        "2": {"names": "not a list", "proof_url": "", "legacy": False, "fetched_at": 5},
        "3": {"names": [], "proof_url": "", "legacy": "no", "fetched_at": 5},
        "4": {"names": [], "proof_url": "", "legacy": False},
        "5": "not an object",
    }))
    records = CacheFile(path).load()
    assert list(records) == [LevelKey(1)]
    assert records[LevelKey(1)].names == ("ok",)


def test_save_replaces_previous_copy(tmp_path):
    """A second save overwrites the first and leaves no temp files behind."""
    path = tmp_path / "verifier_cache.json"
    cache_file = CacheFile(path)
    a, b = LevelKey(1), LevelKey(2)
    cache_file.save({a: VerifierRecord(a, ("A",), fetched_at=1.0)})
    cache_file.save({b: VerifierRecord(b, ("B",), fetched_at=2.0)})
    assert list(cache_file.load()) == [b]
    assert [p.name for p in tmp_path.iterdir()] == ["verifier_cache.json"]


def test_failed_save_keeps_previous_copy(tmp_path):
    """If the replace step fails, the old file is intact and the temp file is removed."""
    path = tmp_path / "verifier_cache.json"
    cache_file = CacheFile(path)
    a, b = LevelKey(1), LevelKey(2)
    cache_file.save({a: VerifierRecord(a, ("A",), fetched_at=1.0)})
    before = path.read_text()
    with patch("verifier_core.cache.cache_file.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            cache_file.save({b: VerifierRecord(b, ("B",), fetched_at=2.0)})
    assert path.read_text() == before
    assert [p.name for p in tmp_path.iterdir()] == ["verifier_cache.json"]


def test_save_creates_directory(tmp_path):
    """Parent directories are created on first save."""
    path = tmp_path / "nested" / "dir" / "verifier_cache.json"
    CacheFile(path).save({})
    assert path.exists()


def test_delete(tmp_path):
    """delete() removes the file and is a no-op when it is already gone."""
    path = tmp_path / "verifier_cache.json"
    cache_file = CacheFile(path)
    cache_file.save({})
    cache_file.delete()
    assert not path.exists()
    cache_file.delete()


def test_legacy_text_import(tmp_path):
    """Tab-separated lines become records; bad lines are skipped."""
    path = tmp_path / "verifier_cache.txt"
    path.write_text(
        "1000\t1700000000\tZoink\thttps://youtu.be/abc\n"
        "\n"
        "2000\t1700000001\tA & B\t\n"
        "3000\tnot-a-number\tX\t\n"
        "too\tfew\n"
        "0\t1700000002\tY\t\n"
    )
    records = load_legacy_text(path)
    assert set(records) == {LevelKey(1000), LevelKey(2000)}
    assert records[LevelKey(1000)].names == ("Zoink",)
    assert records[LevelKey(1000)].proof_url == "https://youtu.be/abc"
    assert records[LevelKey(1000)].fetched_at == 1_700_000_000.0
    assert records[LevelKey(2000)].names == ("A", "B")


def test_legacy_text_missing(tmp_path):
    """No legacy file -> nothing imported."""
    assert load_legacy_text(tmp_path / "verifier_cache.txt") == {}
