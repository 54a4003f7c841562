"""
Durable copy of the verifier cache: one JSON object keyed by level key.

  {"1000": {"names": ["A", "B"], "proof_url": "...", "legacy": false, "fetched_at": 1760000000}}

Names are stored as the raw list so names past the two-name label survive a restart.
Saves go through a temp file in the same directory and os.replace, so a crash
mid-write never damages the previous copy. Loading never raises: a missing file
is an empty cache, a malformed one is an empty cache plus a warning.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Hashable, Mapping, Optional

from verifier_core.models.level_key import LevelKey
from verifier_core.models.verifier_record import NAME_JOINER, VerifierRecord

logger = logging.getLogger(__name__)

CACHE_FILENAME = "verifier_cache.json"
LEGACY_CACHE_FILENAME = "verifier_cache.txt"
_LEGACY_SEPARATOR = "\t"


def _record_from_dict(key: Hashable, data: dict) -> VerifierRecord:
    """Raises ValueError/TypeError on wrong field types."""
    if not isinstance(data, dict):
        raise TypeError(f"entry is {type(data).__name__}, expected object")
    names = data.get("names", [])
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise TypeError("names must be a list of strings")
    proof_url = data.get("proof_url", "")
    if not isinstance(proof_url, str):
        raise TypeError("proof_url must be a string")
    legacy = data.get("legacy", False)
    if not isinstance(legacy, bool):
        raise TypeError("legacy must be a boolean")
    fetched_at = data.get("fetched_at")
    if isinstance(fetched_at, bool) or not isinstance(fetched_at, (int, float)):
        raise TypeError("fetched_at must be a number")
    # dict.fromkeys keeps first-seen order and drops duplicates
    return VerifierRecord(
        key=key,
        names=tuple(dict.fromkeys(names)),
        proof_url=proof_url,
        legacy=legacy,
        fetched_at=int(fetched_at),
    )


class CacheFile:
    """Reads and writes the cache snapshot at a fixed path."""

    def __init__(self, path: Path, key_parser: Callable[[str], Hashable] = LevelKey.parse):
        self._path = Path(path)
        self._key_parser = key_parser

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def save(self, snapshot: Mapping[Hashable, VerifierRecord]) -> None:
        """Overwrite the durable copy with snapshot. Raises OSError on failure."""
        payload = {str(key): record.to_dict() for key, record in snapshot.items()}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(payload, handle, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.info("CACHE_SAVE entries=%d path=%s", len(payload), self._path)

    def load(self) -> Dict[Hashable, VerifierRecord]:
        """Records from the durable copy; {} when missing or malformed."""
        if not self._path.exists():
            logger.info("CACHE_LOAD no cache file at %s", self._path)
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("CACHE_LOAD malformed cache file %s: %s", self._path, e)
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.error("CACHE_LOAD failed to read %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "CACHE_LOAD malformed cache file %s: top level is %s",
                self._path, type(data).__name__,
            )
            return {}

        records: Dict[Hashable, VerifierRecord] = {}
        for raw_key, entry in data.items():
            try:
                key = self._key_parser(raw_key)
                records[key] = _record_from_dict(key, entry)
            except (ValueError, TypeError) as e:
                logger.warning("CACHE_LOAD skipping entry key=%s: %s", raw_key, e)
        logger.info("CACHE_LOAD loaded %d entries from %s", len(records), self._path)
        return records

    def delete(self) -> None:
        """Remove the durable copy if present. Raises OSError on failure."""
        if self._path.exists():
            self._path.unlink()
            logger.info("CACHE_DELETE removed %s", self._path)


def load_legacy_text(
    path: Path,
    key_parser: Callable[[str], Hashable] = LevelKey.parse,
) -> Dict[Hashable, VerifierRecord]:
    """
    Import the older tab-separated cache: id, epoch seconds, verifier, video url per line.
    Bad lines are skipped with a warning; an unreadable file yields {}.
    """
    path = Path(path)
    if not path.exists():
        return {}
    records: Dict[Hashable, VerifierRecord] = {}
    try:
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("CACHE_LEGACY failed to read %s: %s", path, e)
        return {}

    for line_no, line in enumerate(lines, start=1):
        if not line:
            continue
        parts = line.split(_LEGACY_SEPARATOR)
        if len(parts) < 4:
            logger.warning("CACHE_LEGACY skipping line %d: expected 4 fields", line_no)
            continue
        try:
            key = key_parser(parts[0])
            fetched_at = int(parts[1])
        except ValueError as e:
            logger.warning("CACHE_LEGACY skipping line %d: %s", line_no, e)
            continue
        verifier, video = parts[2].strip(), parts[3].strip()
        names = [n.strip() for n in verifier.split(NAME_JOINER) if n.strip()] if verifier else []
        records[key] = VerifierRecord(
            key=key,
            names=tuple(dict.fromkeys(names)),
            proof_url=video,
            legacy=False,
            fetched_at=fetched_at,
        )
    logger.info("CACHE_LEGACY imported %d entries from %s", len(records), path)
    return records
