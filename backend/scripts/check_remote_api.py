#!/usr/bin/env python3
"""
Check that the remote level list API is reachable and returns a parsable body.
Run from backend: python scripts/check_remote_api.py [--level-id 76290841]
Exit 0 if the API answered with a usable record; 1 otherwise.
"""
import argparse
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8
# Bloodbath
DEFAULT_LEVEL_ID = 10565740


def check_level(level_id: int) -> Tuple[bool, str]:
    """Return (success, message)."""
    from verifier_core.external_apis.aredl import fetch_level
    from verifier_core.models.level_key import LevelKey
    from verifier_core.parsing.record_parser import RecordParseError, parse_record

    key = LevelKey(level_id)
    resp = fetch_level(key, timeout=HEALTH_TIMEOUT, max_retries=1)
    if resp.status_code is None:
        return False, resp.error or "no response"
    if not resp.ok:
        return False, f"status {resp.status_code}"
    try:
        record = parse_record(resp.body, key)
    except RecordParseError as e:
        return False, f"unparsable body ({e})"
    return True, f"ok (names={len(record.names)})"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Health check for the remote level list API")
    parser.add_argument("--level-id", type=int, default=DEFAULT_LEVEL_ID, help="Level id to look up")
    args = parser.parse_args(argv)

    from verifier_core.config import get_api_base_url
    print(f"Checking {get_api_base_url()} ...")
    ok, msg = check_level(args.level_id)
    print(f"  Level {args.level_id}: {'OK' if ok else 'FAIL'} - {msg}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
