#!/usr/bin/env python3
"""
Look up who verified one or more levels, using the local cache first.
Usage: cd backend && python scripts/lookup_verifier.py 10565740 86407629 [--two-player] [--clear]
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure backend is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Resolve level verifiers from AREDL with a local cache")
    parser.add_argument("level_ids", nargs="*", type=int, help="Level ids to look up")
    parser.add_argument("--two-player", action="store_true", help="Look up the two-player variant")
    parser.add_argument("--clear", action="store_true", help="Clear the cache (memory and file) first")
    parser.add_argument("--cache-dir", type=Path, default=None, help="Override VERIFIER_CACHE_DIR")
    args = parser.parse_args(argv)

    from verifier_core.config import log_config
    from verifier_core.display import proof_link, verified_by_text
    from verifier_core.models.verifier_record import ResolveStatus
    from verifier_core.service import build_service

    log_config()
    with build_service(cache_dir=args.cache_dir) as service:
        if args.clear:
            service.clear_cache()
            logger.info("Cache cleared")
        if not args.level_ids:
            return 0

        pending = []
        for level_id in args.level_ids:
            try:
                pending.append((level_id, service.lookup_level(level_id, two_player=args.two_player)))
            except ValueError as e:
                logger.warning("Skipping level %s: %s", level_id, e)

        unavailable = 0
        for level_id, future in pending:
            outcome = future.result()
            line = f"{level_id}: {verified_by_text(outcome)}"
            link = proof_link(outcome)
            if link:
                line += f" ({link})"
            if outcome.record is not None and len(outcome.record.names) > 2:
                line += f" [+{len(outcome.record.names) - 2} more]"
            print(line)
            if outcome.status is ResolveStatus.UNAVAILABLE:
                unavailable += 1
    return 1 if unavailable else 0


if __name__ == "__main__":
    sys.exit(main())
