#!/usr/bin/env python3
"""
Manual runner — purge unreferenced archives from a checkout (no install needed).

Usage:
    python scripts/run_purge.py satis.json web/ "-1 week" [--dry-run] [--report purge.json]
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from satis_purge.batch.purge_archives import main as purge_main
from satis_purge.utils.logging import get_logger


def main() -> int:
    logger = get_logger(__name__)

    logger.info("=" * 80)
    logger.info("RUNNING PURGE")
    logger.info("Repo root: %s", REPO_ROOT)
    logger.info("Working directory: %s", Path.cwd())
    logger.info("=" * 80)

    rc = purge_main(sys.argv[1:])

    logger.info("Purge finished with return code: %s", rc)
    logger.info("=" * 80)
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
