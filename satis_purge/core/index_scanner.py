# satis_purge/core/index_scanner.py
"""
Index Scanner

Intent
- Discover the package index ("include") files of a Satis output directory:
  every *.json directly under <output_dir>/include/.
- Pair each file with its last-modified timestamp and order them oldest first.

Key behaviors / guarantees
- Read-only: never touches the files it lists.
- An empty result is returned as [] (not an exception); the caller decides whether it is fatal.
- A read error on the include directory (missing / permission denied) is treated as "no include files"
  so that a not-yet-initialized repository is tolerated.
- Ordering is ascending by modification time, ties broken by path.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

from satis_purge.utils.logging import get_logger
from satis_purge.utils.paths import include_dir_for

INCLUDE_PATTERN = "*.json"


@dataclass(frozen=True)
class IndexFile:
    path: Path
    modified_at: datetime


def _modified_at(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime).astimezone()


def scan_include_files(output_dir: str | Path) -> List[IndexFile]:
    """
    Return every <output_dir>/include/*.json with its mtime, oldest first.
    """
    logger = get_logger(__name__)
    include_dir = include_dir_for(output_dir)

    try:
        candidates = [p for p in include_dir.glob(INCLUDE_PATTERN) if p.is_file()]
        found = [IndexFile(path=p, modified_at=_modified_at(p)) for p in candidates]
    except OSError as e:
        logger.debug("Cannot read include directory %s: %s", str(include_dir), e)
        return []

    found.sort(key=lambda f: (f.modified_at, str(f.path)))
    return found


__all__ = ["INCLUDE_PATTERN", "IndexFile", "scan_include_files"]
