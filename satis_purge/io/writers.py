# satis_purge/io/writers.py
"""
Writers (Deterministic Purge Report I/O)

Intent
- Provide a single, deterministic way to persist purge reports to disk:
  - JSON summary (readable, deterministic)
  - CSV with one row per archive entry considered by the purge

External calls
- json.dumps
- pandas.DataFrame.to_csv
- pathlib.Path
- satis_purge.utils.logging.get_logger

Primary functions
- ensure_parent_dir(path) -> None
- write_json(path, obj) -> None
- write_csv(path, df) -> None

Key behaviors / guarantees
- **Deterministic output**
  - JSON: UTF-8, sort_keys=True, ensure_ascii=False, pretty indent
  - CSV: UTF-8, index=False, column order is exactly df.columns (caller-controlled)
- **Filesystem safety**
  - ensure_parent_dir() is called automatically before writing.
- **Observability**
  - All write operations emit INFO-level logs with the file path and size/rows.

Design notes
- Writers are thin: no schema enforcement, no column mutation.
  Report content is computed in satis_purge.core.reporting.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

import pandas as pd

from satis_purge.utils.logging import get_logger


def ensure_parent_dir(path: str | Path) -> None:
    """
    Ensure parent directory exists for the given file path.
    """
    parent = Path(path).parent
    if parent and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


def write_json(
    path: str | Path,
    obj: Any,
    *,
    indent: int = 2,
    sort_keys: bool = True,
) -> None:
    """
    Write an object to JSON deterministically.

    Caller must ensure `obj` is JSON-serializable (dict/list/str/num/bool/None).
    """
    logger = get_logger(__name__)
    ensure_parent_dir(path)

    p = Path(path)
    text = json.dumps(obj, ensure_ascii=False, sort_keys=sort_keys, indent=indent)
    p.write_text(text + "\n", encoding="utf-8")

    logger.info("Wrote JSON: %s (bytes=%d)", str(p), int(p.stat().st_size))


def write_csv(path: str | Path, df: pd.DataFrame) -> None:
    """
    Write DataFrame to CSV deterministically:
    - UTF-8
    - index=False
    - stable column order as df.columns
    - '\\n' line terminator on every platform
    """
    logger = get_logger(__name__)
    ensure_parent_dir(path)

    p = Path(path)
    df.to_csv(
        p,
        index=False,
        encoding="utf-8",
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
    )

    logger.info(
        "Wrote CSV: %s (rows=%d, cols=%d)",
        str(p),
        int(df.shape[0]),
        int(df.shape[1]),
    )


__all__ = ["ensure_parent_dir", "write_json", "write_csv"]
