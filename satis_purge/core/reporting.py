# satis_purge/core/reporting.py
"""
Reporting (purge summary)

Intent
- Pure logic: summarize one purge pass from the reachability result and the purge outcome.
- Produce the JSON summary payload and the per-archive table written by --report.

No I/O here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd

from satis_purge.core.purge import PurgeOutcome
from satis_purge.core.reachability import ReachabilityResult

REPORT_COLUMNS = ["filename", "status", "path"]


@dataclass(frozen=True)
class PurgeSummary:
    cutoff: datetime
    dry_run: bool
    n_indexes_scanned: int
    n_indexes_skipped: int
    n_referenced: int
    n_deleted: int
    n_kept: int
    n_vanished: int
    n_ignored: int
    n_missing_dist: int


def build_summary(reachability: ReachabilityResult, outcome: PurgeOutcome, *, cutoff: datetime) -> PurgeSummary:
    return PurgeSummary(
        cutoff=cutoff,
        dry_run=outcome.dry_run,
        n_indexes_scanned=len(reachability.scanned),
        n_indexes_skipped=len(reachability.skipped),
        n_referenced=len(reachability.referenced),
        n_deleted=len(outcome.deleted),
        n_kept=len(outcome.kept),
        n_vanished=len(outcome.vanished),
        n_ignored=len(outcome.ignored),
        n_missing_dist=len(reachability.missing_dist),
    )


def summary_payload(
    summary: PurgeSummary,
    reachability: ReachabilityResult,
    outcome: PurgeOutcome,
) -> Dict[str, Any]:
    """
    JSON-serializable summary (counts + file lists).
    """
    return {
        "meta": {
            "cutoff": summary.cutoff.isoformat(),
            "dry_run": summary.dry_run,
        },
        "counts": {
            "indexes_scanned": summary.n_indexes_scanned,
            "indexes_skipped": summary.n_indexes_skipped,
            "referenced": summary.n_referenced,
            "deleted": summary.n_deleted,
            "kept": summary.n_kept,
            "vanished": summary.n_vanished,
            "ignored": summary.n_ignored,
            "missing_dist": summary.n_missing_dist,
        },
        "indexes": {
            "scanned": [str(i.path) for i in reachability.scanned],
            "skipped": [str(i.path) for i in reachability.skipped],
        },
        "missing_dist": [{"name": pv.name, "version": pv.version} for pv in reachability.missing_dist],
        "deleted": [a.filename for a in outcome.deleted],
    }


def report_frame(outcome: PurgeOutcome) -> pd.DataFrame:
    """
    One row per archive entry, ordered by filename.
    """
    deleted_status = "would_delete" if outcome.dry_run else "deleted"
    rows: List[Dict[str, str]] = []
    for status, archives in (
        (deleted_status, outcome.deleted),
        ("kept", outcome.kept),
        ("vanished", outcome.vanished),
        ("ignored", outcome.ignored),
    ):
        for a in archives:
            rows.append({"filename": a.filename, "status": status, "path": str(a.absolute_path)})

    rows.sort(key=lambda r: r["filename"])
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def summary_line(summary: PurgeSummary) -> str:
    verb = "would delete" if summary.dry_run else "deleted"
    return (
        f"scanned={summary.n_indexes_scanned} skipped={summary.n_indexes_skipped} "
        f"referenced={summary.n_referenced} {verb}={summary.n_deleted} kept={summary.n_kept}"
    )


__all__ = [
    "REPORT_COLUMNS",
    "PurgeSummary",
    "build_summary",
    "summary_payload",
    "report_frame",
    "summary_line",
]
