# satis_purge/batch/purge_archives.py
"""
Purge — delete archives no longer referenced by any age-eligible include file.

Usage:
    satis-purge [file] [output-dir] [max-age] [--dry-run] [--report PATH]

    file        Json file to use (default: ./satis.json)
    output-dir  Location where the repository was built (required)
    max-age     Maximum age of package include files (default: "-1 week")

Flow
1) Validate inputs (config, output dir, max-age) before touching the filesystem.
2) Scan <output-dir>/include/*.json (oldest first).
3) List the archive directory (<output-dir>/<archive.directory>).
4) Collect archive filenames referenced by include files at least as old as max-age.
5) Delete every listed archive that is not referenced.
6) Optionally write a JSON / CSV report.

Exit codes
- 0: finished (also when nothing had to be deleted)
- 1: no include files found, or the archive directory is empty
- 2: configuration error, corrupt include file, or missing/unreadable archive directory
"""

from __future__ import annotations

import argparse
import uuid
from pathlib import Path
from typing import Optional, Sequence

from satis_purge.core.index_scanner import scan_include_files
from satis_purge.core.max_age import DEFAULT_MAX_AGE
from satis_purge.core.purge import ArchiveDirectoryError, list_archives, purge_archives
from satis_purge.core.reachability import ManifestParseError, collect_referenced
from satis_purge.core.reporting import build_summary, report_frame, summary_line, summary_payload
from satis_purge.io.writers import write_csv, write_json
from satis_purge.utils.config import DEFAULT_CONFIG_FILE, PurgeSettings, validate_purge_inputs
from satis_purge.utils.logging import configure_logging, get_logger

EXIT_OK = 0
EXIT_EMPTY = 1
EXIT_ERROR = 2

_HELP_EPILOG = """\
The purge command deletes all archived packages that are not used anymore.

Only include files that are older than max-age are scanned for references; newer ones are
skipped. Use a max-age that no include file is old enough for to purge every archive.

Examples:
  satis-purge satis.json web/
  satis-purge satis.json web/ "-2 weeks"
  satis-purge satis.json web/ "1 month ago" --dry-run --report purge.json
"""


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="satis-purge",
        description="Purge packages",
        epilog=_HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("file", nargs="?", default=DEFAULT_CONFIG_FILE, help="Json file to use")
    p.add_argument("output_dir", nargs="?", default=None, metavar="output-dir", help="Location where to output built files")
    p.add_argument(
        "max_age",
        nargs="?",
        default=DEFAULT_MAX_AGE,
        metavar="max-age",
        help='Maximum age of package include files, e.g. "-1 week", "3 days ago", "2024-01-31"',
    )
    p.add_argument("--dry-run", action="store_true", help="Only report what would be deleted")
    p.add_argument("--report", default=None, help="Write a purge report (.json summary or .csv per archive)")
    p.add_argument("--log-level", default="INFO", help="Root log level (DEBUG, INFO, WARNING, ...)")
    p.add_argument("--log-file", default=None, help="Also write logs to this file")
    return p


def _write_report(path: str, summary, reachability, outcome) -> None:
    if Path(path).suffix.lower() == ".csv":
        write_csv(path, report_frame(outcome))
    else:
        write_json(path, summary_payload(summary, reachability, outcome))


def run_purge(settings: PurgeSettings, *, report_path: Optional[str] = None, run_id: Optional[str] = None) -> int:
    """
    Execute one purge pass with already validated settings. Returns the process exit code.
    """
    logger = get_logger(__name__, run_id=run_id)

    includes = scan_include_files(settings.output_dir)
    if not includes:
        logger.error("No include files found")
        return EXIT_EMPTY

    try:
        archives = list_archives(settings.archive_dir)
    except ArchiveDirectoryError as e:
        logger.error("%s", e)
        return EXIT_ERROR
    if not archives:
        logger.error("No archived files")
        return EXIT_EMPTY

    try:
        reachability = collect_referenced(includes, settings.cutoff)
    except ManifestParseError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    outcome = purge_archives(archives, reachability.referenced, dry_run=settings.dry_run)

    summary = build_summary(reachability, outcome, cutoff=settings.cutoff)
    logger.info("Purge :: %s", summary_line(summary))

    if report_path:
        _write_report(report_path, summary, reachability, outcome)

    logger.info("Purge :: finished")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(level=args.log_level, log_file=args.log_file)
    except ValueError as e:
        parser.error(str(e))

    run_id = uuid.uuid4().hex[:8]
    logger = get_logger(__name__, run_id=run_id)

    result = validate_purge_inputs(args.file, args.output_dir, args.max_age, dry_run=args.dry_run)
    if not result.ok:
        logger.error("%s", result.error)
        return EXIT_ERROR

    settings = result.settings
    logger.info(
        "Purge :: output=%s archives=%s cutoff=%s%s",
        str(settings.output_dir),
        str(settings.archive_dir),
        settings.cutoff.isoformat(timespec="seconds"),
        " (dry-run)" if settings.dry_run else "",
    )
    return run_purge(settings, report_path=args.report, run_id=run_id)


__all__ = ["EXIT_OK", "EXIT_EMPTY", "EXIT_ERROR", "build_arg_parser", "run_purge", "main"]


if __name__ == "__main__":
    raise SystemExit(main())
