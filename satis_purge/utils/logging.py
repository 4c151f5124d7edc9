# satis_purge/utils/logging.py
"""
Logging Utilities — Consistent Console/File Logs for the Purge Pass

Intent
- Provide consistent logging across the purge modules with a single configuration entrypoint.
- Support correlation via `run_id` (rendered in every line) so that several purge runs
  appending to the same log file can be told apart.
- Map the console tiers of the purge pass (info / warning / error) onto stdlib levels.

What this module guarantees
- **Idempotent root configuration:** `configure_logging()` avoids duplicating handlers across repeated calls.
- **Stable log format:** timestamps + level + run id + logger name + message.
- **Optional log-to-file:** add a FileHandler without breaking stream logging.

Key concepts
- Root handlers carry formatting (modules should not attach handlers).
- `RunIdFilter` injects `record.run_id`. Handlers created here share one filter, so records from
  every module carry the current run id (`-` before a run starts).

Primary API
- `configure_logging(level="INFO", log_file=None) -> None`
  Configures root logging once and can be safely re-called to:
  - change the root level
  - add a file handler
- `get_logger(name: str, run_id: str | None = None) -> logging.Logger`
  Returns a module logger and (optionally) attaches a `RunIdFilter` for correlation.
  Lazily configures logging with defaults if not configured yet.

External dependencies
- Python stdlib: `logging`, `pathlib`
"""


from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(run_id)s | %(name)s | %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Internal state to avoid duplicating handlers
_CONFIGURED = False
_CURRENT_LOG_FILE: Optional[str] = None


class RunIdFilter(logging.Filter):
    """Inject run_id into log records."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


class _HandlerRunIdFilter(RunIdFilter):
    """Fill run_id on records that no logger-level filter has stamped."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "run_id", None) is None:
            record.run_id = self.run_id or "-"
        return True


# Shared by the root handlers this module creates; get_logger(run_id=...) points it at the current run
_HANDLER_RUN_ID = _HandlerRunIdFilter()


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging (idempotent for handlers).
    - Avoids handler duplication across repeated imports / calls.
    - If log_file is provided, adds a FileHandler in addition to StreamHandler.
    """
    global _CONFIGURED, _CURRENT_LOG_FILE

    root = logging.getLogger()
    root_level = getattr(logging, level.upper(), None)
    if not isinstance(root_level, int):
        raise ValueError(f"Invalid log level: {level}")
    root.setLevel(root_level)

    def _has_stream_handler() -> bool:
        return any(
            isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
            for h in root.handlers
        )

    def _has_file_handler(path: str) -> bool:
        target = Path(path).resolve()
        for h in root.handlers:
            if isinstance(h, logging.FileHandler):
                if Path(getattr(h, "baseFilename", "")).resolve() == target:
                    return True
        return False

    formatter = logging.Formatter(fmt=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)

    if not _has_stream_handler():
        sh = logging.StreamHandler()
        sh.setFormatter(formatter)
        sh.addFilter(_HANDLER_RUN_ID)
        root.addHandler(sh)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        if not _has_file_handler(log_file):
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            fh.addFilter(_HANDLER_RUN_ID)
            root.addHandler(fh)
        _CURRENT_LOG_FILE = log_file

    _CONFIGURED = True


def get_logger(name: str, run_id: Optional[str] = None) -> logging.Logger:
    """
    Get a module logger with consistent configuration.

    Notes:
    - We configure logging lazily with INFO level by default, unless configured already.
    - We avoid adding per-logger handlers (handlers live on root).
    - If run_id is provided, attach a filter to this logger (idempotent per run_id) and make it
      the run id stamped by the root handlers.
    """
    if not _CONFIGURED:
        configure_logging(level="INFO", log_file=None)

    logger = logging.getLogger(name)

    if run_id is not None:
        _HANDLER_RUN_ID.run_id = run_id
        already = False
        for f in logger.filters:
            if isinstance(f, RunIdFilter) and f.run_id == run_id:
                already = True
                break
        if not already:
            logger.addFilter(RunIdFilter(run_id=run_id))

    return logger


__all__ = ["get_logger", "configure_logging", "RunIdFilter"]
