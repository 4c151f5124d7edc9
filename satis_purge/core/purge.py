# satis_purge/core/purge.py
"""
Purge Executor

Intent
- List the archive directory, subtract the referenced filenames and delete what is left.

Key behaviors / guarantees
- Listing is depth 1 and includes every entry; only regular files are ever deleted.
- Each candidate is re-checked right before deletion so that files removed concurrently by
  another process are skipped silently. Files created after the listing are never considered.
- Deletion is permanent (unlink); there is no trash and no rollback.
- Referenced archives are never touched, whether or not they exist on disk.

Failure modes
- ArchiveDirectoryError when the archive directory is missing, not a directory or unreadable.
- Any OSError other than "file already gone" during unlink propagates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Iterable, List

from satis_purge.utils.logging import get_logger


class ArchiveDirectoryError(OSError):
    pass


@dataclass(frozen=True)
class ArchiveFile:
    filename: str
    absolute_path: Path


@dataclass(frozen=True)
class PurgeOutcome:
    deleted: List[ArchiveFile] = field(default_factory=list)
    kept: List[ArchiveFile] = field(default_factory=list)
    vanished: List[ArchiveFile] = field(default_factory=list)
    ignored: List[ArchiveFile] = field(default_factory=list)
    dry_run: bool = False


def list_archives(archive_dir: str | Path) -> List[ArchiveFile]:
    """
    Every entry directly under archive_dir, sorted by name.
    """
    root = Path(archive_dir)
    if not root.is_dir():
        raise ArchiveDirectoryError(f"Archive directory not found: {str(root)}")
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ArchiveDirectoryError(f"Cannot read archive directory {str(root)}: {e}") from e

    base = root.resolve()
    return [ArchiveFile(filename=p.name, absolute_path=base / p.name) for p in entries]


def select_unreferenced(archives: Iterable[ArchiveFile], referenced: AbstractSet[str]) -> List[ArchiveFile]:
    return [a for a in archives if a.filename not in referenced]


def purge_archives(
    archives: Iterable[ArchiveFile],
    referenced: AbstractSet[str],
    *,
    dry_run: bool = False,
) -> PurgeOutcome:
    """
    Delete every listed archive whose filename is not referenced.
    """
    logger = get_logger(__name__)

    archives = list(archives)
    outcome = PurgeOutcome(dry_run=dry_run)
    outcome.kept.extend(a for a in archives if a.filename in referenced)

    for archive in select_unreferenced(archives, referenced):
        path = archive.absolute_path
        if not path.is_file():
            if path.exists():
                outcome.ignored.append(archive)
            else:
                outcome.vanished.append(archive)
            continue

        if dry_run:
            logger.info("%s :: would be deleted", archive.filename)
            outcome.deleted.append(archive)
            continue

        try:
            path.unlink()
        except FileNotFoundError:
            outcome.vanished.append(archive)
            continue

        logger.info("%s :: deleted", archive.filename)
        outcome.deleted.append(archive)

    return outcome


__all__ = [
    "ArchiveDirectoryError",
    "ArchiveFile",
    "PurgeOutcome",
    "list_archives",
    "select_unreferenced",
    "purge_archives",
]
