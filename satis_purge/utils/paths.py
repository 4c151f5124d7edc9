# satis_purge/utils/paths.py
"""
Path helpers

Intent
- Make purge behavior independent of CWD.
- Standardize the Satis output layout: <output_dir>/include and <output_dir>/<archive.directory>.
"""
from __future__ import annotations

from pathlib import Path

INCLUDE_DIRNAME = "include"


def resolve_path(path_like: str | Path, *, base_dir: str | Path) -> Path:
    """
    Resolve a path relative to base_dir unless already absolute.
    """
    p = Path(path_like)
    if p.is_absolute():
        return p
    return (Path(base_dir) / p).resolve()


def include_dir_for(output_dir: str | Path) -> Path:
    return Path(output_dir) / INCLUDE_DIRNAME


def archive_dir_for(output_dir: str | Path, archive_directory: str) -> Path:
    """
    <output_dir>/<archive.directory>; an absolute archive.directory wins.
    """
    return resolve_path(archive_directory, base_dir=Path(output_dir).resolve())


__all__ = ["INCLUDE_DIRNAME", "resolve_path", "include_dir_for", "archive_dir_for"]
