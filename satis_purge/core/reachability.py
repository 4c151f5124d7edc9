# satis_purge/core/reachability.py
"""
Reachability Collector

Intent
- Build the set of archive filenames still referenced by age-eligible index files.
- An archive is "reachable" when its filename is the basename of some package version's
  dist URL in at least one eligible index.

Eligibility
- An index is scanned only when its mtime is at or before the cutoff (modified_at <= cutoff).
  Newer indexes are skipped. When every index is skipped the referenced set stays empty and the
  purge deletes every archive; that escape hatch is kept on purpose.

Index format (read)
    {"packages": {"<name>": {"<version>": {"name": ..., "version": ..., "dist": {"url": ...}}}}}
  The per-package value may also be a list of definitions (Composer repository shape).

Failure modes
- ManifestParseError: invalid JSON, non-object root, missing/invalid "packages", or a version entry
  that is not an object. Fatal: a partial reference set would delete archives still in use.
- A version entry without a dist URL only logs a warning (metapackages have no dist).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set
from urllib.parse import urlsplit

from satis_purge.core.index_scanner import IndexFile
from satis_purge.io.readers import read_json
from satis_purge.utils.logging import get_logger


class ManifestParseError(ValueError):
    pass


@dataclass(frozen=True)
class PackageVersion:
    name: str
    version: str
    dist_url: Optional[str] = None


@dataclass(frozen=True)
class PackageManifest:
    packages: Dict[str, List[PackageVersion]]


@dataclass(frozen=True)
class ReachabilityResult:
    referenced: FrozenSet[str]
    scanned: List[IndexFile] = field(default_factory=list)
    skipped: List[IndexFile] = field(default_factory=list)
    missing_dist: List[PackageVersion] = field(default_factory=list)


def is_eligible(index: IndexFile, cutoff: datetime) -> bool:
    return index.modified_at <= cutoff


def archive_filename(dist_url: str) -> str:
    """
    Final path segment of a dist URL (query/fragment ignored). Plain paths work too.
    """
    path = urlsplit(dist_url).path if "://" in dist_url else dist_url
    return PurePosixPath(path).name


def _dist_url(definition: Mapping[str, Any]) -> Optional[str]:
    dist = definition.get("dist")
    if not isinstance(dist, Mapping):
        return None
    url = dist.get("url")
    if not isinstance(url, str) or not url.strip():
        return None
    return url


def _version_entry(package_name: str, version_key: str, definition: Any, source: str) -> PackageVersion:
    if not isinstance(definition, Mapping):
        raise ManifestParseError(
            f"{source}: version entry {package_name}@{version_key} must be an object, got {type(definition).__name__}"
        )
    return PackageVersion(
        name=str(definition.get("name") or package_name),
        version=str(definition.get("version") or version_key),
        dist_url=_dist_url(definition),
    )


def parse_manifest_data(data: Any, source: str = "<manifest>") -> PackageManifest:
    if not isinstance(data, Mapping):
        raise ManifestParseError(f"{source}: manifest root must be an object")
    if "packages" not in data:
        raise ManifestParseError(f"{source}: manifest has no 'packages' key")

    raw_packages = data["packages"]
    # an empty map is sometimes serialized as []
    if isinstance(raw_packages, list) and not raw_packages:
        raw_packages = {}
    if not isinstance(raw_packages, Mapping):
        raise ManifestParseError(f"{source}: 'packages' must be an object")

    packages: Dict[str, List[PackageVersion]] = {}
    for package_name, versions in raw_packages.items():
        if isinstance(versions, Mapping):
            items = [(str(k), v) for k, v in versions.items()]
        elif isinstance(versions, list):
            items = [("", v) for v in versions]
        else:
            raise ManifestParseError(f"{source}: versions of {package_name} must be an object or a list")
        packages[str(package_name)] = [_version_entry(str(package_name), k, v, source) for k, v in items]

    return PackageManifest(packages=packages)


def parse_manifest(path: str | Path) -> PackageManifest:
    """
    Read and parse one index file. Any read or shape problem raises ManifestParseError.
    """
    try:
        data = read_json(path)
    except (OSError, ValueError) as e:
        raise ManifestParseError(f"Cannot parse index file {str(path)}: {e}") from e
    return parse_manifest_data(data, source=str(path))


def iter_package_versions(manifest: PackageManifest) -> Iterator[PackageVersion]:
    for versions in manifest.packages.values():
        yield from versions


def collect_referenced(indexes: Iterable[IndexFile], cutoff: datetime) -> ReachabilityResult:
    """
    Scan eligible indexes (oldest first) and gather every referenced archive filename.
    """
    logger = get_logger(__name__)

    referenced: Set[str] = set()
    scanned: List[IndexFile] = []
    skipped: List[IndexFile] = []
    missing_dist: List[PackageVersion] = []

    for index in sorted(indexes, key=lambda f: (f.modified_at, str(f.path))):
        stamp = index.modified_at.isoformat(timespec="seconds")
        if not is_eligible(index, cutoff):
            logger.info("skipping :: %s from %s", str(index.path), stamp)
            skipped.append(index)
            continue

        logger.info("scanning :: %s from %s", str(index.path), stamp)
        manifest = parse_manifest(index.path)
        scanned.append(index)

        for pv in iter_package_versions(manifest):
            if pv.dist_url is None:
                logger.warning("%s with version %s has no 'dist'", pv.name, pv.version)
                missing_dist.append(pv)
                continue
            filename = archive_filename(pv.dist_url)
            if filename:
                referenced.add(filename)

    return ReachabilityResult(
        referenced=frozenset(referenced),
        scanned=scanned,
        skipped=skipped,
        missing_dist=missing_dist,
    )


__all__ = [
    "ManifestParseError",
    "PackageVersion",
    "PackageManifest",
    "ReachabilityResult",
    "is_eligible",
    "archive_filename",
    "parse_manifest_data",
    "parse_manifest",
    "iter_package_versions",
    "collect_referenced",
]
