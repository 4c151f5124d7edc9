# satis_purge/utils/config.py
"""
Config Loader — Satis Repository Config + Purge Settings

Intent
- Load + validate the repository configuration (satis.json, or a YAML equivalent).
- Return **typed** configuration objects (Pydantic) for the parts the purge pass reads.
- Combine the config with the command-line inputs (output dir, max-age) into one immutable
  `PurgeSettings` value that is passed explicitly to the core functions.

What this module guarantees
- **Strict where it matters:** `archive.directory` must be present and non-empty.
- **Lenient elsewhere:** every other Satis key (repositories, require, output-html, ...) is accepted
  and ignored; models use extra="allow".
- **Validation before mutation:** `validate_purge_inputs()` runs every check (config file, output dir,
  max-age) and reports the first failure as a value, before anything on disk is touched.

Config models (high level)
- ArchiveConfig: directory (required), format (default "zip"), skip_dev, prefix_url
- SatisConfig: name, homepage, archive

Primary functions
- load_satis_config(path="./satis.json") -> SatisConfig
- build_settings(config_path, output_dir, max_age, dry_run=False, now=None) -> PurgeSettings
- validate_purge_inputs(...) -> ValidationResult

External dependencies
- Pydantic v2: BaseModel, ConfigDict, Field, validators
- PyYAML (through satis_purge.io.readers.read_document)
- Local: satis_purge.core.max_age.parse_max_age
"""


from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from satis_purge.core.max_age import DEFAULT_MAX_AGE, InvalidMaxAgeError, parse_max_age
from satis_purge.io.readers import read_document
from satis_purge.utils.logging import get_logger
from satis_purge.utils.paths import archive_dir_for, include_dir_for

DEFAULT_CONFIG_FILE = "./satis.json"


class PurgeConfigError(ValueError):
    pass


# -----------------------------
# Repository config models
# -----------------------------
class ArchiveConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    directory: str
    format: str = "zip"
    skip_dev: bool = Field(default=False, alias="skip-dev")
    prefix_url: Optional[str] = Field(default=None, alias="prefix-url")

    @field_validator("directory")
    @classmethod
    def _validate_directory(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("archive.directory must be a non-empty string")
        return v.strip()


class SatisConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    homepage: Optional[str] = None
    archive: ArchiveConfig


# -----------------------------
# Loading
# -----------------------------
def _load_document(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise PurgeConfigError(f"File not found: {str(path)}")
    try:
        data = read_document(p)
    except ValueError as e:
        raise PurgeConfigError(str(e)) from e
    except OSError as e:
        raise PurgeConfigError(f"Cannot read config {str(path)}: {e}") from e
    if not isinstance(data, dict):
        raise PurgeConfigError(f"Config root must be a mapping/object: {str(path)}")
    return data


def load_satis_config(path: str | Path = DEFAULT_CONFIG_FILE) -> SatisConfig:
    """
    Load and validate the repository config into a typed SatisConfig.
    """
    logger = get_logger(__name__)
    raw = _load_document(path)

    archive = raw.get("archive")
    if not isinstance(archive, dict) or "directory" not in archive:
        raise PurgeConfigError(f'You must define "archive" parameter in your {str(path)}')

    try:
        return SatisConfig.model_validate(raw)
    except ValidationError as e:
        logger.error("Invalid %s: %s", str(path), e)
        raise PurgeConfigError(f"Invalid config {str(path)}: {e}") from e


# -----------------------------
# Purge settings
# -----------------------------
@dataclass(frozen=True)
class PurgeSettings:
    config_path: Path
    output_dir: Path
    include_dir: Path
    archive_dir: Path
    cutoff: datetime
    max_age: str = DEFAULT_MAX_AGE
    dry_run: bool = False


@dataclass(frozen=True)
class ValidationResult:
    settings: Optional[PurgeSettings] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.settings is not None and self.error is None


def build_settings(
    config_path: str | Path,
    output_dir: Optional[str | Path],
    max_age: str = DEFAULT_MAX_AGE,
    *,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> PurgeSettings:
    """
    Build PurgeSettings from raw inputs. Raises PurgeConfigError on the first invalid input,
    checked in order: config file, output dir, max-age.
    """
    config = load_satis_config(config_path)

    if not output_dir:
        raise PurgeConfigError("The output dir must be specified as second argument")

    try:
        cutoff = parse_max_age(max_age, now=now)
    except InvalidMaxAgeError as e:
        raise PurgeConfigError(str(e)) from e

    out = Path(output_dir)
    return PurgeSettings(
        config_path=Path(config_path),
        output_dir=out,
        include_dir=include_dir_for(out),
        archive_dir=archive_dir_for(out, config.archive.directory),
        cutoff=cutoff,
        max_age=max_age,
        dry_run=dry_run,
    )


def validate_purge_inputs(
    config_path: str | Path,
    output_dir: Optional[str | Path],
    max_age: str = DEFAULT_MAX_AGE,
    *,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """
    Same as build_settings(), but configuration problems come back as ValidationResult.error.
    """
    try:
        settings = build_settings(config_path, output_dir, max_age, dry_run=dry_run, now=now)
    except PurgeConfigError as e:
        return ValidationResult(error=str(e))
    return ValidationResult(settings=settings)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "PurgeConfigError",
    "ArchiveConfig",
    "SatisConfig",
    "PurgeSettings",
    "ValidationResult",
    "load_satis_config",
    "build_settings",
    "validate_purge_inputs",
]
