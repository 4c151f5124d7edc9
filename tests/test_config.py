# tests/test_config.py

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from satis_purge.utils.config import (
    PurgeConfigError,
    PurgeSettings,
    SatisConfig,
    build_settings,
    load_satis_config,
    validate_purge_inputs,
)

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _write(tmp_path: Path, name: str, content: str) -> Path:
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


def _satis(tmp_path: Path, archive=None, **extra) -> Path:
    doc = {
        "name": "acme/repository",
        "homepage": "https://packages.example.org",
        "repositories": [{"type": "vcs", "url": "https://github.com/acme/x"}],
        "require-all": True,
    }
    if archive is not None:
        doc["archive"] = archive
    doc.update(extra)
    return _write(tmp_path, "satis.json", json.dumps(doc))


def test_load_satis_config_ok_ignores_unrelated_keys(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist", "format": "tar", "skip-dev": True})

    cfg = load_satis_config(p)
    assert isinstance(cfg, SatisConfig)
    assert cfg.name == "acme/repository"
    assert cfg.archive.directory == "dist"
    assert cfg.archive.format == "tar"
    assert cfg.archive.skip_dev is True


def test_load_satis_config_yaml(tmp_path: Path):
    p = _write(tmp_path, "satis.yaml", "name: acme\narchive:\n  directory: dist\n")
    cfg = load_satis_config(p)
    assert cfg.archive.directory == "dist"
    assert cfg.archive.format == "zip"


def test_load_satis_config_file_not_found(tmp_path: Path):
    with pytest.raises(PurgeConfigError) as e:
        load_satis_config(tmp_path / "nope.json")
    assert "File not found" in str(e.value)


def test_load_satis_config_unreadable_path_is_config_error(tmp_path: Path):
    p = tmp_path / "satis.json"
    p.mkdir()
    with pytest.raises(PurgeConfigError) as e:
        load_satis_config(p)
    assert "Cannot read config" in str(e.value)
    assert str(p) in str(e.value)


def test_load_satis_config_invalid_json(tmp_path: Path):
    p = _write(tmp_path, "satis.json", '{"archive": ')
    with pytest.raises(PurgeConfigError):
        load_satis_config(p)


def test_load_satis_config_root_not_mapping(tmp_path: Path):
    p = _write(tmp_path, "satis.json", "[1, 2]")
    with pytest.raises(PurgeConfigError) as e:
        load_satis_config(p)
    assert "mapping" in str(e.value).lower()


@pytest.mark.parametrize("archive", [None, {}, {"format": "zip"}, "dist"])
def test_load_satis_config_requires_archive_directory(tmp_path: Path, archive):
    p = _satis(tmp_path, archive=archive)
    with pytest.raises(PurgeConfigError) as e:
        load_satis_config(p)
    assert 'You must define "archive" parameter' in str(e.value)
    assert str(p) in str(e.value)


def test_load_satis_config_rejects_blank_directory(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "   "})
    with pytest.raises(PurgeConfigError):
        load_satis_config(p)


def test_build_settings_resolves_layout(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    out = tmp_path / "web"

    s = build_settings(p, out, "-1 week", now=NOW)
    assert isinstance(s, PurgeSettings)
    assert s.output_dir == out
    assert s.include_dir == out / "include"
    assert s.archive_dir == (out / "dist").resolve()
    assert s.cutoff == NOW - timedelta(weeks=1)
    assert s.dry_run is False


def test_build_settings_is_immutable(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    s = build_settings(p, tmp_path / "web", now=NOW)
    with pytest.raises(Exception):
        s.dry_run = True  # type: ignore[misc]


def test_build_settings_absolute_archive_directory(tmp_path: Path):
    store = tmp_path / "elsewhere"
    p = _satis(tmp_path, archive={"directory": str(store)})
    s = build_settings(p, tmp_path / "web", now=NOW)
    assert s.archive_dir == store


def test_build_settings_requires_output_dir(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    with pytest.raises(PurgeConfigError) as e:
        build_settings(p, None, now=NOW)
    assert "output dir must be specified" in str(e.value)


def test_build_settings_invalid_max_age(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    with pytest.raises(PurgeConfigError) as e:
        build_settings(p, tmp_path / "web", "sometime soon", now=NOW)
    assert "invalid max-age parameter: sometime soon" in str(e.value)


def test_validate_purge_inputs_returns_error_value(tmp_path: Path):
    result = validate_purge_inputs(tmp_path / "missing.json", tmp_path / "web", now=NOW)
    assert result.ok is False
    assert result.settings is None
    assert "File not found" in result.error


def test_validate_purge_inputs_ok(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    result = validate_purge_inputs(p, tmp_path / "web", "-2 days", dry_run=True, now=NOW)
    assert result.ok is True
    assert result.error is None
    assert result.settings.dry_run is True
    assert result.settings.cutoff == NOW - timedelta(days=2)


def test_validate_purge_inputs_touches_nothing(tmp_path: Path):
    p = _satis(tmp_path, archive={"directory": "dist"})
    out = tmp_path / "web"
    validate_purge_inputs(p, out, "-1 week", now=NOW)
    assert not out.exists()
