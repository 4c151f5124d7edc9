# satis_purge/io/readers.py
"""
Readers (JSON / YAML documents)

Intent
- Provide one place that turns files on disk into Python objects for:
  - the repository config (satis.json, or a YAML equivalent)
  - the package index files under <output_dir>/include/*.json

External calls
- json.loads
- yaml.safe_load (PyYAML)

Primary functions
- read_json(path) -> Any
- read_yaml(path) -> Any
- read_document(path) -> Any   (format picked from the file suffix)

Key behaviors / guarantees
- **File existence check**: raises FileNotFoundError if the path does not exist.
- **Invalid content**: raises ValueError naming the file (json.JSONDecodeError / yaml.YAMLError are wrapped).
- **BOM tolerant**: files are decoded with utf-8-sig so a leading BOM never breaks parsing.
- **No schema checks**: shape validation belongs to the caller (config models, manifest parser).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

_YAML_SUFFIXES = (".yaml", ".yml")

# NBSP / figure space / narrow NBSP / BOM
_BAD_WHITESPACE = ["\u00A0", "\u2007", "\u202F", "\uFEFF"]


def _read_text(path: str | Path) -> str:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {str(p)}")
    return p.read_text(encoding="utf-8-sig")


def sanitize_whitespace(text: str) -> str:
    """
    Replace exotic whitespace that breaks YAML/JSON tokenizers with plain spaces.
    """
    for ch in _BAD_WHITESPACE:
        text = text.replace(ch, " ")
    return text


def read_json(path: str | Path) -> Any:
    """
    Parse a JSON file. Raises ValueError on invalid JSON.
    """
    text = _read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {str(path)}: {e}") from e


def read_yaml(path: str | Path) -> Any:
    text = sanitize_whitespace(_read_text(path))
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {str(path)}: {e}") from e


def read_document(path: str | Path, *, sanitize: bool = True) -> Any:
    """
    Read a config-like document: YAML for .yaml/.yml, JSON otherwise.

    JSON documents are whitespace-sanitized before parsing unless sanitize=False.
    """
    p = Path(path)
    if p.suffix.lower() in _YAML_SUFFIXES:
        return read_yaml(p)

    text = _read_text(p)
    if sanitize:
        text = sanitize_whitespace(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {str(p)}: {e}") from e


__all__ = ["read_json", "read_yaml", "read_document", "sanitize_whitespace"]
