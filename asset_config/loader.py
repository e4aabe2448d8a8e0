"""
Settings Loader (``asset_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a typed
``asset_modules.assets.config.AssetConfig``.  Runtime callers go through
``asset_config.get_active_settings()``; this module is the parsing layer
underneath it and the direct entry point for tests.

File format
-----------
Top-level keys are the ``AssetConfig`` fields::

    currency_code: BRL
    exclude_archived_from_summary: false
    import_settings:
      allocate_freight: true
      freight_scope: imported_items_only

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Not a mapping, unknown keys, bad currency or scope  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from asset_modules.assets.config import AssetConfig


@dataclass(frozen=True)
class LoadedSettings:
    """A parsed settings file and the checksum of its canonical content."""

    config: AssetConfig
    checksum: str
    source_path: Path | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a mapping, got {type(data).__name__}")
    return data


def parse_settings(data: dict[str, Any]) -> AssetConfig:
    """Parse an ``AssetConfig`` from a dict.  Unknown keys raise ``ValueError``."""
    settings = data.get("import_settings")
    if settings is not None and not isinstance(settings, dict):
        raise ValueError("import_settings must be a mapping")
    return AssetConfig.from_dict(data)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums, whatever the
    key order of the source file.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_settings(path: Path | str) -> LoadedSettings:
    """Read ``path`` and return the parsed config with its checksum."""
    source = Path(path)
    data = load_yaml_file(source)
    return LoadedSettings(
        config=parse_settings(data),
        checksum=compute_checksum(data),
        source_path=source,
    )
