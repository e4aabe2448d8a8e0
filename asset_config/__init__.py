"""
asset_config -- single public entrypoint for registry settings.

Responsibility:
    ``get_active_settings()`` returns the ``AssetConfig`` the scripts and
    services run with.  Settings come from a YAML file: an explicit path,
    else the ``ASSET_SETTINGS_FILE`` environment variable, else the bundled
    ``defaults/settings.yaml``.

Architecture position:
    Configuration -- sits above ``asset_modules`` (it builds
    ``AssetConfig``).  ``asset_kernel`` and ``asset_engines`` MUST NEVER
    import from ``asset_config``.

Audit relevance:
    Every call emits an ``ASSET_CONFIG_TRACE`` log entry with the source
    path and the SHA-256 checksum of the canonical settings, tying each
    import run to the exact settings that governed freight dilution.
"""

from __future__ import annotations

import os
from pathlib import Path

from asset_config.loader import (
    LoadedSettings,
    compute_checksum,
    load_settings,
    load_yaml_file,
    parse_settings,
)
from asset_kernel.logging_config import get_logger
from asset_modules.assets.config import AssetConfig

_logger = get_logger("config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults" / "settings.yaml"
SETTINGS_ENV_VAR = "ASSET_SETTINGS_FILE"


def get_active_settings(path: Path | str | None = None) -> AssetConfig:
    """The public settings entrypoint.

    Raises:
        FileNotFoundError: The chosen settings file does not exist.
        ValueError: Unknown keys or invalid values.
    """
    source = Path(path or os.environ.get(SETTINGS_ENV_VAR) or DEFAULT_SETTINGS_PATH)
    loaded = load_settings(source)
    _logger.info(
        "ASSET_CONFIG_TRACE",
        extra={
            "trace_type": "ASSET_CONFIG_TRACE",
            "source_path": str(source),
            "checksum": loaded.checksum,
            "currency_code": loaded.config.currency_code,
            "allocate_freight": loaded.config.import_settings.allocate_freight,
            "freight_scope": loaded.config.import_settings.freight_scope.value,
        },
    )
    return loaded.config


__all__ = [
    "get_active_settings",
    "load_settings",
    "load_yaml_file",
    "parse_settings",
    "compute_checksum",
    "LoadedSettings",
    "DEFAULT_SETTINGS_PATH",
    "SETTINGS_ENV_VAR",
]
