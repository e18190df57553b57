"""
Configuration management for LayoutKeeper
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".layout_keeper" / "config.yaml"

DEFAULTS: dict[str, Any] = {
    "layout_file": "~/.layout.yaml",
    "log_level": "info",
    "restore": {
        "passes": 2,
        "settle_interval": 0.5,  # seconds between passes
        "tolerance": 4,  # pixels
    },
    "observe": {
        "min_width": 64,
        "min_height": 64,
        "ignored_owners": ["Control Center", "Dock", "Window Server"],
    },
}


def merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `overrides` on a copy of `base`"""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Settings read from a YAML file, layered over DEFAULTS.

    The file is created with the defaults the first time it is missing. A file
    that can't be read or parsed is reported and ignored.
    """

    def __init__(self, config_file: str | Path | None = None):
        self.config_file = (
            DEFAULT_CONFIG_FILE if config_file is None else Path(config_file).expanduser()
        )
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.settings = self._read_settings()

    def _read_settings(self) -> dict[str, Any]:
        if not self.config_file.exists():
            self._write_defaults()
            return copy.deepcopy(DEFAULTS)

        try:
            with open(self.config_file, encoding="utf-8") as f:
                user_settings = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Error loading config %s: %s", self.config_file, e)
            return copy.deepcopy(DEFAULTS)

        if not isinstance(user_settings, dict):
            logger.error("Ignoring config %s: top level must be a mapping", self.config_file)
            return copy.deepcopy(DEFAULTS)
        return merge_settings(DEFAULTS, user_settings)

    def _write_defaults(self) -> None:
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(DEFAULTS, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.warning("Could not write default config %s: %s", self.config_file, e)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key, e.g. restore.passes"""
        node: Any = self.settings
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    @property
    def layout_path(self) -> Path:
        return Path(self.get("layout_file", "~/.layout.yaml")).expanduser()

    @property
    def ignored_owners(self) -> set[str]:
        return set(self.get("observe.ignored_owners") or [])
