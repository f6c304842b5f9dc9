"""Configuration management for the CLI."""

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULTS: dict[str, Any] = {
    "corpus": None,
    "limit": 10,
    "suggest_limit": 5,
    "width": None,
}


class Config:
    """Configuration management for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "versesearch" / "config.yaml")

        paths.append(Path(".versesearch.yaml"))
        paths.append(Path("versesearch.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge configuration dictionaries, later ones taking precedence."""
        if not configs:
            return {}

        result = dict(configs[0])
        for config in configs[1:]:
            result = _overlay(result, config)
        return result


def load_config(config_file: Path | None = None) -> dict[str, Any]:
    """Load configuration from defaults, files and environment variables.

    Later sources win: default paths in order, then ``VERSESEARCH_CORPUS``,
    then the explicitly given file.
    """
    config = dict(DEFAULTS)

    for path in Config.get_config_paths():
        if path.exists():
            config = Config.merge_configs(config, Config.from_file(path))

    if corpus := os.environ.get("VERSESEARCH_CORPUS"):
        config = Config.merge_configs(config, {"corpus": corpus})

    if config_file is not None:
        config = Config.merge_configs(config, Config.from_file(config_file))

    return config


def _overlay(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Layer ``override`` onto ``base``.

    Nested mappings are merged key by key. A key set to null in a file (e.g.
    an empty ``corpus:`` line) leaves the earlier value in place.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _overlay(current, value)
        merged[key] = value
    return merged
