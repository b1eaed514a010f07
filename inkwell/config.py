"""Project configuration for Inkwell.

Settings are read from ``inkwell.yaml`` at the project root and laid
over DEFAULT_CONFIG. Every key is optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "inkwell.yaml"

DEFAULT_CONFIG = {
    "content_dir": "content",
    "posts_dir": "posts",
    "pages_dir": "pages",
    "author": None,
    "title": "Blog",
    "manifest": "manifest.json",
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from inkwell.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or is
            not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
        except ValueError as exc:
            # PyYAML resolves 2022-13-01 as a timestamp and then fails to build it
            raise ConfigError(f"{config_path}: invalid value: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"{config_path}: cannot read file: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_path}: configuration must be a mapping")
        config.update(loaded)
    return config


def content_dir(project_root: Path, config: dict[str, Any]) -> Path:
    """Resolve the content directory of a project."""
    return project_root / str(config.get("content_dir") or DEFAULT_CONFIG["content_dir"])
