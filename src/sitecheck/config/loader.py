"""Configuration file loading."""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".sitecheck.yml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping at the top level", path)
        return {}
    return data


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.sitecheck/config.yml."""
    return _load_yaml(Path.home() / ".sitecheck" / "config.yml")


def load_project_config(project_dir: Path | None = None) -> dict[str, Any]:
    """Load ./.sitecheck.yml from ``project_dir`` (default: working directory)."""
    return _load_yaml((project_dir or Path.cwd()) / PROJECT_CONFIG_NAME)
