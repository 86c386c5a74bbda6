"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from sitecheck.errors import ConfigError

from .loader import load_global_config, load_project_config

DEFAULT_CONCURRENCY = 4
DEFAULT_TIMEOUT = 15.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config(key: str, project_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Project config file
    3. Global config file
    4. Default value
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    project_config = load_project_config(project_dir)
    if key in project_config:
        return project_config[key]

    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    return default


def get_concurrency(project_dir: Path | None = None) -> int:
    """Number of items each plugin checks at once."""
    value = get_config("SITECHECK_CONCURRENCY", project_dir, default=DEFAULT_CONCURRENCY)
    try:
        concurrency = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"SITECHECK_CONCURRENCY must be an integer, got {value!r}") from None
    if concurrency < 1:
        raise ConfigError(f"SITECHECK_CONCURRENCY must be at least 1, got {concurrency}")
    return concurrency


def get_timeout(project_dir: Path | None = None) -> float:
    """HTTP timeout in seconds."""
    value = get_config("SITECHECK_TIMEOUT", project_dir, default=DEFAULT_TIMEOUT)
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"SITECHECK_TIMEOUT must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigError(f"SITECHECK_TIMEOUT must be positive, got {timeout}")
    return timeout


def is_verbose(project_dir: Path | None = None) -> bool:
    value = get_config("SITECHECK_VERBOSE", project_dir, default=False)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def get_skip_patterns(project_dir: Path | None = None) -> list[str]:
    """Regexes of URLs whose checks are skipped.

    Accepts a comma-separated string (environment) or a YAML list.
    """
    value = get_config("SITECHECK_SKIP", project_dir, default=[])
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]
