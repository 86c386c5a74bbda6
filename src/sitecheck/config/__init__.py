"""
Configuration management for sitecheck.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Project config file (./.sitecheck.yml)
3. Global config file (~/.sitecheck/config.yml)
4. Default values (lowest priority)
"""

from .getters import (
    get_concurrency,
    get_config,
    get_skip_patterns,
    get_timeout,
    is_verbose,
)
from .loader import load_global_config, load_project_config

__all__ = [
    "get_concurrency",
    "get_config",
    "get_skip_patterns",
    "get_timeout",
    "is_verbose",
    "load_global_config",
    "load_project_config",
]
