"""Debug utilities for verbose crawl tracing.

Thread-safe debug output with rich formatting for console sessions.
"""

import threading
from typing import Any

from rich.console import Console

_debug_state = threading.local()
_console = Console(stderr=True)


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    return getattr(_debug_state, "enabled", False)


def debug_print(category: str, message: str, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (crawl, plugin, issue)
        message: Main message to display
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    _console.print(f"[DEBUG:{category}] {message}", style="bold cyan", markup=False)
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, list):
            _console.print(f"  {key}: {', '.join(str(v) for v in value)}", style="dim", markup=False)
        elif isinstance(value, str) and len(value) > 100:
            _console.print(f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim", markup=False)
        else:
            _console.print(f"  {key}: {value}", style="dim", markup=False)
