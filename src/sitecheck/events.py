"""Minimal observer channel used by assets, queues and plugins."""

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Named events with any number of listeners.

    Listeners are called synchronously in registration order. When a listener
    returns an awaitable it is scheduled on the running loop and kept
    referenced until it finishes. A listener that raises is logged and does
    not stop the ones after it.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._pending: set[asyncio.Future] = set()

    def on(self, event: str, listener: Listener) -> Listener:
        """Subscribe a listener and return it (usable as a decorator)."""
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Notify listeners of ``event``. Returns True if any were called."""
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                result = listener(*args)
            except Exception:
                logger.exception("Event listener for %r failed", event)
                continue
            if inspect.isawaitable(result):
                future = asyncio.ensure_future(result)
                self._pending.add(future)
                future.add_done_callback(self._finish)
        return bool(listeners)

    def _finish(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Event listener failed", exc_info=exc)
