"""Asynchronous work queue with bounded concurrency and drain notifications."""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

from .events import EventEmitter

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[object]]


class TaskQueue:
    """Run deferred coroutine functions on the current event loop.

    ``add`` never blocks. At most ``concurrency`` tasks run at once; the rest
    wait in FIFO order. ``events`` emits ``"done"`` after each task, once the
    counters are updated, and ``"idle"`` when the last pending or running
    task finishes.
    """

    def __init__(self, concurrency: int = 1):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.concurrency = concurrency
        self.events = EventEmitter()
        self._pending: deque[Task] = deque()
        self._running = 0
        self._total = 0
        self._done = 0
        self._started: float | None = None
        self._workers: set[asyncio.Task] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def is_idle(self) -> bool:
        return self._running == 0 and not self._pending

    def arm(self) -> None:
        """Start the duration clock (first call wins)."""
        if self._started is None:
            self._started = time.monotonic()

    def add(self, task: Task) -> None:
        """Schedule ``task`` and return immediately."""
        self.arm()
        self._total += 1
        self._pending.append(task)
        self._idle.clear()
        self._fill()

    def get_total(self) -> int:
        return self._total

    def get_done(self) -> int:
        return self._done

    def get_duration(self) -> int:
        """Whole seconds since the queue was armed."""
        if self._started is None:
            return 0
        return int(time.monotonic() - self._started)

    async def wait_idle(self) -> None:
        """Wait until nothing is pending or running."""
        await self._idle.wait()

    def _fill(self) -> None:
        while self._pending and self._running < self.concurrency:
            task = self._pending.popleft()
            self._running += 1
            worker = asyncio.ensure_future(self._run(task))
            self._workers.add(worker)
            worker.add_done_callback(self._workers.discard)

    async def _run(self, task: Task) -> None:
        try:
            await task()
        except Exception:
            logger.exception("Queued task failed")
        finally:
            self._running -= 1
            self._done += 1
            self._fill()
            idle = self.is_idle
            if idle:
                self._idle.set()
            self.events.emit("done")
            if idle and self.is_idle:
                self.events.emit("idle")
