"""Keyed work queue feeding the reconcile workers.

A key is handed to at most one worker at a time. Adding a key that is already
queued does nothing; adding a key that is being processed queues it once more
for when the worker is done. Triggers for the same Service therefore collapse
into a single pending reconcile.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional

from .constants import DEFAULT_RETRY_BASE_DELAY, DEFAULT_RETRY_MAX_DELAY

logger = logging.getLogger(__name__)


def make_key(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"


def split_key(key: str) -> tuple[str, str]:
    """Split a ``namespace/name`` key."""
    namespace, sep, name = key.partition("/")
    if not sep or not namespace or not name:
        raise ValueError(f"invalid key {key!r}")
    return namespace, name


class WorkQueue:
    """Coalescing queue of keys with per-key exponential retry delays."""

    def __init__(
        self,
        base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        max_delay: float = DEFAULT_RETRY_MAX_DELAY,
    ):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._ready: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._dirty: set[str] = set()
        self._processing: set[str] = set()
        self._failures: dict[str, int] = {}
        self._timers: set[asyncio.TimerHandle] = set()
        self._shutting_down = False

    def add(self, key: str) -> None:
        """Queue a key unless it is already pending."""
        if self._shutting_down or key in self._dirty:
            return
        self._dirty.add(key)
        if key not in self._processing:
            self._ready.put_nowait(key)

    def add_after(self, key: str, delay: float) -> None:
        """Queue a key after ``delay`` seconds."""
        if self._shutting_down:
            return
        if delay <= 0:
            self.add(key)
            return
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def fire() -> None:
            self._timers.discard(handle)
            self.add(key)

        handle = loop.call_later(delay, fire)
        self._timers.add(handle)

    def add_rate_limited(self, key: str) -> float:
        """Queue a key after a delay that doubles with every failure.

        Returns:
            The delay in seconds
        """
        failures = self._failures.get(key, 0)
        self._failures[key] = failures + 1
        delay = min(self.base_delay * 2**failures, self.max_delay)
        self.add_after(key, delay)
        return delay

    def forget(self, key: str) -> None:
        """Reset the failure count of a key."""
        self._failures.pop(key, None)

    def num_requeues(self, key: str) -> int:
        return self._failures.get(key, 0)

    async def get(self) -> Optional[str]:
        """Wait for the next key. Returns None once the queue is shut down."""
        if self._shutting_down:
            return None
        key = await self._ready.get()
        if key is None or self._shutting_down:
            # Wake up the next waiting worker as well
            self._ready.put_nowait(None)
            return None
        self._dirty.discard(key)
        self._processing.add(key)
        return key

    def done(self, key: str) -> None:
        """Mark a key as processed, queueing it again if it was re-added."""
        self._processing.discard(key)
        if key in self._dirty and not self._shutting_down:
            self._ready.put_nowait(key)

    def shutdown(self) -> None:
        """Stop handing out keys. Keys being processed are not interrupted."""
        self._shutting_down = True
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        self._ready.put_nowait(None)


async def worker(queue: WorkQueue, handle: Callable[[str], Awaitable[object]]) -> None:
    """Process keys until the queue is shut down.

    A failing key is retried with an increasing delay; a successful one has its
    failure count reset.
    """
    while True:
        key = await queue.get()
        if key is None:
            return
        try:
            await handle(key)
        except asyncio.CancelledError:
            queue.done(key)
            raise
        except Exception as e:
            delay = queue.add_rate_limited(key)
            logger.error(
                f"error processing '{key}' (attempt {queue.num_requeues(key)}, "
                f"retrying in {delay:.1f}s): {e}"
            )
        else:
            queue.forget(key)
        queue.done(key)
