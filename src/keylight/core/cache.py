from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from keylight.errors import RequestError

from .models import Status
from .service import DeviceTransport

_LOGGER = logging.getLogger(__name__)


class StatusCache:
    """Last device-confirmed status, guarded by a single lock.

    The lock covers the whole :class:`Status`, so every reader sees a
    consistent snapshot of all lights. ``generation`` counts committed
    transactions; a refresh that read the device before the latest commit
    is discarded by :meth:`replace_if_unchanged`.
    """

    def __init__(self, status: Optional[Status] = None) -> None:
        self._status = status or Status()
        self._lock = asyncio.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def snapshot(self) -> Status:
        async with self._lock:
            return self._status.copy()

    async def replace(self, status: Status) -> None:
        async with self._lock:
            self._status = status.copy()

    async def replace_if_unchanged(self, status: Status, generation: int) -> bool:
        """Store a fetched status unless a transaction committed since ``generation``."""
        async with self._lock:
            if generation != self._generation:
                return False
            self._status = status.copy()
            return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Status]:
        """Hold the lock for a read-modify-write cycle.

        Yields a copy of the cached status. The copy becomes the new cached
        value only if the block exits without raising; otherwise the cache
        keeps its previous value. The block must not use the cache itself.
        """
        async with self._lock:
            draft = self._status.copy()
            yield draft
            self._status = draft
            self._generation += 1


class PollLoop:
    """Background task that refreshes a :class:`StatusCache` on an interval.

    Refresh failures are logged at debug level and otherwise ignored; the
    cache keeps its last value. The loop only holds a reference to the
    cache, it never clears or replaces the cache object itself.
    """

    def __init__(
        self,
        transport: DeviceTransport,
        cache: StatusCache,
        interval: float = 5.0,
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._interval = interval
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it. Safe to call repeatedly."""
        self._stop_event.set()
        task, self._task = self._task, None
        if task is not None:
            await task

    async def _run(self) -> None:
        _LOGGER.debug("Polling %s every %.1fs", self._transport.address, self._interval)
        while True:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                await self.refresh()
            else:
                _LOGGER.debug("Stopped polling %s", self._transport.address)
                return

    async def refresh(self) -> bool:
        """Fetch once and update the cache.

        Returns False if the fetch failed or a setter committed while it was
        in flight.
        """
        generation = self._cache.generation
        try:
            status = await self._transport.fetch()
        except RequestError as exc:
            _LOGGER.debug("Poll of %s failed: %s", self._transport.address, exc)
            return False
        if not await self._cache.replace_if_unchanged(status, generation):
            _LOGGER.debug("Discarded stale poll of %s", self._transport.address)
            return False
        return True
