from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional

from zeroconf import ServiceBrowser, ServiceStateChange, Zeroconf

from keylight.errors import CancelError, DiscoverError, DiscoverTimeoutError

from .models import DeviceAddress, DiscoveredLight

_LOGGER = logging.getLogger(__name__)

SERVICE_TYPE = "_elg._tcp.local."


class KeyLightDiscovery:
    """Finds a Key Light device on the network by name using mDNS.

    python-zeroconf browses from its own threads, so the browse runs in a
    worker thread that owns the ``Zeroconf`` instance. The worker hands the
    first matching announcement to the event loop and keeps running until
    it is told to stop, checking the stop signal once per tick.
    """

    def __init__(self, service_type: str = SERVICE_TYPE, tick_seconds: float = 0.5) -> None:
        self.service_type = service_type
        self.tick_seconds = tick_seconds

    def _instance_name(self, name: str) -> str:
        suffix = "." + self.service_type
        if name.endswith(suffix):
            return name[: -len(suffix)]
        return name

    def _browse(
        self,
        wanted: str,
        deliver: Callable[[DiscoveredLight], None],
        stop: threading.Event,
    ) -> None:
        """Worker body: browse until ``stop`` is set."""
        wanted = self._instance_name(wanted)

        def on_service_state_change(zeroconf, service_type, name, state_change):
            if state_change != ServiceStateChange.Added:
                return
            if self._instance_name(name) != wanted:
                return
            info = zeroconf.get_service_info(service_type, name)
            if info and info.addresses and info.port:
                deliver(
                    DiscoveredLight(
                        name=wanted,
                        host=".".join(map(str, info.addresses[0])),
                        port=info.port,
                    )
                )

        zeroconf = Zeroconf()
        try:
            browser = ServiceBrowser(
                zeroconf,
                self.service_type,
                handlers=[on_service_state_change],
            )
            try:
                while not stop.wait(self.tick_seconds):
                    pass
            finally:
                browser.cancel()
        finally:
            zeroconf.close()

    async def discover_record(
        self, name: str, timeout: Optional[float] = None
    ) -> DiscoveredLight:
        """Wait for the first service whose instance name equals ``name``.

        Raises DiscoverTimeoutError if nothing matches within ``timeout``
        seconds (``None`` waits indefinitely), DiscoverError if the worker
        fails before a match, and CancelError if it fails while stopping.
        """
        loop = asyncio.get_running_loop()
        found: asyncio.Queue[DiscoveredLight] = asyncio.Queue(maxsize=1)
        stop = threading.Event()

        def put(record: DiscoveredLight) -> None:
            # Only the first match is kept; later announcements are dropped
            if not found.full():
                found.put_nowait(record)

        def deliver(record: DiscoveredLight) -> None:
            loop.call_soon_threadsafe(put, record)

        _LOGGER.debug("Browsing %s for %r", self.service_type, name)
        worker = loop.run_in_executor(None, self._browse, name, deliver, stop)
        getter = asyncio.ensure_future(found.get())
        try:
            done, _ = await asyncio.wait(
                {getter, worker},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except BaseException:
            getter.cancel()
            stop.set()
            raise
        stop.set()

        if getter in done:
            record = getter.result()
            _LOGGER.debug("Found %r at %s:%s", record.name, record.host, record.port)
            await self._join(worker)
            return record

        getter.cancel()
        if worker in done:
            exc = worker.exception()
            raise DiscoverError(f"Discovery of {name!r} ended without a match") from exc

        await self._join(worker)
        raise DiscoverTimeoutError(f"No device named {name!r} found within {timeout}s")

    async def _join(self, worker: asyncio.Future) -> None:
        try:
            await worker
        except Exception as exc:
            raise CancelError("Discovery worker failed while stopping") from exc

    async def discover(self, name: str, timeout: Optional[float] = None) -> DeviceAddress:
        """Resolve ``name`` to the address of the first matching device."""
        record = await self.discover_record(name, timeout)
        return DeviceAddress.from_discovery(record)
