from __future__ import annotations

import logging
from ipaddress import IPv4Address
from typing import Callable, Optional, Union

import aiohttp

from keylight.core.cache import PollLoop, StatusCache
from keylight.core.discovery import KeyLightDiscovery
from keylight.core.models import AccessoryInfo, DeviceAddress, Light, Status
from keylight.core.service import DeviceTransport
from keylight.core.settings_schema import ControllerSettings
from keylight.errors import NoLightError
from keylight.utils.color_utils import clamp, kelvin_to_elgato

_LOGGER = logging.getLogger(__name__)


class KeyLightController:
    """Controls a single Key Light device.

    Every setter runs as one locked cycle: copy the cached status, change
    every light in the copy, PUT the copy to the device and commit it to the
    cache only once the device accepted it. A failed request leaves the
    cache at its last confirmed value.

    With polling enabled, a background task refreshes the cache and
    :meth:`get_status` answers from the cache. Without polling every
    :meth:`get_status` call fetches from the device.
    """

    def __init__(
        self,
        name: str,
        address: DeviceAddress,
        transport: DeviceTransport,
        poll: bool,
        settings: ControllerSettings,
    ) -> None:
        self._name = name
        self.address = address
        self._transport = transport
        self._poll = poll
        self._settings = settings
        self._cache = StatusCache()
        self._poll_loop: Optional[PollLoop] = None

    @classmethod
    async def create(
        cls,
        address: DeviceAddress,
        poll: bool = True,
        name: Optional[str] = None,
        settings: Optional[ControllerSettings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "KeyLightController":
        """Connect to a device at ``address`` and seed the cache.

        Raises RequestError if the initial fetch fails.
        """
        settings = settings or ControllerSettings()
        transport = DeviceTransport(address, settings.http_timeout_s, session)
        controller = cls(name or str(address), address, transport, poll, settings)
        try:
            await controller._cache.replace(await transport.fetch())
        except BaseException:
            await transport.close()
            raise

        if poll:
            controller._poll_loop = PollLoop(
                transport, controller._cache, settings.poll_interval_s
            )
            controller._poll_loop.start()
        _LOGGER.debug("Connected to %r at %s (poll=%s)", controller.name, address, poll)
        return controller

    @classmethod
    async def from_ip(
        cls,
        name: str,
        ip: Union[str, IPv4Address],
        poll: bool = True,
        port: Optional[int] = None,
        settings: Optional[ControllerSettings] = None,
    ) -> "KeyLightController":
        """Create a controller for a device with a known IP address.

        ``ip`` may also carry a port (``"10.0.1.32:9123"``); otherwise
        ``port`` or the configured default port is used.
        """
        settings = settings or ControllerSettings()
        if isinstance(ip, IPv4Address):
            address = DeviceAddress(ip, port or settings.default_port)
        else:
            address = DeviceAddress.parse(ip, settings.default_port)
            if port is not None:
                address = DeviceAddress(address.ip, port)
        return await cls.create(address, poll, name, settings)

    @classmethod
    async def from_name(
        cls,
        name: str,
        poll: bool = True,
        timeout: Optional[float] = None,
        settings: Optional[ControllerSettings] = None,
    ) -> "KeyLightController":
        """Find a device by its advertised name and create a controller for it.

        ``timeout`` bounds the discovery wait; ``None`` uses the configured
        discovery timeout.
        """
        settings = settings or ControllerSettings()
        discovery = KeyLightDiscovery(settings.service_type, settings.discovery_tick_s)
        address = await discovery.discover(
            name, timeout if timeout is not None else settings.discovery_timeout_s
        )
        return await cls.create(address, poll, name, settings)

    @property
    def name(self) -> str:
        return self._name

    @property
    def polled(self) -> bool:
        return self._poll

    async def get_status(self) -> Status:
        """Return the device status, from the cache when polling."""
        if self._poll:
            return await self._cache.snapshot()
        generation = self._cache.generation
        status = await self._transport.fetch()
        await self._cache.replace_if_unchanged(status, generation)
        return status

    async def accessory_info(self) -> AccessoryInfo:
        return await self._transport.fetch_accessory_info()

    async def _apply(self, change: Callable[[Light], None]) -> None:
        async with self._cache.transaction() as draft:
            for light in draft.lights:
                change(light)
            await self._transport.push(draft)

    async def set_power(self, power: bool) -> None:
        """Turn all lights on or off."""

        def change(light: Light) -> None:
            light.on = 1 if power else 0

        await self._apply(change)

    async def set_brightness(self, brightness: int) -> None:
        """Set the brightness of all lights, 0-100 (clamped)."""
        brightness = int(clamp(brightness, 0, 100))

        def change(light: Light) -> None:
            light.brightness = brightness

        await self._apply(change)

    async def set_temperature(self, temperature: float) -> None:
        """Set the color temperature of all lights in Kelvin, 2900-7000 (clamped)."""
        code = kelvin_to_elgato(temperature)

        def change(light: Light) -> None:
            light.temperature = code

        await self._apply(change)

    async def set_relative_brightness(self, brightness: float) -> float:
        """Change the brightness of all lights relative to their current value.

        ``brightness`` is a fraction between -1.0 and 1.0 (clamped), so 0.1
        raises every light by 10 percentage points. Returns the mean
        brightness of all lights after the change.
        """
        delta = clamp(brightness, -1.0, 1.0) * 100

        async with self._cache.transaction() as draft:
            if not draft.lights:
                raise NoLightError(f"{self.name} reported no lights")
            for light in draft.lights:
                light.brightness = int(round(clamp(light.brightness + delta, 0, 100)))
            await self._transport.push(draft)
        return sum(light.brightness for light in draft.lights) / len(draft.lights)

    async def aclose(self) -> None:
        """Stop polling and release the HTTP session."""
        try:
            if self._poll_loop is not None:
                await self._poll_loop.stop()
        finally:
            await self._transport.close()

    async def __aenter__(self) -> "KeyLightController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<KeyLightController {self.name!r} at {self.address} poll={self._poll}>"
