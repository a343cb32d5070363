from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from keylight.errors import RequestError

from .models import AccessoryInfo, DeviceAddress, Status

_LOGGER = logging.getLogger(__name__)


class DeviceTransport:
    """HTTP transport for the status endpoint of one Key Light device.

    A single ``aiohttp.ClientSession`` is reused for every request. A
    session passed in by the caller is left open by :meth:`close`.
    """

    def __init__(
        self,
        address: DeviceAddress,
        timeout_seconds: float = 2.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.address = address
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    @property
    def url(self) -> str:
        return self.address.base_url

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        session = self._get_session()
        try:
            async with session.request(
                method, url, timeout=self._timeout, **kwargs
            ) as response:
                response.raise_for_status()
                if method == "PUT":
                    return None
                return await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise RequestError(f"{method} {url} timed out") from exc
        except aiohttp.ClientResponseError as exc:
            raise RequestError(f"{method} {url} failed with status {exc.status}") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise RequestError(f"{method} {url} failed: {exc}") from exc

    async def fetch(self) -> Status:
        """Fetch the current device state."""
        data = await self._request("GET", self.url)
        try:
            return Status.from_dict(data)
        except ValueError as exc:
            raise RequestError(f"Undecodable status from {self.address}") from exc

    async def push(self, status: Status) -> None:
        """Replace the full device state with ``status``."""
        _LOGGER.debug("PUT %s %s", self.url, status.to_dict())
        await self._request("PUT", self.url, json=status.to_dict())

    async def fetch_accessory_info(self) -> AccessoryInfo:
        data = await self._request("GET", self.address.accessory_info_url)
        try:
            return AccessoryInfo.from_dict(data)
        except ValueError as exc:
            raise RequestError(f"Undecodable accessory info from {self.address}") from exc

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None
