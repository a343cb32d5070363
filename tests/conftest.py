"""Shared fixtures: an in-process fake Key Light HTTP API."""

from __future__ import annotations

import copy
from ipaddress import IPv4Address

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from keylight.core.models import DeviceAddress
from keylight.core.settings_schema import ControllerSettings

DEFAULT_STATUS = {
    "numberOfLights": 1,
    "lights": [{"on": 0, "brightness": 50, "temperature": 200}],
}


class FakeKeyLight:
    """Minimal stand-in for the device's /elgato endpoints."""

    def __init__(self, status: dict) -> None:
        self.status = copy.deepcopy(status)
        self.get_count = 0
        self.put_bodies: list[dict] = []
        self.get_http_status = 200
        self.put_http_status = 200
        self.raw_get_body: str | None = None
        self.address: DeviceAddress | None = None

        self.app = web.Application()
        self.app.router.add_get("/elgato/lights", self.handle_get)
        self.app.router.add_put("/elgato/lights", self.handle_put)
        self.app.router.add_get("/elgato/accessory-info", self.handle_accessory_info)

    async def handle_get(self, request: web.Request) -> web.Response:
        self.get_count += 1
        if self.get_http_status != 200:
            return web.Response(status=self.get_http_status)
        if self.raw_get_body is not None:
            return web.Response(text=self.raw_get_body, content_type="application/json")
        return web.json_response(self.status)

    async def handle_put(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.put_bodies.append(body)
        if self.put_http_status != 200:
            return web.Response(status=self.put_http_status)
        self.status = body
        return web.json_response(body)

    async def handle_accessory_info(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "productName": "Elgato Key Light",
                "firmwareVersion": "1.0.3",
                "serialNumber": "BW33J1A02345",
                "displayName": "Key Light Left",
                "macAddress": "3c:6a:9d:12:34:56",
            }
        )


@pytest_asyncio.fixture
async def fake_light():
    device = FakeKeyLight(DEFAULT_STATUS)
    server = TestServer(device.app, host="127.0.0.1")
    await server.start_server()
    device.address = DeviceAddress(IPv4Address("127.0.0.1"), server.port)
    yield device
    await server.close()


@pytest.fixture
def fast_settings() -> ControllerSettings:
    return ControllerSettings(poll_interval_s=0.05, http_timeout_s=1.0, discovery_tick_s=0.01)
