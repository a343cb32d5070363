"""Tests for status models and device addresses."""

from __future__ import annotations

from ipaddress import IPv4Address

import pytest

from keylight.core.models import (
    AccessoryInfo,
    DeviceAddress,
    DiscoveredLight,
    Light,
    Status,
)
from keylight.errors import IPError, ParseError


class TestStatus:
    """Tests for Status wire encoding."""

    def test_from_dict(self) -> None:
        status = Status.from_dict(
            {
                "numberOfLights": 2,
                "lights": [
                    {"on": 1, "brightness": 20, "temperature": 150},
                    {"on": 0, "brightness": 80, "temperature": 300},
                ],
            }
        )

        assert status.number_of_lights == 2
        assert status.lights[0] == Light(on=1, brightness=20, temperature=150)
        assert status.lights[1].is_on is False

    def test_to_dict_uses_wire_keys(self) -> None:
        status = Status(1, [Light(on=1, brightness=50, temperature=200)])

        assert status.to_dict() == {
            "numberOfLights": 1,
            "lights": [{"on": 1, "brightness": 50, "temperature": 200}],
        }

    def test_copy_is_independent(self) -> None:
        original = Status(1, [Light(on=0, brightness=50, temperature=200)])

        clone = original.copy()
        clone.lights[0].brightness = 10
        clone.lights.append(Light())

        assert original.lights == [Light(on=0, brightness=50, temperature=200)]

    def test_empty_default(self) -> None:
        assert Status().to_dict() == {"numberOfLights": 0, "lights": []}

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {"lights": []},
            {"numberOfLights": 1},
            {"numberOfLights": 1, "lights": "nope"},
            {"numberOfLights": 1, "lights": [{"on": 1}]},
            {"numberOfLights": 1, "lights": [{"on": "x", "brightness": 1, "temperature": 143}]},
        ],
    )
    def test_from_dict_rejects_malformed(self, payload) -> None:
        with pytest.raises(ValueError):
            Status.from_dict(payload)


class TestDeviceAddress:
    """Tests for DeviceAddress parsing."""

    def test_parse_ip_only_uses_default_port(self) -> None:
        address = DeviceAddress.parse("10.0.1.32")

        assert address == DeviceAddress(IPv4Address("10.0.1.32"), 9123)
        assert address.base_url == "http://10.0.1.32:9123/elgato/lights"

    def test_parse_with_port(self) -> None:
        address = DeviceAddress.parse("192.168.1.5:8080")

        assert address.port == 8080
        assert str(address) == "192.168.1.5:8080"

    @pytest.mark.parametrize(
        "text", ["", "keylight.local", "10.0.1", "10.0.1.300", "10.0.1.2:abc", "10.0.1.2:0", "::1"]
    )
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(ParseError):
            DeviceAddress.parse(text)

    def test_from_discovery(self) -> None:
        record = DiscoveredLight(name="Key Light Left", host="192.168.1.20", port=9123)

        address = DeviceAddress.from_discovery(record)

        assert address.ip == IPv4Address("192.168.1.20")
        assert address.port == 9123

    def test_from_discovery_rejects_non_ipv4(self) -> None:
        record = DiscoveredLight(name="Key Light Left", host="254.128.0.0.0.0", port=9123)

        with pytest.raises(IPError):
            DeviceAddress.from_discovery(record)

    def test_address_is_immutable(self) -> None:
        address = DeviceAddress.parse("10.0.0.1")

        with pytest.raises(AttributeError):
            address.port = 1  # type: ignore[misc]


def test_accessory_info_from_dict() -> None:
    info = AccessoryInfo.from_dict(
        {
            "productName": "Elgato Key Light",
            "displayName": "Desk",
            "serialNumber": "BW33J1A02345",
            "firmwareVersion": "1.0.3",
            "macAddress": "3c-6a-9d-12-34-56",
        }
    )

    assert info.product_name == "Elgato Key Light"
    assert info.display_name == "Desk"
    assert info.mac_address == "3C:6A:9D:12:34:56"


@pytest.mark.parametrize(
    "payload",
    [
        {"numberOfLights": float("inf"), "lights": []},
        {"numberOfLights": 1, "lights": [{"on": float("inf"), "brightness": 1, "temperature": 143}]},
    ],
)
def test_from_dict_rejects_infinite_numbers(payload) -> None:
    with pytest.raises(ValueError):
        Status.from_dict(payload)
