from __future__ import annotations

from dataclasses import dataclass, field, replace
from ipaddress import IPv4Address
from typing import Any, Dict, List

from keylight.errors import IPError, ParseError

DEFAULT_PORT = 9123


@dataclass
class Light:
    """State of one light element on a Key Light device."""
    on: int = 0
    brightness: int = 0
    temperature: int = 143  # 143-344 (Elgato units, 2900K-7000K)

    @property
    def is_on(self) -> bool:
        return bool(self.on)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Light":
        try:
            return cls(
                on=int(data["on"]),
                brightness=int(data["brightness"]),
                temperature=int(data["temperature"]),
            )
        except (KeyError, TypeError, OverflowError) as exc:
            raise ValueError(f"Invalid light payload: {data!r}") from exc

    def to_dict(self) -> Dict[str, int]:
        return {
            "on": 1 if self.on else 0,
            "brightness": self.brightness,
            "temperature": self.temperature,
        }


@dataclass
class Status:
    """Full state snapshot of a device, as sent and received on the wire."""
    number_of_lights: int = 0
    lights: List[Light] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Status":
        if not isinstance(data, dict):
            raise ValueError(f"Invalid status payload: {data!r}")
        try:
            lights = data["lights"]
            number_of_lights = int(data["numberOfLights"])
        except (KeyError, TypeError, OverflowError) as exc:
            raise ValueError(f"Invalid status payload: {data!r}") from exc
        if not isinstance(lights, list):
            raise ValueError(f"Invalid lights list: {lights!r}")
        return cls(
            number_of_lights=number_of_lights,
            lights=[Light.from_dict(light) for light in lights],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numberOfLights": self.number_of_lights,
            "lights": [light.to_dict() for light in self.lights],
        }

    def copy(self) -> "Status":
        """Return a deep copy that can be mutated independently."""
        return replace(self, lights=[replace(light) for light in self.lights])


@dataclass(frozen=True)
class DeviceAddress:
    """IPv4 address and port of a device's HTTP API."""
    ip: IPv4Address
    port: int = DEFAULT_PORT

    @property
    def base_url(self) -> str:
        return f"http://{self.ip}:{self.port}/elgato/lights"

    @property
    def accessory_info_url(self) -> str:
        return f"http://{self.ip}:{self.port}/elgato/accessory-info"

    @classmethod
    def parse(cls, text: str, default_port: int = DEFAULT_PORT) -> "DeviceAddress":
        """Parse ``a.b.c.d`` or ``a.b.c.d:port``."""
        host, sep, port_text = text.strip().partition(":")
        try:
            ip = IPv4Address(host)
            port = int(port_text) if sep else default_port
        except ValueError as exc:
            raise ParseError(f"Invalid device address: {text!r}") from exc
        if not 0 < port < 65536:
            raise ParseError(f"Invalid port in device address: {text!r}")
        return cls(ip, port)

    @classmethod
    def from_discovery(cls, record: "DiscoveredLight") -> "DeviceAddress":
        try:
            return cls(IPv4Address(record.host), record.port)
        except ValueError as exc:
            raise IPError(
                f"Discovered device {record.name!r} has no IPv4 address: {record.host!r}"
            ) from exc

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class DiscoveredLight:
    """A matching service announcement, before its address is validated."""
    name: str
    host: str
    port: int


@dataclass
class AccessoryInfo:
    """Identity details reported by ``/elgato/accessory-info``."""
    product_name: str = ""
    display_name: str = ""
    serial_number: str = ""
    firmware_version: str = ""
    mac_address: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessoryInfo":
        if not isinstance(data, dict):
            raise ValueError(f"Invalid accessory info payload: {data!r}")
        mac = data.get("macAddress") or data.get("mac") or ""
        return cls(
            product_name=str(data.get("productName", "")),
            display_name=str(data.get("displayName", "")),
            serial_number=str(data.get("serialNumber", "")),
            firmware_version=str(data.get("firmwareVersion", "")),
            mac_address=str(mac).upper().replace("-", ":"),
        )
