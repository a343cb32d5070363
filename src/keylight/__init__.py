"""Async controller for Elgato Key Light devices."""

from keylight.controller import KeyLightController
from keylight.core.discovery import KeyLightDiscovery
from keylight.core.models import AccessoryInfo, DeviceAddress, Light, Status
from keylight.core.settings_schema import ControllerSettings
from keylight.errors import (
    CancelError,
    DiscoverError,
    DiscoverTimeoutError,
    IPError,
    KeyLightError,
    NoLightError,
    ParseError,
    RequestError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "KeyLightController",
    "KeyLightDiscovery",
    "AccessoryInfo",
    "DeviceAddress",
    "Light",
    "Status",
    "ControllerSettings",
    "KeyLightError",
    "ParseError",
    "NoLightError",
    "DiscoverError",
    "DiscoverTimeoutError",
    "RequestError",
    "IPError",
    "CancelError",
]
