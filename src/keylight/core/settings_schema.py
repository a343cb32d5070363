from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass
class ControllerSettings:
    poll_interval_s: float = 5.0
    http_timeout_s: float = 2.0
    discovery_timeout_s: float = 10.0
    discovery_tick_s: float = 0.5
    default_port: int = 9123
    service_type: str = "_elg._tcp.local."
    enable_debug_logging: bool = False


# Dotted configuration key -> ControllerSettings field
SETTING_KEYS: Dict[str, str] = {
    "poll.interval_s": "poll_interval_s",
    "http.timeout_s": "http_timeout_s",
    "discovery.timeout_s": "discovery_timeout_s",
    "discovery.tick_s": "discovery_tick_s",
    "device.default_port": "default_port",
    "discovery.service_type": "service_type",
    "advanced.enable_debug_logging": "enable_debug_logging",
}


def defaults_dict() -> Dict[str, Any]:
    s = ControllerSettings()
    return {key: getattr(s, attr) for key, attr in SETTING_KEYS.items()}


def from_dict(values: Dict[str, Any]) -> ControllerSettings:
    """Build settings from dotted keys, coercing each value to its field type."""
    types = {f.name: type(getattr(ControllerSettings(), f.name)) for f in fields(ControllerSettings)}
    kwargs: Dict[str, Any] = {}
    for key, attr in SETTING_KEYS.items():
        if key not in values:
            continue
        value = values[key]
        expected = types[attr]
        if expected is bool and not isinstance(value, bool):
            raise TypeError(f"{key} must be a boolean, got {value!r}")
        kwargs[attr] = expected(value)
    return ControllerSettings(**kwargs)
