from __future__ import annotations


class KeyLightError(Exception):
    """Base class for all Key Light controller errors."""


class ParseError(KeyLightError):
    """An address string could not be parsed."""


class NoLightError(KeyLightError):
    """The device reported no lights to operate on."""


class DiscoverError(KeyLightError):
    """No matching device was found on the network."""


class DiscoverTimeoutError(DiscoverError):
    """No matching device announced itself before the timeout expired."""


class RequestError(KeyLightError):
    """A request to the device failed.

    Covers connection failures, non-success HTTP statuses and undecodable
    response bodies. The underlying exception is kept as ``__cause__``.
    """


class IPError(KeyLightError):
    """A discovered service did not carry a usable IPv4 address."""


class CancelError(KeyLightError):
    """The discovery worker failed while being told to stop."""
