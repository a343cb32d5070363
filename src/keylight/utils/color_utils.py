from __future__ import annotations

KELVIN_MIN = 2900
KELVIN_MAX = 7000
ELGATO_TEMP_MIN = 143
ELGATO_TEMP_MAX = 344

_KELVIN_SPAN = KELVIN_MAX - KELVIN_MIN
_ELGATO_SPAN = ELGATO_TEMP_MAX - ELGATO_TEMP_MIN


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the closed range [low, high]."""
    return max(low, min(high, value))


def kelvin_to_elgato(kelvin: float) -> int:
    """Convert Kelvin (2900K-7000K) to an Elgato temperature value (143-344).

    Out-of-range input is clamped, so 2900K maps to 143 and 7000K to 344.
    """
    kelvin = clamp(kelvin, KELVIN_MIN, KELVIN_MAX)
    # Multiply before dividing to keep x.5 results exact
    code = ELGATO_TEMP_MIN + (kelvin - KELVIN_MIN) * _ELGATO_SPAN / _KELVIN_SPAN
    return int(clamp(round(code), ELGATO_TEMP_MIN, ELGATO_TEMP_MAX))


def elgato_to_kelvin(value: int) -> int:
    """Convert Elgato temperature value (143-344) to Kelvin (2900K-7000K)."""
    value = clamp(value, ELGATO_TEMP_MIN, ELGATO_TEMP_MAX)
    return round(KELVIN_MIN + (value - ELGATO_TEMP_MIN) * _KELVIN_SPAN / _ELGATO_SPAN)
