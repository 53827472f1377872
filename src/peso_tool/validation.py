"""Validaciones de entrada: peso y PIN."""

from __future__ import annotations

import math
import re

from peso_tool.model import UnitSystem

# (min, max) realistic range per display unit.
_RANGES: dict[UnitSystem, tuple[float, float]] = {
    UnitSystem.KG: (30.0, 350.0),
    UnitSystem.LB: (66.0, 770.0),
}

_PIN_RE = re.compile(r"[0-9]{4}")

MSG_EMPTY = "Ingresa un número"
MSG_INVALID = "Ingresa un número válido"
MSG_TOO_LOW = "Demasiado bajo para ser realista"
MSG_TOO_HIGH = "Demasiado alto para ser realista"
MSG_PIN = "El PIN debe tener 4 dígitos"


def parse_weight_text(text: str) -> float | None:
    """Parse user text into a float; accepts ``,`` as decimal separator."""
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def validate_weight(value: float | None, unit: UnitSystem) -> str | None:
    """Return an error message, or None when the value is acceptable.

    Args:
        value: Weight expressed in ``unit``.
        unit: Unit the user typed the value in.
    """
    if value is None:
        return MSG_EMPTY
    if not math.isfinite(value):
        return MSG_INVALID
    low, high = _RANGES[unit]
    if value < low:
        return MSG_TOO_LOW
    if value > high:
        return MSG_TOO_HIGH
    return None


def validate_weight_kg(value: float | None) -> str | None:
    """Same as :func:`validate_weight` for values already in kilograms."""
    return validate_weight(value, UnitSystem.KG)


def validate_pin(pin: str) -> str | None:
    if _PIN_RE.fullmatch(pin) is None:
        return MSG_PIN
    return None
