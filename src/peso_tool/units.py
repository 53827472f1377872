"""Conversion kg/lb y formato de pesos para mostrar."""

from __future__ import annotations

from peso_tool.model import UnitSystem

KG_TO_LB = 2.20462262185

NO_VALUE = "—"


def kg_to_lb(kg: float) -> float:
    return kg * KG_TO_LB


def lb_to_kg(lb: float) -> float:
    return lb / KG_TO_LB


def to_display(value_kg: float, unit: UnitSystem) -> float:
    """Convert a stored kilogram value to the display unit."""
    if unit is UnitSystem.LB:
        return kg_to_lb(value_kg)
    return value_kg


def from_display(value: float, unit: UnitSystem) -> float:
    """Convert a value typed in the display unit back to kilograms."""
    if unit is UnitSystem.LB:
        return lb_to_kg(value)
    return value


def unit_label(unit: UnitSystem) -> str:
    return "lb" if unit is UnitSystem.LB else "kg"


def format_weight(value_kg: float | None, unit: UnitSystem) -> str:
    """Format a kilogram value as ``"72.5 kg"`` / ``"159.8 lb"``."""
    if value_kg is None:
        return NO_VALUE
    return f"{to_display(value_kg, unit):.1f} {unit_label(unit)}"
