"""Modelos tipados para registros de peso y unidades."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UnitSystem(Enum):
    """Display unit. Storage is always kilograms."""

    KG = "KG"
    LB = "LB"

    @classmethod
    def from_text(cls, raw: str | None) -> UnitSystem:
        """Parse a persisted/CLI value; anything unknown falls back to KG."""
        if raw is not None and raw.strip().upper() == "LB":
            return cls.LB
        return cls.KG


@dataclass(frozen=True)
class WeightEntry:
    """One weight measurement (date-based, kilograms)."""

    id: int
    date: str
    weight_kg: float
    note: str | None = None
