"""Tablas pandas del historial de peso (orden cronologico + resumen diario)."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from peso_tool.model import UnitSystem, WeightEntry
from peso_tool.units import to_display

ENTRY_COLUMNS = ["id", "date", "weight_kg", "note"]
DAILY_COLUMNS = ["date", "weight_count", "weight_min", "weight_max", "weight_avg"]


def entries_to_frame(entries: Sequence[WeightEntry]) -> pd.DataFrame:
    """Convert entries to a chronological DataFrame (date, then id)."""
    rows = [
        {
            "id": e.id,
            "date": pd.to_datetime(e.date, errors="coerce").date(),
            "weight_kg": e.weight_kg,
            "note": e.note,
        }
        for e in entries
    ]
    df = pd.DataFrame(rows, columns=ENTRY_COLUMNS)
    if df.empty:
        return df
    return df.sort_values(["date", "id"]).reset_index(drop=True)


def daily_weight_summary(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate weight by day (count/min/max/avg)."""
    if frame.empty:
        return pd.DataFrame(columns=DAILY_COLUMNS)
    g = frame.groupby("date", as_index=False).agg(
        weight_count=("weight_kg", "count"),
        weight_min=("weight_kg", "min"),
        weight_max=("weight_kg", "max"),
        weight_avg=("weight_kg", "mean"),
    )
    g["weight_avg"] = g["weight_avg"].round(2)
    return g.sort_values("date").reset_index(drop=True)


def with_display_unit(frame: pd.DataFrame, unit: UnitSystem) -> pd.DataFrame:
    """Add a ``weight`` column in the display unit (1 decimal)."""
    out = frame.copy()
    if out.empty:
        out["weight"] = pd.Series(dtype=float)
        return out
    out["weight"] = out["weight_kg"].map(lambda kg: round(to_display(kg, unit), 1))
    return out
