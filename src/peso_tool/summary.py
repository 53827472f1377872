"""Resumen para mostrar: textos de la tarjeta de estadisticas."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from peso_tool.model import UnitSystem, WeightEntry
from peso_tool.stats import compute_stats, rolling_average, trend_arrow, trend_slope
from peso_tool.units import NO_VALUE, format_weight

ROLLING_DAYS = 7
TREND_WINDOW = 14


@dataclass(frozen=True)
class Overview:
    """Formatted overview values (unit-aware)."""

    latest: str
    avg_all: str
    avg_7: str
    min_max: str
    trend: str


def build_overview(
    entries: Sequence[WeightEntry],
    unit: UnitSystem,
    today: date | None = None,
) -> Overview:
    """Compute and format the overview card.

    Args:
        entries: Entries newest-first, as returned by ``SQLiteStore.list_entries``.
        unit: Display unit.
        today: Anchor for the rolling average (default: today).
    """
    weights = [e.weight_kg for e in entries]
    dated = [(e.date, e.weight_kg) for e in entries]

    all_time = compute_stats(weights)
    avg_7 = rolling_average(dated, ROLLING_DAYS, today=today)
    slope = trend_slope(dated, window=TREND_WINDOW)

    if entries:
        first = entries[0]
        latest = f"{format_weight(first.weight_kg, unit)} ({first.date})"
    else:
        latest = NO_VALUE

    if all_time.min is not None and all_time.max is not None:
        min_max = f"{format_weight(all_time.min, unit)} / {format_weight(all_time.max, unit)}"
    else:
        min_max = NO_VALUE

    return Overview(
        latest=latest,
        avg_all=format_weight(all_time.avg, unit),
        avg_7=format_weight(avg_7, unit),
        min_max=min_max,
        trend=trend_arrow(slope),
    )


def overview_lines(overview: Overview) -> list[str]:
    return [
        f"Último: {overview.latest}",
        f"Promedio (histórico): {overview.avg_all}",
        f"Promedio {ROLLING_DAYS} días: {overview.avg_7}",
        f"Mín / Máx: {overview.min_max}",
        f"Tendencia: {overview.trend}",
    ]
