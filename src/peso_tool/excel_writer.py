"""Generación de Excel formateado con el historial de peso."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from peso_tool.history import daily_weight_summary, entries_to_frame, with_display_unit
from peso_tool.model import UnitSystem, WeightEntry
from peso_tool.units import unit_label

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the export."""

    history_sheet: str = "Historial"
    daily_sheet: str = "Resumen diario"


def default_export_path(export_dir: str, now: datetime) -> Path:
    """Timestamped output path under ``export_dir`` (default: ./salidas)."""
    out_dir = Path(export_dir).expanduser() if export_dir else Path.cwd() / "salidas"
    return out_dir / f"peso_historial_{now.strftime('%Y-%m-%d_%H-%M-%S')}.xlsx"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    if i is None or (isinstance(i, float) and pd.isna(i)):
        return ""
    if isinstance(i, int | float):
        idx = int(i)
        return _DIA_SEMANA[idx] if 0 <= idx < 7 else ""
    return ""


def _header_map(unit: UnitSystem) -> dict[str, str]:
    label = unit_label(unit)
    return {
        "weekday": "Día",
        "date": "Fecha",
        "weight": f"Peso ({label})",
        "note": "Nota",
        "weight_count": "Registros",
        "weight_min": "Mín (kg)",
        "weight_max": "Máx (kg)",
        "weight_avg": "Promedio (kg)",
    }


def _history_frame(entries: Sequence[WeightEntry], unit: UnitSystem) -> pd.DataFrame:
    """Weekday, date, weight (display unit), note."""
    frame = with_display_unit(entries_to_frame(entries), unit)
    out = frame.loc[:, ["date", "weight", "note"]].copy()
    if out.empty:
        out.insert(0, "weekday", pd.Series(dtype=str))
    else:
        out.insert(
            0, "weekday", pd.to_datetime(out["date"]).dt.weekday.map(_weekday_label)
        )
    return out


def write_weights_xlsx(
    entries: Sequence[WeightEntry],
    out_path: Path,
    layout: ExcelLayout,
    unit: UnitSystem = UnitSystem.KG,
) -> None:
    """Write the weight history and a daily summary to an XLSX file.

    Args:
        entries: Entries in any order; they are sorted chronologically.
        out_path: Output path for the XLSX file.
        layout: Sheet names.
        unit: Unit used for the history weight column.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    headers = _header_map(unit)

    history_df = _history_frame(entries, unit).rename(columns=headers)
    daily_df = daily_weight_summary(entries_to_frame(entries)).rename(columns=headers)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        history_df.to_excel(writer, index=False, sheet_name=layout.history_sheet)
        daily_df.to_excel(writer, index=False, sheet_name=layout.daily_sheet)
        _format_sheet(writer.book[layout.history_sheet])
        _format_sheet(writer.book[layout.daily_sheet])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    for header, idx in col_index.items():
        if header == "Día":
            width = 6
        elif header == "Nota":
            width = 30
        else:
            width = 14
        letter = ws.cell(row=1, column=idx).column_letter
        ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    """Fecha como dd/mm/yyyy, pesos con un decimal."""
    for row in ws.iter_rows(min_row=2):
        for header, idx in col_index.items():
            if header == "Fecha":
                row[idx - 1].number_format = "dd/mm/yyyy"
            elif header.startswith(("Peso", "Mín", "Máx", "Promedio")):
                row[idx - 1].number_format = "0.0"


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
