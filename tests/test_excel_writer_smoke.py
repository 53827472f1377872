from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import cast

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from peso_tool.excel_writer import (
    ExcelLayout,
    _format_sheet,
    default_export_path,
    write_weights_xlsx,
)
from peso_tool.model import UnitSystem, WeightEntry


def _entries() -> list[WeightEntry]:
    return [
        WeightEntry(2, "2025-12-16", 72.5, "post gym"),
        WeightEntry(1, "2025-12-15", 72.0),
    ]


def test_write_weights_xlsx_history_sheet(tmp_path: Path) -> None:
    """Una fila por registro, en orden cronológico."""
    out = tmp_path / "nested" / "out.xlsx"
    write_weights_xlsx(_entries(), out, ExcelLayout(), UnitSystem.KG)

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().history_sheet])

    headers = [cell.value for cell in ws[1]]
    assert headers == ["Día", "Fecha", "Peso (kg)", "Nota"]
    assert ws.cell(row=2, column=1).value == "lun"
    assert cast(datetime, ws.cell(row=2, column=2).value).date().isoformat() == "2025-12-15"
    assert ws.cell(row=2, column=3).value == 72.0
    assert ws.cell(row=3, column=4).value == "post gym"

    assert ws.column_dimensions["A"].width == 6
    assert ws.column_dimensions["D"].width == 30
    assert ws.cell(row=2, column=2).number_format == "dd/mm/yyyy"
    assert ws.cell(row=2, column=3).number_format == "0.0"
    assert ws.cell(row=1, column=1).font.bold is True


def test_write_weights_xlsx_pounds_and_daily_sheet(tmp_path: Path) -> None:
    out = tmp_path / "out.xlsx"
    write_weights_xlsx(_entries(), out, ExcelLayout(), UnitSystem.LB)

    wb = load_workbook(out)
    history = cast(Worksheet, wb[ExcelLayout().history_sheet])
    assert history.cell(row=1, column=3).value == "Peso (lb)"
    assert history.cell(row=2, column=3).value == 158.7

    daily = cast(Worksheet, wb[ExcelLayout().daily_sheet])
    headers = [cell.value for cell in daily[1]]
    assert headers == ["Fecha", "Registros", "Mín (kg)", "Máx (kg)", "Promedio (kg)"]
    assert daily.max_row == 3


def test_write_weights_xlsx_empty(tmp_path: Path) -> None:
    out = tmp_path / "empty.xlsx"
    write_weights_xlsx([], out, ExcelLayout())
    wb = load_workbook(out)
    ws = wb[ExcelLayout().history_sheet]
    assert [cell.value for cell in ws[1]] == ["Día", "Fecha", "Peso (kg)", "Nota"]
    assert ws.max_row == 1


def test_format_sheet_handles_unknown_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
    assert ws.column_dimensions["A"].width == 14


def test_default_export_path_uses_export_dir_and_timestamp(tmp_path: Path) -> None:
    now = datetime(2025, 12, 16, 20, 5, 9)
    out = default_export_path(str(tmp_path / "exports"), now)
    assert out == tmp_path / "exports" / "peso_historial_2025-12-16_20-05-09.xlsx"


def test_default_export_path_falls_back_to_salidas(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    out = default_export_path("", datetime(2025, 1, 1))
    assert out.parent == tmp_path / "salidas"
