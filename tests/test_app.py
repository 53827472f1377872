"""Tests for the Kivy-independent helpers of the app and its entrypoint."""

from __future__ import annotations

from pathlib import Path

import pytest

from peso_tool import __main__ as entrypoint
from peso_tool.app import _entry_text, error_report
from peso_tool.model import UnitSystem, WeightEntry


def test_error_report_has_status_line_and_traceback() -> None:
    try:
        raise FileNotFoundError("/no/existe")
    except FileNotFoundError as exc:
        summary, trace = error_report("exportar", exc)
    assert summary == "Error al exportar (FileNotFoundError): /no/existe"
    assert trace.startswith("Traceback (most recent call last):")
    assert "FileNotFoundError: /no/existe" in trace


def test_entry_text() -> None:
    entry = WeightEntry(1, "2025-01-02", 72.5, "ayuno")
    assert _entry_text(entry, UnitSystem.KG) == "72.5 kg   2025-01-02   ayuno"
    assert _entry_text(WeightEntry(2, "2025-01-03", 72.5), UnitSystem.LB) == (
        "159.8 lb   2025-01-03"
    )


def test_main_passes_db_path_to_app(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    captured: dict[str, object] = {}

    def _run_app(db_path: Path | None = None) -> int:
        captured["db_path"] = db_path
        return 0

    monkeypatch.setattr("peso_tool.app.run_app", _run_app)
    db = tmp_path / "peso.sqlite3"
    assert entrypoint.main(["--db", str(db)]) == 0
    assert captured["db_path"] == db


def test_main_reports_missing_kivy(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _run_app(db_path: Path | None = None) -> int:
        raise ImportError("No module named 'kivy'")

    monkeypatch.setattr("peso_tool.app.run_app", _run_app)
    assert entrypoint.main([]) == 1
    assert "pip install" in capsys.readouterr().out
