"""Tests for CLI entrypoints."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from peso_tool import cli
from peso_tool.model import UnitSystem
from peso_tool.storage import AppConfig, SQLiteStore


def _run(monkeypatch: pytest.MonkeyPatch, db: Path, *args: str) -> int:
    monkeypatch.setattr("sys.argv", ["prog", "--db", str(db), *args])
    return cli.main()


def test_parse_args_add(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        ["prog", "--db", "/tmp/x.sqlite3", "add", "72.5", "--unit", "lb", "--note", "hola"],
    )
    ns = cli.parse_args()
    assert ns.db == "/tmp/x.sqlite3"
    assert ns.command == "add"
    assert ns.value == 72.5
    assert ns.unit == "lb"
    assert ns.note == "hola"
    assert ns.date is None


def test_parse_args_requires_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["prog"])
    with pytest.raises(SystemExit):
        cli.parse_args()


def test_add_list_and_stats(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = tmp_path / "peso.sqlite3"
    assert _run(monkeypatch, db, "add", "70", "--date", "2025-01-01") == 0
    assert _run(monkeypatch, db, "add", "71", "--date", "2025-01-02") == 0
    assert _run(monkeypatch, db, "add", "158.73", "--unit", "lb", "--date", "2025-01-03") == 0

    entries = SQLiteStore(db).list_entries()
    assert [e.date for e in entries] == ["2025-01-03", "2025-01-02", "2025-01-01"]
    assert entries[0].weight_kg == pytest.approx(72.0, abs=0.01)

    capsys.readouterr()
    assert _run(monkeypatch, db, "stats") == 0
    out = capsys.readouterr().out
    assert "Último: 72.0 kg (2025-01-03)" in out
    assert "Tendencia: ↑" in out

    assert _run(monkeypatch, db, "list") == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert "2025-01-03" in lines[0]


def test_stats_uses_saved_unit(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = tmp_path / "peso.sqlite3"
    store = SQLiteStore(db)
    store.save_config(AppConfig(unit=UnitSystem.LB))
    store.add_entry(72.5, day=date(2025, 1, 3))

    assert _run(monkeypatch, db, "stats") == 0
    assert "159.8 lb" in capsys.readouterr().out
    assert _run(monkeypatch, db, "stats", "--unit", "kg") == 0
    assert "72.5 kg" in capsys.readouterr().out


def test_add_propagates_validation_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    with pytest.raises(ValueError):
        _run(monkeypatch, tmp_path / "peso.sqlite3", "add", "5")


def test_delete_known_and_unknown(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = tmp_path / "peso.sqlite3"
    entry_id = SQLiteStore(db).add_entry(70.0)
    assert _run(monkeypatch, db, "delete", str(entry_id)) == 0
    assert _run(monkeypatch, db, "delete", str(entry_id)) == 1
    assert "No existe el registro" in capsys.readouterr().out


def test_export_writes_xlsx(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db = tmp_path / "peso.sqlite3"
    SQLiteStore(db).add_entry(70.0, day=date(2025, 1, 1))
    out = tmp_path / "salidas" / "historial.xlsx"
    assert _run(monkeypatch, db, "export", "--out", str(out)) == 0
    assert out.exists()


def test_export_default_path_uses_export_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    db = tmp_path / "peso.sqlite3"
    store = SQLiteStore(db)
    store.save_config(AppConfig(export_dir=str(tmp_path / "exports")))
    store.add_entry(70.0, day=date(2025, 1, 1))
    assert _run(monkeypatch, db, "export") == 0
    files = list((tmp_path / "exports").glob("peso_historial_*.xlsx"))
    assert len(files) == 1
