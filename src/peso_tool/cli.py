"""CLI para registrar pesos, ver estadisticas y exportar a Excel."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from peso_tool.excel_writer import ExcelLayout, default_export_path, write_weights_xlsx
from peso_tool.model import UnitSystem
from peso_tool.reminders import local_now
from peso_tool.stats import parse_date
from peso_tool.storage import SQLiteStore
from peso_tool.summary import build_overview, overview_lines
from peso_tool.units import format_weight, from_display

logger = logging.getLogger(__name__)

DEFAULT_DB = Path.home() / ".peso_tool" / "peso.sqlite3"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Registro de peso: alta, baja, estadísticas y exportación."
    )
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB),
        help="Archivo SQLite (default: ~/.peso_tool/peso.sqlite3).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log de depuración."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Registrar un peso.")
    add.add_argument("value", type=float, help="Peso en la unidad indicada.")
    add.add_argument("--unit", choices=["kg", "lb"], default=None)
    add.add_argument("--date", default=None, help="YYYY-MM-DD (default: hoy).")
    add.add_argument("--note", default=None)

    delete = sub.add_parser("delete", help="Borrar un registro por id.")
    delete.add_argument("id", type=int)

    sub.add_parser("list", help="Listar registros (más nuevos primero).")

    stats = sub.add_parser("stats", help="Mostrar el resumen.")
    stats.add_argument("--unit", choices=["kg", "lb"], default=None)

    export = sub.add_parser("export", help="Exportar historial a Excel.")
    export.add_argument("--out", default=None, help="Ruta del .xlsx.")
    return parser.parse_args(argv)


def _resolve_unit(raw: str | None, store: SQLiteStore) -> UnitSystem:
    if raw is None:
        return store.load_config().unit
    return UnitSystem.from_text(raw)


def main() -> int:
    """Run the CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    if ns.verbose:
        logging.basicConfig(level=logging.DEBUG)
    store = SQLiteStore(Path(ns.db).expanduser())
    logger.debug("Using database %s", store.db_path)

    if ns.command == "add":
        unit = _resolve_unit(ns.unit, store)
        day = parse_date(ns.date) if ns.date else None
        entry_id = store.add_entry(from_display(ns.value, unit), day=day, note=ns.note)
        print(f"OK: registro {entry_id} guardado")
        return 0

    if ns.command == "delete":
        if not store.delete_entry(ns.id):
            print(f"No existe el registro {ns.id}")
            return 1
        print(f"OK: registro {ns.id} borrado")
        return 0

    if ns.command == "list":
        unit = store.load_config().unit
        for entry in store.list_entries():
            line = f"{entry.id:>5}  {entry.date}  {format_weight(entry.weight_kg, unit)}"
            if entry.note:
                line += f"  {entry.note}"
            print(line)
        return 0

    if ns.command == "stats":
        unit = _resolve_unit(ns.unit, store)
        overview = build_overview(store.list_entries(), unit)
        for line in overview_lines(overview):
            print(line)
        return 0

    config = store.load_config()
    if ns.out:
        out_path = Path(ns.out).expanduser()
    else:
        out_path = default_export_path(config.export_dir, local_now())
    entries = store.list_entries()
    write_weights_xlsx(entries, out_path, ExcelLayout(), config.unit)
    print(f"OK: {len(entries)} registros")
    print(f"OK: Output: {out_path}")
    return 0
