"""Punto de entrada de la app Kivy (misma base de datos que la CLI)."""

from __future__ import annotations

import argparse
from pathlib import Path

from peso_tool.cli import DEFAULT_DB


def _parse_app_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Registro de peso (app Kivy).")
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB),
        help="Archivo SQLite (default: ~/.peso_tool/peso.sqlite3).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Launch the app on the chosen database; 1 when Kivy is unavailable."""
    ns = _parse_app_args(argv)
    try:
        from peso_tool.app import run_app

        return run_app(Path(ns.db).expanduser())
    except ImportError as exc:
        print(f"Kivy no está disponible ({exc}).")
        print("Instala el extra GUI: pip install 'peso-tool[gui]'")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
