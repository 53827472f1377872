"""Persistencia SQLite para configuracion, PIN y registros de peso."""

from __future__ import annotations

import hmac
import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from hashlib import sha256
from pathlib import Path
from typing import Any

from peso_tool.model import UnitSystem, WeightEntry
from peso_tool.stats import parse_date
from peso_tool.validation import validate_pin, validate_weight_kg

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS weights (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    weight_kg REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_weights_date
ON weights(date);
"""

PIN_KEY = "pin_hash"
LEGACY_WEIGHTS_KEY = "weights_json"

DEFAULT_REMINDER_HOUR = 20
DEFAULT_REMINDER_MINUTE = 0


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    unit: UnitSystem = UnitSystem.KG
    export_dir: str = ""
    reminder_enabled: bool = False
    reminder_hour: int = DEFAULT_REMINDER_HOUR
    reminder_minute: int = DEFAULT_REMINDER_MINUTE


class SQLiteStore:
    """Repositorio SQLite para la app."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            self._migrate(conn)
            conn.commit()

    def _migrate(self, conn: sqlite3.Connection) -> None:
        """Apply lightweight schema/data migrations."""
        cols = {row["name"] for row in conn.execute("PRAGMA table_info(weights)")}
        if "note" not in cols:
            logger.debug("Adding weights.note column")
            conn.execute("ALTER TABLE weights ADD COLUMN note TEXT")

        # Older builds kept every entry as one JSON blob in the key/value table.
        row = conn.execute(
            "SELECT value FROM app_config WHERE key = ?", (LEGACY_WEIGHTS_KEY,)
        ).fetchone()
        if row is None:
            return
        legacy = _parse_legacy_weights(row["value"])
        conn.executemany(
            "INSERT INTO weights(date, weight_kg, note) VALUES (?, ?, ?)",
            legacy,
        )
        conn.execute("DELETE FROM app_config WHERE key = ?", (LEGACY_WEIGHTS_KEY,))
        logger.info("Migrated %d legacy weight entries", len(legacy))

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            unit=UnitSystem.from_text(values.get("unit_system")),
            export_dir=values.get("export_dir", defaults.export_dir),
            reminder_enabled=values.get("reminder_enabled") == "1",
            reminder_hour=_parse_bounded_int(
                values.get("reminder_hour"), 0, 23, defaults.reminder_hour
            ),
            reminder_minute=_parse_bounded_int(
                values.get("reminder_minute"), 0, 59, defaults.reminder_minute
            ),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "unit_system": config.unit.value,
            "export_dir": config.export_dir,
            "reminder_enabled": "1" if config.reminder_enabled else "0",
            "reminder_hour": str(config.reminder_hour),
            "reminder_minute": str(config.reminder_minute),
        }
        self._put_values(payload)

    def _put_values(self, payload: dict[str, str]) -> None:
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()

    def has_pin(self) -> bool:
        return self._pin_hash() is not None

    def set_pin(self, pin: str) -> None:
        """Guarda (o reemplaza) el PIN.

        Raises:
            ValueError: If the PIN is not exactly four digits.
        """
        error = validate_pin(pin)
        if error is not None:
            raise ValueError(error)
        self._put_values({PIN_KEY: _pin_digest(pin)})
        logger.info("PIN updated")

    def check_pin(self, pin: str) -> bool:
        """Compare ``pin`` with the stored one (False when none is set)."""
        stored = self._pin_hash()
        if stored is None:
            return False
        return hmac.compare_digest(stored, _pin_digest(pin))

    def clear_pin(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM app_config WHERE key = ?", (PIN_KEY,))
            conn.commit()

    def _pin_hash(self) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM app_config WHERE key = ?", (PIN_KEY,)
            ).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def add_entry(
        self,
        weight_kg: float,
        *,
        day: date | None = None,
        note: str | None = None,
    ) -> int:
        """Inserta un registro de peso. Devuelve el id nuevo.

        Args:
            weight_kg: Weight in kilograms.
            day: Measurement day (default: today).
            note: Optional free text; blank notes are stored as NULL.

        Raises:
            ValueError: If the weight is missing, non-finite or unrealistic.
        """
        error = validate_weight_kg(weight_kg)
        if error is not None:
            raise ValueError(error)
        entry_day = day if day is not None else date.today()
        clean_note = note.strip() if note is not None and note.strip() else None
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO weights(date, weight_kg, note) VALUES (?, ?, ?)",
                (entry_day.isoformat(), float(weight_kg), clean_note),
            )
            entry_id = int(cur.lastrowid)
            conn.commit()
        logger.info("Added entry %d: %.2f kg on %s", entry_id, weight_kg, entry_day)
        return entry_id

    def delete_entry(self, entry_id: int) -> bool:
        """Borra un registro por id. Devuelve True si existia."""
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM weights WHERE id = ?", (entry_id,))
            conn.commit()
        deleted = cur.rowcount > 0
        if deleted:
            logger.info("Deleted entry %d", entry_id)
        else:
            logger.debug("No entry with id %d", entry_id)
        return deleted

    def list_entries(self) -> list[WeightEntry]:
        """All entries, newest first (date DESC, id DESC)."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, date, weight_kg, note
                FROM weights
                ORDER BY date DESC, id DESC
                """
            ).fetchall()
        return [
            WeightEntry(
                id=int(row["id"]),
                date=str(row["date"]),
                weight_kg=float(row["weight_kg"]),
                note=row["note"],
            )
            for row in rows
        ]


def _pin_digest(pin: str) -> str:
    return sha256(pin.encode("utf-8")).hexdigest()


def _parse_bounded_int(raw: str | None, low: int, high: int, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if not low <= value <= high:
        return default
    return value


def _parse_legacy_weights(raw: str) -> list[tuple[str, float, str | None]]:
    try:
        parsed: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable legacy weights payload")
        return []
    if not isinstance(parsed, list):
        return []
    out: list[tuple[str, float, str | None]] = []
    # Legacy ids are not reused; the table assigns new ones.
    for item in parsed:
        if not isinstance(item, dict):
            continue
        day = item.get("date")
        kg = item.get("weightKg")
        if not _valid_legacy_item(day, kg):
            logger.debug("Skipping legacy weight item %r", item)
            continue
        note = item.get("note")
        out.append((day, float(kg), note if isinstance(note, str) and note else None))
    # The JSON list was newest-first; insert oldest first so ids stay ordered.
    out.reverse()
    return out


def _valid_legacy_item(day: object, kg: object) -> bool:
    """Date must be ``YYYY-MM-DD`` and weight realistic (bools are rejected)."""
    if not isinstance(day, str) or isinstance(kg, bool):
        return False
    if not isinstance(kg, int | float):
        return False
    try:
        parse_date(day)
        value = float(kg)
    except (ValueError, OverflowError):
        return False
    return validate_weight_kg(value) is None
