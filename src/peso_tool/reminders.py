"""Calculo del proximo recordatorio diario."""

from __future__ import annotations

from datetime import datetime, timedelta

from dateutil import tz

from peso_tool.storage import DEFAULT_REMINDER_HOUR, DEFAULT_REMINDER_MINUTE

LOCAL_TZ = tz.tzlocal()

REMINDER_TITLE = "Recordatorio"
REMINDER_TEXT = "Es hora de registrar tu peso de hoy."


def next_reminder_at(
    now: datetime,
    hour: int = DEFAULT_REMINDER_HOUR,
    minute: int = DEFAULT_REMINDER_MINUTE,
) -> datetime:
    """Next trigger at ``hour:minute``: today if still ahead, else tomorrow.

    Raises:
        ValueError: If hour/minute are out of range.
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be 0-23, got {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"minute must be 0-59, got {minute}")
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def seconds_until_reminder(
    now: datetime,
    hour: int = DEFAULT_REMINDER_HOUR,
    minute: int = DEFAULT_REMINDER_MINUTE,
) -> float:
    return (next_reminder_at(now, hour, minute) - now).total_seconds()


def local_now() -> datetime:
    return datetime.now(tz=LOCAL_TZ)
