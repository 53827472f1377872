"""Estadisticas de peso: agregados, promedio movil y tendencia."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

DATE_FMT = "%Y-%m-%d"

ARROW_UP = "↑"
ARROW_DOWN = "↓"
ARROW_FLAT = "→"
ARROW_UNKNOWN = "—"

DEFAULT_TREND_WINDOW = 14
DEFAULT_FLAT_EPSILON = 0.002

DatedWeight = tuple[str | date, float]


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` into a date.

    Raises:
        ValueError: If the text is not a valid calendar date.
    """
    return datetime.strptime(value, DATE_FMT).date()


def _as_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def _finite(weights: Iterable[float]) -> list[float]:
    return [w for w in weights if math.isfinite(w)]


def _finite_pairs(entries: Iterable[DatedWeight]) -> list[DatedWeight]:
    return [(d, w) for d, w in entries if math.isfinite(w)]


@dataclass(frozen=True)
class RunningStats:
    """Count/sum/min/max over a set of weights."""

    count: int
    sum: float
    min: float | None
    max: float | None

    @property
    def avg(self) -> float | None:
        if self.count == 0:
            return None
        return self.sum / self.count


def compute_stats(weights: Iterable[float]) -> RunningStats:
    """All-time stats for a list of weights (order irrelevant)."""
    values = _finite(weights)
    if not values:
        return RunningStats(0, 0.0, None, None)
    total = 0.0
    low = math.inf
    high = -math.inf
    for w in values:
        total += w
        if w < low:
            low = w
        if w > high:
            high = w
    return RunningStats(len(values), total, low, high)


def rolling_average(
    entries: Iterable[DatedWeight],
    days: int,
    today: date | None = None,
) -> float | None:
    """Average of entries dated within the last ``days`` days.

    The window is ``[today - (days - 1), today]``, so today counts as day 1.
    Only the lower bound is enforced: entries dated after ``today`` are kept.

    Args:
        entries: (date, kg) pairs in any order.
        days: Window size in calendar days (>= 1).
        today: Anchor day; defaults to ``date.today()``.

    Returns:
        The mean, or None when nothing falls in the window.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")
    anchor = today if today is not None else date.today()
    cutoff = anchor - timedelta(days=days - 1)
    total = 0.0
    n = 0
    for day, kg in _finite_pairs(entries):
        if _as_date(day) >= cutoff:
            total += kg
            n += 1
    if n == 0:
        return None
    return total / n


def trend_slope(
    entries: Sequence[DatedWeight],
    window: int = DEFAULT_TREND_WINDOW,
) -> float | None:
    """Least-squares slope (kg per step) over the most recent entries.

    The first ``window`` entries are taken as given, so the caller must pass
    them newest-first (the store's natural order). That slice is then sorted
    by date and regressed against its index ``0..n-1``; the actual gap in
    days between entries is not used.
    """
    usable = _finite_pairs(entries)
    if window < 2 or len(usable) < 2:
        return None
    # sorted() is stable: same-day entries keep their relative order.
    chunk = sorted(usable[:window], key=lambda pair: _as_date(pair[0]))
    n = len(chunk)
    if n < 2:
        return None

    ys = [kg for _, kg in chunk]
    mean_x = (n - 1) / 2.0
    mean_y = sum(ys) / n

    num = 0.0
    den = 0.0
    for i, y in enumerate(ys):
        dx = i - mean_x
        num += dx * (y - mean_y)
        den += dx * dx
    if abs(den) < 1e-9:
        return None
    return num / den


def trend_arrow(
    slope: float | None, flat_epsilon: float = DEFAULT_FLAT_EPSILON
) -> str:
    """Map a slope to an arrow with a symmetric dead-zone."""
    if slope is None:
        return ARROW_UNKNOWN
    if slope > flat_epsilon:
        return ARROW_UP
    if slope < -flat_epsilon:
        return ARROW_DOWN
    return ARROW_FLAT
