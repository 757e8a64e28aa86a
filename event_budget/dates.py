"""Calendar helpers and the clock used to decide what "today" is."""

from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Protocol

_YMD_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')


class Clock(Protocol):
    def today(self) -> date:
        ...


class SystemClock:
    """Clock backed by the local system date."""

    def today(self) -> date:
        return date.today()


@dataclass(frozen=True)
class FixedClock:
    """Clock pinned to a single day, used by tests and replays."""

    day: date

    def today(self) -> date:
        return self.day


def as_local_day(value: Any) -> Optional[date]:
    """Coerce ``value`` into a calendar day, dropping any time of day.

    Accepts ``date``/``datetime`` objects and strings starting with
    ``YYYY-MM-DD`` (a trailing ``T...`` time part is ignored, so an ISO
    timestamp never shifts to a different day). Anything unparseable
    returns ``None``.

    Example:
        >>> as_local_day('2025-03-31T23:59:00Z')
        datetime.date(2025, 3, 31)
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = _YMD_PATTERN.match(value.strip())
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None
    return None


def add_months(base: date, months: int) -> date:
    """Shift ``base`` by whole calendar months keeping the day of month.

    When the target month is shorter the day is clamped to its last day,
    so Jan 31 + 1 month is Feb 28 (or 29 in leap years).
    """
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(base.day, last_day))


def to_ymd(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None
