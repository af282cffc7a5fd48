"""Week boundaries and day keys.

Weeks always run Monday to Sunday regardless of locale. Every day-bucketed
lookup (queues, deficits, assignments) is keyed by ``date_key``.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value: DateLike) -> datetime:
    """Monday 00:00:00 of the week containing ``value``."""
    day = _as_date(value)
    monday = day - timedelta(days=day.weekday())
    return datetime.combine(monday, time.min)


def week_end(value: DateLike) -> datetime:
    """Sunday 23:59:59.999 of the week containing ``value``."""
    sunday = week_start(value).date() + timedelta(days=6)
    return datetime.combine(sunday, time(23, 59, 59, 999000))


def date_key(value: DateLike) -> str:
    """Canonical YYYY-MM-DD key."""
    return _as_date(value).isoformat()


def parse_date_key(key: str) -> date:
    return date.fromisoformat(key)


def week_dates(value: DateLike) -> List[date]:
    """The seven days of the week containing ``value``, Monday first."""
    monday = week_start(value).date()
    return [monday + timedelta(days=offset) for offset in range(7)]
