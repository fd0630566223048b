"""
Calendar arithmetic for day-level recovery metrics.

Dates are plain ``datetime.date`` values: a calendar day with no time-of-day,
so there is no midnight/UTC offset to get wrong. Strings are split into
year/month/day instead of going through a datetime parser, and timestamps are
converted to the evaluation timezone before their date is taken.
"""
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Sequence, Union

import pytz

DateLike = Union[str, date, datetime, Sequence[int]]

DEFAULT_TIMEZONE = "America/Los_Angeles"


def parse_date_key(value: DateLike) -> date:
    """Turn a ``YYYY-MM-DD`` key, a (year, month, day) triple or a date into a date.

    Months are 1-indexed. A ``datetime`` keeps its own calendar date; use
    :func:`to_local_date` when the timestamp must be shifted to a timezone first.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        parts = value.strip()[:10].split("-")
        if len(parts) != 3:
            raise ValueError(f"Invalid date key: {value!r}")
        try:
            year, month, day = (int(p) for p in parts)
        except ValueError:
            raise ValueError(f"Invalid date key: {value!r}") from None
        return date(year, month, day)
    if isinstance(value, (tuple, list)) and len(value) == 3:
        year, month, day = value
        return date(int(year), int(month), int(day))
    raise ValueError(f"Unsupported date value: {value!r}")


def get_timezone(tz: Optional[str] = None):
    try:
        return pytz.timezone(tz or DEFAULT_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {tz}") from None


def to_local_date(moment: datetime, tz: Optional[str] = None) -> date:
    """Calendar date of ``moment`` as seen in ``tz``. Naive timestamps are UTC."""
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    return moment.astimezone(get_timezone(tz)).date()


def today(tz: Optional[str] = None) -> date:
    # Re-read on every call; nothing below the HTTP layer should use this.
    return datetime.now(get_timezone(tz)).date()


def days_between(a: date, b: date) -> int:
    """Whole days from ``a`` to ``b``; negative when ``a`` is after ``b``."""
    return (b - a).days


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def start_of_year(d: date) -> date:
    return d.replace(month=1, day=1)


def date_range(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` to ``end``, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def trailing_window(as_of: date, days: int) -> tuple:
    """(first, last) dates of the ``days``-long window ending at ``as_of``."""
    return as_of - timedelta(days=max(days, 1) - 1), as_of
