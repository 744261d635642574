from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from ..errors import MalformedDateError
from ..models.resume_point import MonthQuery, ResumePoint

"""Calendar month stepping and resume point parsing.

All arithmetic is done on `datetime.date` values: adding one day and stepping
one month are calendar operations, so month lengths and DST changes cannot
make the cursor skip or repeat a month.
"""

__all__ = [
    "STORED_DATE_FORMAT",
    "parse_last_stored_date",
    "present_month_start",
    "advance_one_calendar_month",
    "iter_month_queries",
    "format_stored_date",
]

STORED_DATE_FORMAT = "%d.%m.%Y"
_STORED_DATE_RE = re.compile(r"([0-9]{2})\.([0-9]{2})\.([0-9]{4})")


def present_month_start(today: date | None = None) -> date:
    """Return the first day of the current (local) month."""
    if today is None:
        today = date.today()
    return today.replace(day=1)


def advance_one_calendar_month(d: date) -> date:
    """Return the same day-of-month in the next month, rolling the year after December.

    The fetch loop only ever steps dates pinned to day 1, so the target day
    always exists.
    """
    if d.month == 12:
        return d.replace(year=d.year + 1, month=1)
    return d.replace(month=d.month + 1)


def parse_last_stored_date(text: str, today: date | None = None) -> ResumePoint:
    """Parse the last stored `DD.MM.YYYY` date into a ResumePoint.

    Args:
        text: Date cell text of the last stored row
        today: Override for the current date (tests)

    Returns:
        ResumePoint whose first_covered_date is the day after `text`

    Raises:
        MalformedDateError: If the separators, field lengths or the calendar date are invalid
    """
    match = _STORED_DATE_RE.fullmatch(text.strip())
    if match is None:
        raise MalformedDateError(
            f"failed to parse date: {text!r}\nMake sure the date is in format DD.MM.YYYY"
        )
    day, month, year = (int(g) for g in match.groups())
    try:
        stored = date(year, month, day)
    except ValueError as e:
        raise MalformedDateError(f"failed to parse date: {text!r} ({e})") from e

    first_covered = stored + timedelta(days=1)
    return ResumePoint(
        first_covered_date=first_covered,
        present_month_start=present_month_start(today),
        first_month_day=first_covered.day,
    )


def iter_month_queries(resume_point: ResumePoint) -> Iterator[MonthQuery]:
    """Yield one MonthQuery per month from the resume month through the present month.

    Empty when the resume point already lies past the present month.
    """
    cursor = resume_point.first_month_start
    while cursor <= resume_point.present_month_start:
        yield MonthQuery.of(cursor)
        cursor = advance_one_calendar_month(cursor)


def format_stored_date(value: object) -> str:
    """Render a date cell value the way dates are stored in the dataset.

    Cells typed as dates in Excel come back from openpyxl as datetime objects;
    everything else is passed through as stripped text.
    """
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime(STORED_DATE_FORMAT)
    return str(value).strip()
