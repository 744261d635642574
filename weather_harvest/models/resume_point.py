from __future__ import annotations

from dataclasses import dataclass
from datetime import date

"""Resume point models.

ResumePoint is computed once per run from the last stored date and never mutated.
MonthQuery identifies one month page request.
"""

__all__ = [
    "ResumePoint",
    "ResumeParams",
    "MonthQuery",
]


@dataclass(frozen=True)
class ResumePoint:
    first_covered_date: date  # first calendar day not yet stored
    present_month_start: date  # 1st of the current month
    first_month_day: int  # day-of-month of first_covered_date, truncates the first month

    @property
    def first_month_start(self) -> date:
        return self.first_covered_date.replace(day=1)


@dataclass(frozen=True)
class ResumeParams:
    """Resume point plus where appending starts in the dataset sheet."""
    resume_point: ResumePoint
    next_append_row: int  # 1-based row right after the last stored date
    last_stored_date: str  # raw cell text the resume point was derived from


@dataclass(frozen=True, order=True)
class MonthQuery:
    year: int
    month: int  # 1-12

    @classmethod
    def of(cls, d: date) -> MonthQuery:
        return cls(year=d.year, month=d.month)

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year}"
