from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.resume_point import MonthQuery, ResumePoint
from .date_cursor import iter_month_queries

"""Progress display service with tqdm (TTY only).

One bar over the months of the run. In non-TTY environments (CI, cron) the bar
is disabled so log output stays free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
    "count_months",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


def count_months(resume_point: ResumePoint) -> int:
    return sum(1 for _ in iter_month_queries(resume_point))


class ProgressTracker:
    """Progress tracker using tqdm for month page fetching."""

    def __init__(self, total_months: int, *, description: str = "Fetching months") -> None:
        self.total_months = total_months
        self.description = description
        self.current_month = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_months,
                desc=description,
                unit="month",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_month(self, query: MonthQuery) -> None:
        self.current_month += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({query})")

    def finish_month(self, **postfix: Any) -> None:
        """Advance the bar by one month and show `postfix` stats (e.g. records=42)."""
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            if postfix:
                self.pbar.set_postfix(**postfix)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
