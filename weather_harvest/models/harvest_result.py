from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

"""Harvest result model.

Aggregated metrics of one run, rendered into the SUMMARY output line.
"""


@dataclass(frozen=True)
class HarvestResult:
    months_fetched: int  # month pages requested
    appended_rows: int  # day records written to the dataset
    start_row: int  # first row written (or that would have been written)
    first_covered_date: date | None  # None when the run stopped before resolving
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def up_to_date(self) -> bool:
        return self.appended_rows == 0
