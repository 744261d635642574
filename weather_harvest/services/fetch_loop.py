from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import UnexpectedPageStructureError
from ..models.day_record import DayRecord
from ..models.resume_point import MonthQuery, ResumePoint
from .date_cursor import iter_month_queries
from .extractor import extract_month_records
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Month-by-month fetch loop.

Strictly sequential: one month is fetched and parsed before the next request.
All-or-nothing: the first failing month aborts the run and no records are
returned. A fresh run is the retry mechanism.
"""

FetchPage = Callable[[MonthQuery], bytes]


def fetch_all_months(
    resume_point: ResumePoint,
    fetch_page: FetchPage,
    progress: ProgressTracker | None = None,
) -> list[DayRecord]:
    """Fetch and extract every month from the resume point through the present month.

    Args:
        resume_point: Resume point of this run
        fetch_page: Returns the raw page body for a month, raises FetchFailedError on failure
        progress: Optional progress tracker advanced once per month

    Returns:
        All extracted records of the run in document order

    Raises:
        FetchFailedError: A month page could not be retrieved
        UnexpectedPageStructureError: A month page could not be mapped to day records
    """
    records: list[DayRecord] = []
    for index, query in enumerate(iter_month_queries(resume_point)):
        if progress is not None:
            progress.start_month(query)
        body = fetch_page(query)
        try:
            monthly = extract_month_records(body, is_first_month=index == 0, resume_point=resume_point)
        except UnexpectedPageStructureError as e:
            raise UnexpectedPageStructureError(f"month {query}: {e}", query=query) from e
        logger.info(f"month={query} records={len(monthly)}")
        records.extend(monthly)
        if progress is not None:
            progress.finish_month(records=len(records))
    return records
