from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from ..errors import NoExistingDateError
from ..excel.reader import DateCell
from ..models.resume_point import ResumeParams
from .date_cursor import parse_last_stored_date

logger = logging.getLogger(__name__)

"""Resume point resolution from the existing dataset rows."""


def find_last_stored_date(cells: Sequence[DateCell], column_label: str = "") -> DateCell:
    """Return the last non-empty date cell in document order.

    Raises:
        NoExistingDateError: If every cell of the date column is empty
    """
    for cell in reversed(cells):
        if cell.text:
            return cell
    raise NoExistingDateError(
        "last date value not found\n"
        f"Make sure column {column_label or '?'} has a value"
    )


def resolve_resume_params(
    cells: Sequence[DateCell], column_label: str = "", today: date | None = None
) -> ResumeParams:
    """Resolve where the harvest resumes and where appending starts.

    Args:
        cells: Date column cells (row number + text) in sheet order, header excluded
        column_label: Configured date column, for error messages
        today: Override for the current date (tests)

    Returns:
        ResumeParams with the resume point and the 1-based append row

    Raises:
        NoExistingDateError: Date column entirely empty
        MalformedDateError: Last stored date is not DD.MM.YYYY
    """
    last = find_last_stored_date(cells, column_label)
    resume_point = parse_last_stored_date(last.text, today=today)
    logger.debug(f"last stored date {last.text} at row {last.row}")
    return ResumeParams(
        resume_point=resume_point,
        next_append_row=last.row + 1,
        last_stored_date=last.text,
    )
