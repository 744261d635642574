from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, Tag

from ..errors import UnexpectedPageStructureError
from ..models.day_record import DayRecord, escape_leading_minus
from ..models.resume_point import ResumePoint

logger = logging.getLogger(__name__)

"""Day record extraction from one month history page.

The month page holds one `<tr data-day="N">` per day. Cells are addressed by
position, so the layout of the source site is encoded in CELL_FIELDS below:
a layout change means editing that table, not the walk.

Any missing cell or text aborts the whole month with UnexpectedPageStructureError.
Writing a partially mapped row into the dataset is never acceptable.
"""

__all__ = [
    "DAY_MARKER_ATTR",
    "CELL_FIELDS",
    "extract_month_records",
]

DAY_MARKER_ATTR = "data-day"

# cell position -> (DayRecord field, text wrapped in <a>, escape leading minus)
# positions 7 and 8 (feels-like temperature and the weather icon) are not stored
CELL_FIELDS: dict[int, tuple[str, bool, bool]] = {
    0: ("date", True, False),
    1: ("min_temperature", False, True),
    2: ("max_temperature", False, True),
    3: ("max_sustained_wind", False, False),
    4: ("max_gust_wind", False, False),
    5: ("rainfall", False, False),
    6: ("snow_depth", False, False),
    9: ("description", False, False),
}


def _significant_children(node: Tag) -> list[PageElement]:
    # whitespace-only strings and comments sit between the real nodes
    return [
        child
        for child in _content_children(node)
        if not (isinstance(child, NavigableString) and not child.strip())
    ]


def _content_children(node: Tag) -> list[PageElement]:
    # a whitespace-only text node is a value (a blank cell), only comments are dropped
    return [child for child in node.children if not isinstance(child, Comment)]


def _cell_text(cell: Tag, linked: bool, day: int, field: str) -> str:
    target: PageElement = cell
    if linked:
        children = _significant_children(cell)
        if not children or not isinstance(children[0], Tag) or children[0].name != "a":
            raise UnexpectedPageStructureError(
                f"day {day}: {field} link not found, website structure might have changed"
            )
        target = children[0]
    children = _content_children(target)  # type: ignore[arg-type]
    if not children or not isinstance(children[0], NavigableString):
        raise UnexpectedPageStructureError(
            f"day {day}: {field} text not found, website structure might have changed"
        )
    return str(children[0]).strip()


def _day_record(row: Tag, day: int) -> DayRecord:
    cells = [child for child in row.children if isinstance(child, Tag)]
    values: dict[str, str] = {}
    for position, (field, linked, escaped) in CELL_FIELDS.items():
        if position >= len(cells):
            raise UnexpectedPageStructureError(
                f"day {day}: cell {position} ({field}) not found, "
                f"row has {len(cells)} cells, website structure might have changed"
            )
        text = _cell_text(cells[position], linked, day, field)
        values[field] = escape_leading_minus(text) if escaped else text
    return DayRecord(**values)


def _day_marker(row: Tag) -> int:
    raw = row.get(DAY_MARKER_ATTR)
    try:
        return int(str(raw).strip())
    except ValueError as e:
        raise UnexpectedPageStructureError(
            f"invalid {DAY_MARKER_ATTR} value {raw!r}, website structure might have changed"
        ) from e


def extract_month_records(
    markup: bytes | str, is_first_month: bool, resume_point: ResumePoint
) -> list[DayRecord]:
    """Extract the day records of one month page.

    Args:
        markup: Raw response body of the month page
        is_first_month: True only for the first month of the run
        resume_point: Provides the first-month truncation day

    Returns:
        Records in document order; empty when every row precedes the resume point

    Raises:
        UnexpectedPageStructureError: A day row lacks an expected cell or text
    """
    soup = BeautifulSoup(markup, "lxml")
    records: list[DayRecord] = []
    skipped = 0
    # find_all walks the whole tree, so rows nested at any depth are found in document order
    for row in soup.find_all("tr", attrs={DAY_MARKER_ATTR: True}):
        day = _day_marker(row)
        if is_first_month and day < resume_point.first_month_day:
            skipped += 1
            continue
        records.append(_day_record(row, day))
    if skipped:
        logger.debug(f"skipped {skipped} already stored days before day {resume_point.first_month_day}")
    return records
