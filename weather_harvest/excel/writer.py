from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from openpyxl.utils.exceptions import IllegalCharacterError

from ..errors import PersistError
from ..models.config_models import DateColumnLocator
from ..models.day_record import DayRecord
from .reader import open_dataset_sheet

logger = logging.getLogger(__name__)

"""Dataset workbook writer.

Each DayRecord occupies one row; its 8 fields go into 8 consecutive columns
starting at the date column. Every cell is stored as a string, never as a
formula or number. The workbook is saved once after all rows are set.
"""


def append_records(
    path: Path,
    sheet_name: str,
    locator: DateColumnLocator,
    start_row: int,
    records: Sequence[DayRecord],
) -> int:
    """Write records from `start_row` downwards and save the workbook.

    Args:
        path: Dataset workbook
        sheet_name: Target sheet
        locator: Date column (first written column)
        start_row: 1-based row of the first record
        records: Records in the order they should appear

    Returns:
        Number of rows written

    Raises:
        DatasetUnavailableError: Workbook or sheet cannot be opened
        PersistError: A cell cannot be set or the workbook cannot be saved
    """
    wb, ws = open_dataset_sheet(path, sheet_name)
    row = start_row
    try:
        for record in records:
            for offset, value in enumerate(record.as_row()):
                cell = ws.cell(row=row, column=locator.column_number + offset, value=value)
                # openpyxl turns "=..." into a formula; scraped text stays text
                cell.data_type = "s"
            row += 1
    except (IllegalCharacterError, ValueError, TypeError) as e:
        wb.close()
        raise PersistError(f"failed to write data at row {row}: {e}") from e

    try:
        wb.save(path)
    except OSError as e:
        raise PersistError(
            f"failed to save {path}: {e}\nMake sure the file {path.name} is not open"
        ) from e
    finally:
        wb.close()

    written = row - start_row
    logger.debug(f"wrote {written} rows to {path.name}!{sheet_name} from row {start_row}")
    return written
