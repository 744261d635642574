from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from zipfile import BadZipFile

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import DatasetUnavailableError
from ..models.config_models import DateColumnLocator
from ..services.date_cursor import format_stored_date

"""Dataset workbook reader.

Row 1 of the dataset sheet is the header; data rows start at row 2. The date
column is read cell by cell with openpyxl so that row numbers map exactly to
spreadsheet rows (the writer appends at `last date row + 1`). pandas is used
for raw sheet dumps (config workbook, --inspect-data preview).
"""

__all__ = [
    "DateCell",
    "DateColumn",
    "HEADER_ROWS",
    "open_dataset_sheet",
    "read_date_column",
    "read_excel_file",
    "read_sheet_preview",
]

HEADER_ROWS = 1


@dataclass(frozen=True)
class DateCell:
    row: int  # 1-based spreadsheet row
    text: str  # "" for empty cells


@dataclass
class DateColumn:
    sheet_name: str
    locator: DateColumnLocator
    cells: list[DateCell]  # rows HEADER_ROWS+1 .. highest_row, sheet order
    highest_row: int


def open_dataset_sheet(path: Path, sheet_name: str, *, data_only: bool = False):
    """Open `path` and return (workbook, worksheet).

    Raises:
        DatasetUnavailableError: If the file cannot be loaded or the sheet is missing
    """
    try:
        wb = load_workbook(path, data_only=data_only)
    except (OSError, BadZipFile, InvalidFileException, KeyError) as e:
        raise DatasetUnavailableError(
            f"failed to open {path}: {e}\n"
            f"Make sure file {path.name} exists or is in the working directory"
        ) from e
    if sheet_name not in wb.sheetnames:
        wb.close()
        raise DatasetUnavailableError(
            f"failed to open sheet {sheet_name!r} in {path.name}\n"
            f"Make sure sheet {sheet_name} exists (found: {wb.sheetnames})"
        )
    return wb, wb[sheet_name]


def read_date_column(path: Path, sheet_name: str, locator: DateColumnLocator) -> DateColumn:
    """Read the date column of the dataset sheet below the header row.

    Args:
        path: Dataset workbook
        sheet_name: Sheet holding the historical rows
        locator: Date column

    Returns:
        DateColumn with one DateCell per data row (empty cells included)
    """
    wb, ws = open_dataset_sheet(path, sheet_name, data_only=True)
    try:
        highest_row = ws.max_row
        cells = [
            DateCell(row=r, text=format_stored_date(ws.cell(row=r, column=locator.column_number).value))
            for r in range(HEADER_ROWS + 1, highest_row + 1)
        ]
    finally:
        wb.close()
    return DateColumn(sheet_name=sheet_name, locator=locator, cells=cells, highest_row=highest_row)


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw DataFrames keyed by sheet name.

    Sheets are read without a header row and with every cell as text, so the
    caller decides which row is the header.
    """
    dfs: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if target_sheets is not None and str(name) not in target_sheets:
                continue
            dfs[str(name)] = xls.parse(name, header=None, dtype=str)
    return dfs


def read_sheet_preview(path: Path, sheet_name: str, tail: int = 5) -> pd.DataFrame:
    """Return the last `tail` data rows of a sheet, first row used as header."""
    try:
        raw = read_excel_file(path, target_sheets=[sheet_name])
    except (OSError, ValueError, BadZipFile) as e:
        raise DatasetUnavailableError(f"failed to open {path}: {e}") from e
    if sheet_name not in raw:
        raise DatasetUnavailableError(f"failed to open sheet {sheet_name!r} in {path.name}")
    df = raw[sheet_name]
    if df.empty:
        return df
    header = [str(c).strip() if pd.notna(c) else f"col{i}" for i, c in enumerate(df.iloc[0].tolist())]
    body = df.iloc[HEADER_ROWS:].dropna(how="all").copy()
    body.columns = header
    return body.tail(tail)
