from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from openpyxl.utils import column_index_from_string, get_column_letter

"""Config dataclasses for the weather harvest tool.

These are the immutable values built once by `weather_harvest.config.loader`
and passed explicitly into the resume resolver, the fetch client and the writer.
"""

__all__ = [
    "DateColumnLocator",
    "SourceConfig",
    "HarvestConfig",
    "DEFAULT_SOURCE_URL",
]

DEFAULT_SOURCE_URL = "https://freemeteo.ro/vremea/bucuroaia/istoric/istoric-lunar/"


@dataclass(frozen=True)
class DateColumnLocator:
    """Which dataset column holds the date.

    Configured either as a column letter ("A", "AB") or as a 0-based index.
    Internally always a 1-based spreadsheet column number (openpyxl addressing).
    """
    column_number: int  # 1-based
    label: str  # value as configured, for messages

    @classmethod
    def from_letter(cls, letters: str) -> DateColumnLocator:
        # ValueError for anything beyond XFD
        return cls(column_number=column_index_from_string(letters.upper()), label=letters.upper())

    @classmethod
    def from_index(cls, index: int) -> DateColumnLocator:
        return cls(column_number=index + 1, label=str(index))

    @property
    def letter(self) -> str:
        return get_column_letter(self.column_number)


@dataclass(frozen=True)
class SourceConfig:
    """Remote month page source. Defaults point at the Bucuroaia station."""
    url: str = DEFAULT_SOURCE_URL
    gid: str = "683499"
    station: str = "4621"
    language: str = "romanian"
    country: str = "romania"
    timeout: float | None = None  # None = transport default


@dataclass(frozen=True)
class HarvestConfig:
    """Root configuration object for one harvest run."""
    dataset_file: Path  # .xlsx workbook holding the historical rows
    sheet_name: str  # sheet inside dataset_file
    date_column: DateColumnLocator
    source: SourceConfig = field(default_factory=SourceConfig)
