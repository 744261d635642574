from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.resume_point import MonthQuery

"""Error taxonomy for the weather harvest run.

Every stage raises a subclass of HarvestError; only the CLI entrypoint catches
them, reports one labeled line and writes an error log record. `error_type`
is the UPPER_SNAKE value used in the JSON Lines error log, `stage` is the label
printed in front of the message (`ERROR fetch: ...`).
"""

__all__ = [
    "HarvestError",
    "ConfigError",
    "DatasetUnavailableError",
    "NoExistingDateError",
    "MalformedDateError",
    "FetchFailedError",
    "UnexpectedPageStructureError",
    "PersistError",
]


class HarvestError(Exception):
    """Base exception for fatal harvest errors."""

    error_type = "HARVEST_ERROR"
    stage = "harvest"
    # month page the error belongs to, None when not month specific
    query: MonthQuery | None = None


class ConfigError(HarvestError):
    error_type = "CONFIG_INVALID"
    stage = "config"


class DatasetUnavailableError(HarvestError):
    """Raised when the dataset workbook or its sheet cannot be opened."""

    error_type = "DATASET_UNAVAILABLE"
    stage = "dataset"


class NoExistingDateError(HarvestError):
    error_type = "NO_EXISTING_DATE"
    stage = "resume"


class MalformedDateError(HarvestError):
    error_type = "MALFORMED_DATE"
    stage = "resume"


class FetchFailedError(HarvestError):
    """Transport-level failure for one month page.

    Carries the month query so the error log can name the month that broke the run.
    """

    error_type = "FETCH_FAILED"
    stage = "fetch"

    def __init__(self, query: MonthQuery, cause: object) -> None:
        self.query = query
        self.cause = cause
        super().__init__(f"request for {query} failed: {cause}")


class UnexpectedPageStructureError(HarvestError):
    """Raised when an expected element is missing from a month page."""

    error_type = "UNEXPECTED_PAGE_STRUCTURE"
    stage = "extract"

    def __init__(self, message: str, query: MonthQuery | None = None) -> None:
        self.query = query
        super().__init__(message)


class PersistError(HarvestError):
    error_type = "PERSIST_FAILED"
    stage = "persist"
