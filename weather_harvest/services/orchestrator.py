from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from ..excel.reader import read_date_column
from ..excel.writer import append_records
from ..models.config_models import HarvestConfig
from ..models.harvest_result import HarvestResult
from ..models.resume_point import ResumeParams
from ..web.client import MonthPageClient
from .fetch_loop import fetch_all_months
from .progress import ProgressTracker, count_months
from .resume import resolve_resume_params

logger = logging.getLogger(__name__)

"""Service orchestration for one harvest run.

resolve resume point -> fetch every month -> append and save -> HarvestResult.

Every stage either succeeds completely or raises a HarvestError subclass, which
propagates unchanged to the CLI. Nothing is written unless all months were
fetched and extracted.
"""


def resolve_from_dataset(config: HarvestConfig, today: date | None = None) -> ResumeParams:
    """Read the dataset's date column and resolve the resume parameters.

    Raises:
        DatasetUnavailableError: Workbook or sheet cannot be opened
        NoExistingDateError: Date column is empty
        MalformedDateError: Last stored date is not DD.MM.YYYY
    """
    column = read_date_column(config.dataset_file, config.sheet_name, config.date_column)
    logger.debug(
        f"{config.dataset_file.name}!{config.sheet_name} column={config.date_column.letter} "
        f"highest_row={column.highest_row}"
    )
    return resolve_resume_params(column.cells, column_label=config.date_column.label, today=today)


def run_harvest(
    config: HarvestConfig,
    *,
    client: MonthPageClient | None = None,
    today: date | None = None,
) -> HarvestResult:
    """Run one incremental harvest.

    Args:
        config: Harvest configuration
        client: Month page client (built from config.source when None)
        today: Override for the current date (tests)

    Returns:
        HarvestResult with month/row counts and timing

    Raises:
        HarvestError: First fatal error of any stage
    """
    start_time = datetime.now(UTC)

    params = resolve_from_dataset(config, today=today)
    resume_point = params.resume_point
    logger.info(
        f"last stored date {params.last_stored_date} -> resuming at "
        f"{resume_point.first_covered_date:%d.%m.%Y} (row {params.next_append_row})"
    )

    months = count_months(resume_point)
    own_client = client is None
    if client is None:
        client = MonthPageClient(config.source)
    try:
        with ProgressTracker(months) as progress:
            records = fetch_all_months(resume_point, client.fetch_month, progress)
    finally:
        if own_client:
            client.close()

    appended = 0
    if records:
        appended = append_records(
            config.dataset_file,
            config.sheet_name,
            config.date_column,
            params.next_append_row,
            records,
        )
        logger.info(f"appended {appended} rows to {config.dataset_file.name} starting at row {params.next_append_row}")

    end_time = datetime.now(UTC)
    result = HarvestResult(
        months_fetched=months,
        appended_rows=appended,
        start_row=params.next_append_row,
        first_covered_date=resume_point.first_covered_date,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
    if result.up_to_date:
        logger.info("no new days available, dataset is up to date")
    return result
