from __future__ import annotations

from ..models.harvest_result import HarvestResult
from .date_cursor import STORED_DATE_FORMAT

"""Summary line rendering for the SUMMARY output of a harvest run."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}"


def render_summary_line(result: HarvestResult) -> str:
    """Render a SUMMARY line from a HarvestResult.

    Format:
    SUMMARY months={months} rows={rows} start_row={row} first_date={DD.MM.YYYY|-} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import date, datetime, timezone
        >>> start = datetime(2024, 7, 20, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 7, 20, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = HarvestResult(
        ...     months_fetched=2, appended_rows=35, start_row=120,
        ...     first_covered_date=date(2024, 6, 16), start_time=start, end_time=end,
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY months=2 rows=35 start_row=120 first_date=16.06.2024 elapsed_sec=2'
    """
    first_date = (
        result.first_covered_date.strftime(STORED_DATE_FORMAT) if result.first_covered_date else "-"
    )
    return (
        f"SUMMARY months={result.months_fetched} "
        f"rows={result.appended_rows} "
        f"start_row={result.start_row} "
        f"first_date={first_date} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
