from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from weather_harvest.config.loader import load_config
from weather_harvest.errors import ConfigError, HarvestError
from weather_harvest.excel.reader import read_sheet_preview
from weather_harvest.logging.error_log import ErrorLogBuffer, ErrorRecord
from weather_harvest.logging.init import log_summary, set_debug, setup_logging
from weather_harvest.models.config_models import HarvestConfig
from weather_harvest.services.orchestrator import resolve_from_dataset, run_harvest
from weather_harvest.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the config (--config / HARVEST_CONFIG / config/harvest.yml)
- Run one harvest and print the SUMMARY line
- Any HarvestError: one `ERROR <stage>: <message>` line, a JSON Lines record
  under logs/, exit code 1
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/harvest.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Append new daily weather history rows to an Excel dataset")
    p.add_argument("--config", type=Path, default=None, help="Config file (.yml or legacy config.xlsx)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data", action="store_true", help="Print the last dataset rows and the resume point, then exit"
    )
    return p.parse_args(argv)


def _inspect_data(cfg: HarvestConfig) -> int:
    preview = read_sheet_preview(cfg.dataset_file, cfg.sheet_name)
    print(f"FILE: {cfg.dataset_file} SHEET: {cfg.sheet_name} DATE_COLUMN: {cfg.date_column.letter}")
    print(preview.to_string(index=False) if not preview.empty else "  (empty sheet)")
    params = resolve_from_dataset(cfg)
    rp = params.resume_point
    print(
        f"resume: last={params.last_stored_date} first_date={rp.first_covered_date:%d.%m.%Y} "
        f"next_row={params.next_append_row} present_month={rp.present_month_start:%m/%Y}"
    )
    return EXIT_SUCCESS


def _report_error(logger, error: HarvestError) -> None:
    logger.error(f"{error.stage}: {error}")
    buffer = ErrorLogBuffer()
    buffer.append(ErrorRecord.from_error(error))
    try:
        path = buffer.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")
        return
    logger.info(f"error log written to {path}")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (cli_main([]) を pytest から呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    config_path = args.config or Path(os.getenv("HARVEST_CONFIG", str(DEFAULT_CONFIG_PATH)))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        _report_error(logger, e)
        return EXIT_FATAL

    try:
        if args.inspect_data:
            return _inspect_data(cfg)
        logger.info(f"Weather scraping into {cfg.dataset_file} (sheet {cfg.sheet_name})")
        result = run_harvest(cfg)
    except HarvestError as e:
        _report_error(logger, e)
        return EXIT_FATAL

    # render_summary_line includes the "SUMMARY " label; log_summary adds it again
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
