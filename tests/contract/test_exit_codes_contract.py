from __future__ import annotations

import json
import re
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pandas as pd

from conftest import day_row, full_month_page, month_page
from weather_harvest.cli.__main__ import main as cli_main
from weather_harvest.errors import FetchFailedError

"""Exit code / console output contract of the CLI."""

SUMMARY_RE = re.compile(
    r"^SUMMARY months=\d+ rows=\d+ start_row=\d+ first_date=(\d{2}\.\d{2}\.\d{4}|-) elapsed_sec=[0-9.]+$",
    re.M,
)


def _yesterday() -> str:
    return (date.today() - timedelta(days=1)).strftime("%d.%m.%Y")


def _client_for_today() -> MagicMock:
    today = date.today()
    client = MagicMock()
    client.fetch_month.return_value = full_month_page(today.month, today.year, today.day)
    return client


def _error_records(workdir: Path) -> list[dict]:
    logs = sorted((workdir / "logs").glob("errors-*.log"))
    return [json.loads(line) for p in logs for line in p.read_text(encoding="utf-8").splitlines()]


def test_exit_code_fatal_missing_config(temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out
    records = _error_records(temp_workdir)
    assert records and records[0]["error_type"] == "CONFIG_INVALID"


def test_exit_code_success(temp_workdir: Path, write_config: Path, dataset_factory, capsys):
    dataset_factory([_yesterday()])
    with patch("weather_harvest.services.orchestrator.MonthPageClient", return_value=_client_for_today()):
        code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY months=1 rows=1 start_row=3" in out
    assert SUMMARY_RE.search(out)
    assert "ERROR" not in out


def test_exit_code_fetch_failure(temp_workdir: Path, write_config: Path, dataset_factory, capsys):
    dataset_factory([_yesterday()])

    def fail(q):
        raise FetchFailedError(q, "HTTP 500")

    client = MagicMock()
    client.fetch_month.side_effect = fail
    with patch("weather_harvest.services.orchestrator.MonthPageClient", return_value=client):
        code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR fetch: request for" in out
    assert "SUMMARY" not in out
    (record,) = _error_records(temp_workdir)
    assert record["error_type"] == "FETCH_FAILED"
    assert record["month"] == date.today().strftime("%m/%Y")
    client.close.assert_called_once()


def test_exit_code_page_structure_change(temp_workdir: Path, write_config: Path, dataset_factory, capsys):
    dataset = dataset_factory([_yesterday()])
    before = dataset.read_bytes()
    today = date.today()
    broken = day_row(today.day, today.month, today.year).replace("<td>Partial noros</td>", "")
    client = MagicMock()
    client.fetch_month.return_value = month_page([broken])
    with patch("weather_harvest.services.orchestrator.MonthPageClient", return_value=client):
        code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR extract: month" in out
    (record,) = _error_records(temp_workdir)
    assert record["error_type"] == "UNEXPECTED_PAGE_STRUCTURE"
    assert record["month"] == today.strftime("%m/%Y")
    assert dataset.read_bytes() == before


def test_exit_code_no_existing_date(temp_workdir: Path, write_config: Path, dataset_factory, capsys):
    dataset_factory([])
    with patch("weather_harvest.services.orchestrator.MonthPageClient") as client_cls:
        code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR resume: last date value not found" in out
    client_cls.return_value.fetch_month.assert_not_called()


def test_inspect_data_does_not_fetch(temp_workdir: Path, write_config: Path, dataset_factory, capsys):
    dataset_factory(["14.06.2024", "15.06.2024"])
    with patch("weather_harvest.services.orchestrator.MonthPageClient") as client_cls:
        code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "resume: last=15.06.2024 first_date=16.06.2024 next_row=4" in out
    client_cls.assert_not_called()


def test_config_option_legacy_workbook(temp_workdir: Path, dataset_factory, capsys):
    dataset_factory([_yesterday()], name="meteo.xlsx")
    cfg = temp_workdir / "config.xlsx"
    with pd.ExcelWriter(cfg, engine="openpyxl") as writer:
        pd.DataFrame(
            [["EXCEL_FILE_NAME", "EXCEL_SHEET_NAME", "DATE_COLUMN_LETTER"], ["meteo", "Istoric", "A"]]
        ).to_excel(writer, sheet_name="Config", header=False, index=False)
    with patch("weather_harvest.services.orchestrator.MonthPageClient", return_value=_client_for_today()):
        code = cli_main(["--config", str(cfg)])
    assert code == 0
    assert "rows=1" in capsys.readouterr().out


def test_config_path_from_env_file(temp_workdir: Path, write_config: Path, dataset_factory, monkeypatch, capsys):
    moved = temp_workdir / "custom.yml"
    write_config.rename(moved)
    # recorded by monkeypatch so the value loaded from .env is removed afterwards
    monkeypatch.setenv("HARVEST_CONFIG", "unused.yml")
    (temp_workdir / ".env").write_text(f"HARVEST_CONFIG={moved}\n", encoding="utf-8")
    dataset_factory([_yesterday()])
    with patch("weather_harvest.services.orchestrator.MonthPageClient", return_value=_client_for_today()):
        code = cli_main([])
    assert code == 0
    assert "SUMMARY months=1" in capsys.readouterr().out
