# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from pathlib import Path

import pytest
from openpyxl import Workbook

from weather_harvest.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handler binds sys.stdout at setup time; capsys needs a fresh one per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HARVEST_CONFIG", raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """dataset_file: weather
sheet_name: Istoric
date_column: A
source:
  gid: 683499
  station: 4621
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "harvest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


HEADER = ["Data", "Temp. min", "Temp. max", "Vant", "Rafala", "Precipitatii", "Zapada", "Descriere"]


def make_dataset(
    path: Path,
    dates: Sequence[object | None],
    *,
    sheet: str = "Istoric",
    date_column: int = 1,
) -> Path:
    """Create a dataset workbook: header in row 1, one date per following row."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet
    for offset, label in enumerate(HEADER):
        ws.cell(row=1, column=date_column + offset, value=label)
    for i, value in enumerate(dates, start=2):
        if value is not None:
            ws.cell(row=i, column=date_column, value=value)
            ws.cell(row=i, column=date_column + 1, value="1°C")
    wb.save(path)
    return path


@pytest.fixture()
def dataset_factory(temp_workdir: Path) -> Callable[..., Path]:
    def _make(dates: Sequence[object | None], name: str = "weather.xlsx", **kwargs) -> Path:
        return make_dataset(temp_workdir / name, dates, **kwargs)
    return _make


def day_row(
    day: int,
    month: int,
    year: int,
    *,
    min_t: str = "10°C",
    max_t: str = "21°C",
    wind: str = "11 Km/h",
    gust: str = "29 Km/h",
    rain: str = "0 mm",
    snow: str = "0 cm",
    description: str = "Partial noros",
) -> str:
    """One day row shaped like the freemeteo monthly history table."""
    return f"""
        <tr data-day="{day}">
            <td class="date"><a href="/vremea/istoric/zi/?date={year}-{month:02d}-{day:02d}">{day:02d}.{month:02d}.{year}</a></td>
            <td>{min_t}</td>
            <td>{max_t}</td>
            <td>{wind}</td>
            <td>{gust}</td>
            <td>{rain}</td>
            <td>{snow}</td>
            <td>15°C</td>
            <td><span class="icon day-2"></span></td>
            <td>{description}</td>
        </tr>"""


def month_page(rows: Sequence[str]) -> bytes:
    body = "".join(rows)
    return f"""<!DOCTYPE html>
<html lang="ro">
<head><meta charset="utf-8"><title>Istoric lunar</title></head>
<body>
  <div class="monthly-history">
    <table class="table">
      <thead>
        <tr><th>Data</th><th>Min</th><th>Max</th><th>Vant</th><th>Rafala</th>
            <th>Precipitatii</th><th>Zapada</th><th>Resimtit</th><th></th><th>Descriere</th></tr>
      </thead>
      <tbody>{body}
      </tbody>
    </table>
  </div>
</body>
</html>""".encode("utf-8")


def full_month_page(month: int, year: int, days: int) -> bytes:
    return month_page([day_row(d, month, year) for d in range(1, days + 1)])


@pytest.fixture()
def today() -> date:
    return date(2024, 7, 20)
