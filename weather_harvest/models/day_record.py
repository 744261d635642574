from __future__ import annotations

from dataclasses import astuple, dataclass

"""DayRecord model: one harvested daily observation.

All fields are free-form text exactly as the source page displays them; numeric
columns are never parsed. Temperatures starting with a minus sign get a trailing
quote so the spreadsheet does not auto-convert them and lose the sign.
"""

__all__ = [
    "DayRecord",
    "escape_leading_minus",
]


def escape_leading_minus(value: str) -> str:
    """Append a quote to values starting with "-" ("-5" -> "-5'")."""
    if value.startswith("-"):
        return value + "'"
    return value


@dataclass(frozen=True)
class DayRecord:
    date: str  # as displayed, e.g. "01.03.2024"
    min_temperature: str
    max_temperature: str
    max_sustained_wind: str
    max_gust_wind: str
    rainfall: str
    snow_depth: str
    description: str

    def as_row(self) -> tuple[str, ...]:
        """Values in dataset column order (date column first)."""
        return astuple(self)
