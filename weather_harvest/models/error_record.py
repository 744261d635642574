from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from ..errors import HarvestError

"""ErrorRecord model for error logging.

One JSON Lines record per fatal run error. The key set is fixed:
timestamp, error_type, stage, month, message.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        error_type: Error classification in UPPER_SNAKE_CASE format
        stage: Run stage that failed (config, resume, fetch, extract, persist, ...)
        month: "MM/YYYY" of the failing month page, None when not month specific
        message: Error description
    """
    timestamp: str
    error_type: str
    stage: str
    month: str | None
    message: str

    @staticmethod
    def create(error_type: str, stage: str, message: str, month: str | None = None) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            error_type=error_type,
            stage=stage,
            month=month,
            message=message,
        )

    @staticmethod
    def from_error(error: HarvestError) -> ErrorRecord:
        month = str(error.query) if error.query is not None else None
        return ErrorRecord.create(error.error_type, error.stage, str(error), month=month)

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
