from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured error logging
of failed comparisons. One record is written per failed run; ``stage`` names
the pipeline step where the run stopped.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        sheet: Saved ICP sheet name ("" when none was selected)
        file: Uploaded file name ("" when none was given)
        stage: Pipeline stage (validate, fetch, parse, resolve, normalize, score)
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: User-facing message that was reported
    """
    timestamp: str  # ISO8601 UTC
    sheet: str
    file: str
    stage: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(sheet: str, file: str, stage: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            sheet=sheet,
            file=file,
            stage=stage,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
