from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..errors import InputValidationError

"""Column resolver: locate the company and designation columns in a header row.

This is a best-effort heuristic. Each semantic field has an explicit, ordered
tuple of candidate substrings; a header matches a field when its lower-cased
text contains any of them. The FIRST matching header (left to right) wins.
Known weakness: a header like "Job Company History" matches both fields.
When nothing matches the index is -1 and the caller must abort; no other
column is guessed.
"""

__all__ = [
    "ColumnIndex",
    "MissingColumnError",
    "COMPANY_CANDIDATES",
    "DESIGNATION_CANDIDATES",
    "NOT_FOUND",
    "find_column",
    "resolve_columns",
    "require_columns",
]

NOT_FOUND = -1

COMPANY_CANDIDATES: tuple[str, ...] = ("company",)
DESIGNATION_CANDIDATES: tuple[str, ...] = ("designation", "job", "title")


class MissingColumnError(InputValidationError):
    """Raised when a required column cannot be located in the header row."""

    error_type = "MISSING_COLUMN"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"Could not find {field} column in the uploaded file. "
            f"Please make sure the first row contains a {field} header."
        )


@dataclass(frozen=True)
class ColumnIndex:
    company: int
    designation: int

    @property
    def missing(self) -> list[str]:
        names = []
        if self.company == NOT_FOUND:
            names.append("company_name")
        if self.designation == NOT_FOUND:
            names.append("designation")
        return names


def _header_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    return str(value).lower()


def find_column(headers: Sequence[Any], candidates: Sequence[str]) -> int:
    for i, raw in enumerate(headers):
        text = _header_text(raw)
        if text is None:
            continue
        if any(c in text for c in candidates):
            return i
    return NOT_FOUND


def resolve_columns(headers: Sequence[Any]) -> ColumnIndex:
    """Return zero-based company/designation indexes (-1 when not found)."""
    return ColumnIndex(
        company=find_column(headers, COMPANY_CANDIDATES),
        designation=find_column(headers, DESIGNATION_CANDIDATES),
    )


def require_columns(index: ColumnIndex) -> ColumnIndex:
    # company を先に検査 (メッセージは最初の欠落列のみ)
    missing = index.missing
    if missing:
        raise MissingColumnError(missing[0])
    return index
