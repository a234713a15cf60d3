from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from ..excel.columns import ColumnIndex
from ..models.records import NormalizedRecord

"""Row normalizer: raw uploaded rows / saved sheet rows -> NormalizedRecord.

The two branches intentionally filter differently:

- uploaded rows are dropped when the raw company or designation cell is falsy,
  and again when nothing usable is left after trimming and splitting;
- saved rows are never dropped, even when company or designations are empty.
"""

__all__ = [
    "cell_text",
    "split_designations",
    "normalize_uploaded_rows",
    "normalize_saved_row",
    "normalize_saved_rows",
]


def _is_falsy(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (str, bytes, int, float, bool)):
        return not value
    return False


def cell_text(value: Any) -> str:
    """Coerce a cell to trimmed text ("" for None/NaN).

    Whole floats render without the trailing ".0" (Excel stores 2024 as 2024.0).
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def split_designations(value: Any) -> list[str]:
    """Split a comma-joined designation string into trimmed, non-empty pieces.

    Lists are flattened piece by piece, so an already-normalized list is
    returned unchanged.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        pieces: list[str] = []
        for item in value:
            pieces.extend(split_designations(item))
        return pieces
    return [p.strip() for p in cell_text(value).split(",") if p.strip()]


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if 0 <= index < len(row) else None


def normalize_uploaded_rows(rows: Sequence[Sequence[Any]], index: ColumnIndex) -> list[NormalizedRecord]:
    """Normalize data rows of an uploaded sheet (row 0 is the header and is skipped).

    Row order is preserved. A row is skipped when its raw company or
    designation cell is falsy; whitespace-only cells pass this first check and
    are removed by the completeness check after trimming.
    """
    records: list[NormalizedRecord] = []
    for row in rows[1:]:
        raw_company = _cell(row, index.company)
        raw_designation = _cell(row, index.designation)
        if _is_falsy(raw_company) or _is_falsy(raw_designation):
            continue
        record = NormalizedRecord(
            company_name=cell_text(raw_company),
            designations=split_designations(raw_designation),
        )
        if not record.is_complete:
            continue
        records.append(record)
    return records


def _first_present(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def normalize_saved_row(row: dict[str, Any]) -> NormalizedRecord:
    company = _first_present(row, "companyname", "company_name")
    designation = _first_present(row, "designation", "designations")
    if isinstance(designation, (list, tuple)):
        # 配列はそのまま要素ごとに trim (空要素も保持)
        designations = [cell_text(d) for d in designation]
    else:
        designations = split_designations(designation)
    return NormalizedRecord(
        company_name=cell_text(company),
        designations=designations,
        priority=cell_text(row.get("priority")),
    )


def normalize_saved_rows(rows: Iterable[dict[str, Any]]) -> list[NormalizedRecord]:
    """Normalize every saved ICP row; no row is ever dropped."""
    return [normalize_saved_row(r) for r in rows]
