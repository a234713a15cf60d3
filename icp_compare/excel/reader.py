from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd

from ..errors import FileParseError, InputValidationError

"""Excel reader for uploaded comparison sheets.

Only the FIRST sheet of a workbook is read; any further sheets are ignored
without warning. Cells are returned raw (no header applied). Blank rows above
the first used row are dropped, so row 0 is the header row even when the user
left empty lines at the top of the sheet.

Literal strings such as "NA" or "N/A" are kept as text: a company may well be
called "NA", and pandas' default NaN conversion would silently drop it.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SpreadsheetWorkbook",
    "EmptyWorkbookError",
    "WorkbookReadError",
    "read_workbook",
]

READ_ERROR_MESSAGE = "Error reading the uploaded file. Please check the file format."
EMPTY_MESSAGE = "The uploaded file appears to be empty"


class EmptyWorkbookError(InputValidationError):
    """Raised when the first sheet has no rows at all (not even a header)."""

    error_type = "EMPTY_WORKBOOK"

    def __init__(self, message: str = EMPTY_MESSAGE) -> None:
        super().__init__(message)


class WorkbookReadError(FileParseError):
    """Raised when the upload cannot be parsed as a spreadsheet."""

    def __init__(self, message: str = READ_ERROR_MESSAGE) -> None:
        super().__init__(message)


@dataclass
class SpreadsheetWorkbook:
    sheet_names: list[str]
    rows: list[list[Any]] = field(default_factory=list)  # first sheet, row 0 = header

    @property
    def sheet_name(self) -> str:
        return self.sheet_names[0] if self.sheet_names else ""

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    @property
    def header(self) -> list[Any]:
        return self.rows[0] if self.rows else []

    def require_rows(self) -> None:
        if self.is_empty:
            raise EmptyWorkbookError()


def _to_cell(value: Any) -> Any:
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # pragma: no cover - array-like cells
        return value
    return value


def _trim_leading_blank_rows(rows: list[list[Any]]) -> list[list[Any]]:
    # 空行は先頭のみ除去 (途中の空行は正規化側で落とす)
    for i, row in enumerate(rows):
        if any(cell is not None for cell in row):
            return rows[i:]
    return []


def read_workbook(source: Path | bytes | BinaryIO) -> SpreadsheetWorkbook:
    """Parse ``source`` and return the first sheet as a 2-D list of cells.

    Parameters
    ----------
    source: file path, raw bytes of an .xlsx/.xls file, or a binary file object

    Raises
    ------
    WorkbookReadError: the content is not a readable spreadsheet
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(bytes(source))
    try:
        xls = pd.ExcelFile(source)
        sheet_names = [str(n) for n in xls.sheet_names]
        if not sheet_names:
            return SpreadsheetWorkbook(sheet_names=[], rows=[])
        # ヘッダなしで生読み (最初の使用行 = ヘッダ)
        df = xls.parse(xls.sheet_names[0], header=None, keep_default_na=False, na_values=[""])
    except Exception as e:
        logger.debug(f"failed to read uploaded workbook: {e}", exc_info=e)
        raise WorkbookReadError() from e

    rows = [[_to_cell(v) for v in raw] for raw in df.itertuples(index=False, name=None)]
    rows = _trim_leading_blank_rows(rows)
    logger.debug(f"read sheet '{sheet_names[0]}' rows={len(rows)} ignored_sheets={len(sheet_names) - 1}")
    return SpreadsheetWorkbook(sheet_names=sheet_names, rows=rows)
