from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from ..api.client import ApiError
from ..errors import (
    GENERIC_FAILURE_MESSAGE,
    ComparisonError,
    InputValidationError,
    SavedSheetNotFoundError,
    ScoringError,
    UnsupportedFileError,
)
from ..excel.columns import require_columns, resolve_columns
from ..excel.reader import SpreadsheetWorkbook, read_workbook
from ..models.comparison import ComparisonRequest, ComparisonResult
from ..models.records import NormalizedRecord
from ..models.uploaded_file import UploadedFile
from .normalizer import normalize_saved_rows, normalize_uploaded_rows
from .progress import StageProgress

"""Service orchestration for one ICP comparison.

``compare()`` runs the pipeline as a strictly linear sequence; each step's
result gates the next and the first failure ends the run:

1. validate inputs (no network call on failure)
2. fetch the saved sheet rows by name
3. normalize the saved rows
4. parse the uploaded workbook (first sheet only)
5. reject a workbook without any row
6. resolve the company / designation columns
7. normalize the uploaded data rows
8. assemble the scorer payload
9. post it once to the scorer
10. map the response into a ComparisonResult
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SheetSource",
    "Scorer",
    "MISSING_INPUT_MESSAGE",
    "SHEET_NOT_FOUND_MESSAGE",
    "assemble_request",
    "interpret_response",
    "compare",
]

MISSING_INPUT_MESSAGE = "Please select a file and an ICP sheet to compare"
SHEET_NOT_FOUND_MESSAGE = "Saved ICP sheet not found"


class SheetSource(Protocol):
    def get_saved_sheet_rows(self, sheet_name: str) -> list[dict[str, Any]]: ...


class Scorer(Protocol):
    def compare(self, request: ComparisonRequest) -> dict[str, Any]: ...


def assemble_request(
    saved_records: Sequence[NormalizedRecord], uploaded_records: Sequence[NormalizedRecord]
) -> ComparisonRequest:
    return ComparisonRequest(saved_records=list(saved_records), uploaded_records=list(uploaded_records))


def interpret_response(body: dict[str, Any]) -> ComparisonResult:
    """Map a scorer body into the display model, or raise ScoringError.

    A body whose ``status`` flag is not truthy is a failure; its ``message``
    (when present) becomes the user-facing text. A score that is not a number
    is treated as a failed comparison.
    """
    if not body.get("status"):
        server_message = body.get("message") if isinstance(body.get("message"), str) else None
        raise ScoringError(server_message or GENERIC_FAILURE_MESSAGE, server_message=server_message)
    try:
        return ComparisonResult.from_response(body)
    except ValueError as e:
        raise ScoringError(GENERIC_FAILURE_MESSAGE) from e


def _uploaded_records(workbook: SpreadsheetWorkbook) -> list[NormalizedRecord]:
    workbook.require_rows()
    index = require_columns(resolve_columns(workbook.header))
    logger.debug(f"resolved columns company={index.company} designation={index.designation}")
    return normalize_uploaded_rows(workbook.rows, index)


def compare(
    saved_sheet_name: str | None,
    uploaded_file: UploadedFile | None,
    *,
    sheets: SheetSource,
    scorer: Scorer,
) -> ComparisonResult:
    """Compare ``uploaded_file`` against the saved ICP sheet ``saved_sheet_name``.

    Args:
        saved_sheet_name: Name of the saved ICP sheet used as baseline
        uploaded_file: The single spreadsheet to score
        sheets: Collaborator returning raw saved-sheet rows by name
        scorer: Collaborator posting the payload to the remote scorer

    Returns:
        ComparisonResult built from the scorer response

    Raises:
        ComparisonError: any failure; ``stage`` tells where the run stopped
    """
    if not saved_sheet_name or uploaded_file is None:
        error = InputValidationError(MISSING_INPUT_MESSAGE)
        error.stage = "validate"
        raise error
    if not uploaded_file.is_accepted:
        error = UnsupportedFileError(
            f"Unsupported file type '{uploaded_file.name}'. Please upload an .xlsx or .xls file"
        )
        error.stage = "validate"
        raise error

    with StageProgress() as progress:
        try:
            progress.start("fetch")
            try:
                saved_rows = sheets.get_saved_sheet_rows(saved_sheet_name)
            except ApiError as e:
                raise ComparisonError(e.server_message or str(e)) from e
            if not saved_rows:
                raise SavedSheetNotFoundError(SHEET_NOT_FOUND_MESSAGE)
            saved_records = normalize_saved_rows(saved_rows)
            progress.finish("fetch")

            progress.start("parse")
            workbook = read_workbook(uploaded_file.content)
            progress.finish("parse")

            progress.start("resolve")
            uploaded_records = _uploaded_records(workbook)
            progress.finish("resolve")

            progress.start("normalize")
            request = assemble_request(saved_records, uploaded_records)
            logger.info(
                f"comparing sheet='{saved_sheet_name}' saved_records={len(saved_records)} "
                f"uploaded_records={len(uploaded_records)}"
            )
            progress.finish("normalize")

            progress.start("score")
            try:
                body = scorer.compare(request)
            except ApiError as e:
                raise ScoringError(str(e), server_message=e.server_message) from e
            result = interpret_response(body)
            progress.finish("score")
            return result
        except ComparisonError as e:
            e.stage = progress.current or ""
            raise
