from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import GENERIC_FAILURE_MESSAGE, ComparisonError
from ..logging.error_log import ErrorLogBuffer
from ..models.comparison import ComparisonResult
from ..models.error_record import ErrorRecord
from ..models.uploaded_file import UploadedFile
from .comparison import Scorer, SheetSource, compare

"""Comparison session: the state behind one "Compare ICP" workflow.

A session holds the selected sheet name, the uploaded file, a single
in-progress flag and the last result or error. Only one comparison runs at a
time; ``run()`` refuses to start while another run is in flight.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ComparisonSession",
    "user_message_for",
]


def user_message_for(exc: BaseException) -> str:
    """Most specific message available: server > exception text > generic."""
    if isinstance(exc, ComparisonError):
        return exc.user_message
    return str(exc) or GENERIC_FAILURE_MESSAGE


class ComparisonSession:
    def __init__(
        self,
        sheets: SheetSource,
        scorer: Scorer,
        *,
        error_log: ErrorLogBuffer | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self.sheets = sheets
        self.scorer = scorer
        self.error_log = error_log
        self.notify = notify or logger.error
        self.sheet_name: str | None = None
        self.uploaded_file: UploadedFile | None = None
        self.in_progress = False
        self.result: ComparisonResult | None = None
        self.error: str | None = None

    @property
    def can_start(self) -> bool:
        return bool(self.sheet_name) and self.uploaded_file is not None and not self.in_progress

    def select_sheet(self, sheet_name: str | None) -> None:
        self.sheet_name = sheet_name

    def select_file(self, uploaded_file: UploadedFile | None) -> None:
        self.uploaded_file = uploaded_file

    def reset(self) -> None:
        """Clear inputs and outcome ("Upload New" / dialog closed)."""
        self.sheet_name = None
        self.uploaded_file = None
        self.result = None
        self.error = None

    def run(self) -> ComparisonResult | None:
        """Run one comparison; return the result or None after notifying once."""
        if self.in_progress:
            logger.warning("comparison already in progress")
            return None
        self.in_progress = True
        self.result = None
        self.error = None
        try:
            self.result = compare(
                self.sheet_name,
                self.uploaded_file,
                sheets=self.sheets,
                scorer=self.scorer,
            )
            return self.result
        except Exception as e:
            self._fail(e)
            return None
        finally:
            self.in_progress = False

    def _fail(self, exc: Exception) -> None:
        message = user_message_for(exc)
        self.error = message
        if isinstance(exc, ComparisonError):
            stage = exc.stage
            error_type = exc.error_type
            logger.debug(f"comparison failed stage={stage} type={error_type}: {exc!r}")
        else:
            stage = ""
            error_type = "UNEXPECTED_ERROR"
            logger.debug("unexpected comparison failure", exc_info=exc)
        if self.error_log is not None:
            self.error_log.append(
                ErrorRecord.create(
                    sheet=self.sheet_name or "",
                    file=self.uploaded_file.name if self.uploaded_file else "",
                    stage=stage,
                    error_type=error_type,
                    message=message,
                )
            )
        self.notify(message)
