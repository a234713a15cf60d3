from __future__ import annotations

"""Exception hierarchy for the ICP comparison pipeline.

Every failure raised while comparing sheets is a ``ComparisonError`` carrying a
message that can be shown to the user as-is. The session layer catches these
(and unexpected exceptions) and reports exactly one notification per run.
"""

__all__ = [
    "ComparisonError",
    "InputValidationError",
    "UnsupportedFileError",
    "SavedSheetNotFoundError",
    "FileParseError",
    "ScoringError",
    "GENERIC_FAILURE_MESSAGE",
]

GENERIC_FAILURE_MESSAGE = "Failed to compare"


class ComparisonError(Exception):
    """Base class for recoverable, user-facing comparison failures."""

    error_type = "COMPARISON_ERROR"
    stage = ""  # pipeline stage where the run stopped

    @property
    def user_message(self) -> str:
        return str(self) or GENERIC_FAILURE_MESSAGE


class InputValidationError(ComparisonError):
    """Missing or unusable input detected before any network call."""

    error_type = "INPUT_VALIDATION_ERROR"


class UnsupportedFileError(InputValidationError):
    error_type = "UNSUPPORTED_FILE"


class SavedSheetNotFoundError(ComparisonError):
    error_type = "SAVED_SHEET_NOT_FOUND"


class FileParseError(ComparisonError):
    error_type = "FILE_PARSE_ERROR"


class ScoringError(ComparisonError):
    """Remote scorer failed or answered with a non-success status.

    ``server_message`` holds the message supplied by the scorer, if any; it
    takes precedence over the exception text when shown to the user.
    """

    error_type = "SCORING_ERROR"

    def __init__(self, message: str = "", server_message: str | None = None) -> None:
        super().__init__(message)
        self.server_message = server_message

    @property
    def user_message(self) -> str:
        return self.server_message or str(self) or GENERIC_FAILURE_MESSAGE
