"""Domain models for the ICP comparison tool."""

from .comparison import ComparisonRequest, ComparisonResult, MatchedEntry
from .error_record import ErrorRecord
from .records import NormalizedRecord
from .saved_sheet import SavedSheet
from .uploaded_file import UploadedFile

__all__ = [
    # Pipeline records
    "NormalizedRecord",
    "ComparisonRequest",
    "ComparisonResult",
    "MatchedEntry",
    # Inputs
    "SavedSheet",
    "UploadedFile",
    # Logging
    "ErrorRecord",
]
