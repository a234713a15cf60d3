from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

"""UploadedFile model: the single spreadsheet supplied for one comparison."""

__all__ = [
    "UploadedFile",
    "ACCEPTED_MIME_TYPES",
    "ACCEPTED_SUFFIXES",
]

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME = "application/vnd.ms-excel"

ACCEPTED_MIME_TYPES = {
    XLSX_MIME: ".xlsx",
    XLS_MIME: ".xls",
}
ACCEPTED_SUFFIXES = {suffix: mime for mime, suffix in ACCEPTED_MIME_TYPES.items()}


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: bytes
    content_type: str | None = None

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def is_accepted(self) -> bool:
        """True when either the MIME type or the file suffix is a spreadsheet type."""
        if self.content_type in ACCEPTED_MIME_TYPES:
            return True
        return self.suffix in ACCEPTED_SUFFIXES

    @classmethod
    def from_path(cls, path: Path) -> UploadedFile:
        content_type = ACCEPTED_SUFFIXES.get(path.suffix.lower())
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)
