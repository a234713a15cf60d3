from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""SavedSheet model: a persisted ICP sheet as returned by the sheet-storage API.

Rows are kept in their raw server shape (``companyname``, ``designation``,
``priority`` ...) and normalized later by the row normalizer.
"""

__all__ = [
    "SavedSheet",
]


@dataclass(frozen=True)
class SavedSheet:
    uuid: str
    sheet_name: str
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        # "Q1-Targets_1700000000" -> "Q1-Targets"
        if "_" in self.sheet_name:
            return self.sheet_name.split("_")[0]
        return self.sheet_name

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SavedSheet:
        rows = item.get("sheetRows") or []
        return cls(
            uuid=str(item.get("uuid") or ""),
            sheet_name=str(item.get("sheet_name") or ""),
            rows=[r for r in rows if isinstance(r, dict)],
        )
