from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .records import NormalizedRecord

"""Comparison request/result models.

ComparisonRequest is the body posted to the remote scorer. Its field names are
fixed by the scorer: ``uploadedSheetData`` carries the SAVED sheet's records
and ``compareSheetData`` carries the freshly UPLOADED file's records.

ComparisonResult is the display model built from a successful scorer response.
"""

__all__ = [
    "ComparisonRequest",
    "ComparisonResult",
    "MatchedEntry",
]


def _to_number(value: Any) -> float:
    """Scorer numbers may arrive as JSON numbers or numeric strings ("10")."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        return value
    number = float(str(value).strip())
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


@dataclass(frozen=True)
class ComparisonRequest:
    saved_records: list[NormalizedRecord]
    uploaded_records: list[NormalizedRecord]

    def to_payload(self) -> dict[str, Any]:
        # 名前の逆転はスコアラー側の契約 (修正しないこと)
        return {
            "uploadedSheetData": [r.to_payload() for r in self.saved_records],
            "compareSheetData": [r.to_payload() for r in self.uploaded_records],
        }


@dataclass(frozen=True)
class MatchedEntry:
    company: str
    designation: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"company": self.company, "designation": self.designation}


@dataclass(frozen=True)
class ComparisonResult:
    """Display model for one successful comparison.

    Attributes:
        score: Points secured by the uploaded sheet
        total_score: Maximum attainable points
        percent: Percentage as formatted by the scorer (e.g. "100%")
        data: Matched company/designation pairs in scorer order
    """
    score: float
    total_score: float
    percent: str
    data: list[MatchedEntry] = field(default_factory=list)

    @property
    def matched_companies(self) -> int:
        return len({entry.company for entry in self.data})

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> ComparisonResult:
        entries = [
            MatchedEntry(
                company=str(item.get("company") or ""),
                designation=str(item.get("designation") or ""),
            )
            for item in (body.get("data") or [])
            if isinstance(item, dict)
        ]
        percent = body.get("percent")
        return cls(
            score=_to_number(body.get("score")),
            total_score=_to_number(body.get("totalScore")),
            percent="" if percent is None else str(percent),
            data=entries,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "totalScore": self.total_score,
            "percent": self.percent,
            "data": [e.to_dict() for e in self.data],
        }
