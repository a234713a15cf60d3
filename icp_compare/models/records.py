from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""NormalizedRecord model for the ICP comparison pipeline.

A NormalizedRecord is the canonical shape of one company entry, shared by the
saved ICP sheet and the freshly uploaded sheet. Only saved-sheet records carry
a priority.
"""

__all__ = [
    "NormalizedRecord",
]


@dataclass(frozen=True)
class NormalizedRecord:
    """Canonical company entry used on both sides of a comparison.

    The wire form uses the scorer's key names: ``company_name``,
    ``designations`` and, for saved-sheet records only, ``priority``.
    """
    company_name: str  # trimmed
    designations: list[str] = field(default_factory=list)  # trimmed, non-empty pieces
    priority: str | None = None  # saved-sheet records only

    @property
    def is_complete(self) -> bool:
        return bool(self.company_name) and len(self.designations) > 0

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "company_name": self.company_name,
            "designations": list(self.designations),
        }
        if self.priority is not None:
            payload["priority"] = self.priority
        return payload
