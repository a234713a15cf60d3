from __future__ import annotations

import logging
from typing import Any, Protocol

from ..api.client import ICPApiClient
from ..models.saved_sheet import SavedSheet
from ..models.uploaded_file import UploadedFile

"""Saved ICP sheet repository with an injected cache.

The sheet list is fetched once per user and kept in a ``SheetCache``. Deleting
a sheet removes it from the cached list before the remote call; if the remote
delete fails the previous list is restored and the error propagates.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SheetCache",
    "InMemorySheetCache",
    "SavedSheetRepository",
]


class SheetCache(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self, key: str) -> None: ...


class InMemorySheetCache:
    """Process-local cache; one instance per repository unless shared explicitly."""

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._items.get(key)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value

    def clear(self, key: str) -> None:
        self._items.pop(key, None)


class SavedSheetRepository:
    def __init__(self, client: ICPApiClient, user_id: int | str, cache: SheetCache | None = None) -> None:
        self.client = client
        self.user_id = user_id
        self.cache: SheetCache = cache if cache is not None else InMemorySheetCache()

    @property
    def cache_key(self) -> str:
        return f"icp-sheets:{self.user_id}"

    def list_sheets(self, refresh: bool = False) -> list[SavedSheet]:
        cached = None if refresh else self.cache.get(self.cache_key)
        if cached is not None:
            return list(cached)
        sheets = self.client.list_sheets(self.user_id)
        self.cache.set(self.cache_key, sheets)
        logger.debug(f"fetched {len(sheets)} ICP sheets for user={self.user_id}")
        return list(sheets)

    def find_sheet(self, sheet_name: str) -> SavedSheet | None:
        for sheet in self.list_sheets():
            if sheet.sheet_name == sheet_name:
                return sheet
        return None

    def get_saved_sheet_rows(self, sheet_name: str) -> list[dict[str, Any]]:
        """Return raw rows of the named sheet ([] when the sheet is unknown)."""
        sheet = self.find_sheet(sheet_name)
        return list(sheet.rows) if sheet is not None else []

    def delete_sheet(self, uuid: str) -> dict[str, Any]:
        previous = self.list_sheets()
        self.cache.set(self.cache_key, [s for s in previous if s.uuid != uuid])
        try:
            return self.client.delete_sheet(uuid)
        except Exception:
            self.cache.set(self.cache_key, previous)
            raise

    def upload_sheet(self, file: UploadedFile, sheet_name: str) -> dict[str, Any]:
        result = self.client.upload_sheet(self.user_id, file, sheet_name)
        if result.get("status") in (200, 201):
            self.cache.clear(self.cache_key)
            self.list_sheets(refresh=True)
        return result
