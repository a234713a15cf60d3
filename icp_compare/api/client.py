from __future__ import annotations

import logging
from typing import Any

import requests
from requests.exceptions import RequestException

from ..models.comparison import ComparisonRequest
from ..models.saved_sheet import SavedSheet
from ..models.uploaded_file import UploadedFile

"""HTTP client for the ICP sheet-storage API and the remote scorer.

Two base URLs are involved: ``base_url`` serves saved ICP sheets
(list/upload/delete) and ``mapping_base_url`` serves the scoring endpoint.
Every call is a single synchronous request; nothing is retried.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ApiError",
    "ICPApiClient",
    "COMPARE_PATH",
]

LIST_SHEETS_PATH = "/api/get-icp-data/{user_id}"
DELETE_SHEET_PATH = "/api/delete-icp-data/{uuid}"
UPLOAD_SHEET_PATH = "/api/store-icp-data"
COMPARE_PATH = "/api/mapping/v1/icp/compare-icp"


class ApiError(Exception):
    """Raised for transport failures and non-success API answers.

    ``server_message`` is the ``message`` field of the response body when the
    server supplied one.
    """

    def __init__(self, message: str, status_code: int | None = None, server_message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


def _json_body(resp: requests.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class ICPApiClient:
    """Thin wrapper around a ``requests.Session`` with bearer authentication."""

    def __init__(
        self,
        base_url: str,
        mapping_base_url: str,
        token: str | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.mapping_base_url = mapping_base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        logger.debug(f"{method} {url}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        body = _json_body(resp)
        server_message = body.get("message") if isinstance(body.get("message"), str) else None
        if resp.status_code >= 400:
            raise ApiError(
                f"{method} {url} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                server_message=server_message,
            )
        return body

    def list_sheets(self, user_id: int | str) -> list[SavedSheet]:
        url = self.base_url + LIST_SHEETS_PATH.format(user_id=user_id)
        body = self._request("GET", url, headers={"Content-Type": "application/json"})
        if body.get("status") != 200:
            message = body.get("message") or "Failed to fetch ICP sheets"
            raise ApiError(str(message), status_code=body.get("status"), server_message=body.get("message"))
        return [SavedSheet.from_api(item) for item in body.get("data") or [] if isinstance(item, dict)]

    def delete_sheet(self, uuid: str) -> dict[str, Any]:
        url = self.base_url + DELETE_SHEET_PATH.format(uuid=uuid)
        body = self._request("DELETE", url, headers={"Content-Type": "application/json"})
        return {"status": body.get("status"), "message": body.get("message") or "ICP list deleted"}

    def upload_sheet(self, user_id: int | str, file: UploadedFile, sheet_name: str) -> dict[str, Any]:
        url = self.base_url + UPLOAD_SHEET_PATH
        # multipart/form-data (boundary は requests が付与)
        files = {"file": (file.name, file.content, file.content_type or "application/octet-stream")}
        data = {"user_id": str(user_id), "sheet_name": sheet_name}
        body = self._request("POST", url, data=data, files=files)
        return {"status": body.get("status"), "message": body.get("message")}

    def compare(self, request: ComparisonRequest) -> dict[str, Any]:
        """POST the comparison payload to the scorer and return the raw body.

        Success is judged by the caller from the body's ``status`` flag.
        """
        url = self.mapping_base_url + COMPARE_PATH
        return self._request(
            "POST",
            url,
            json=request.to_payload(),
            headers={"Content-Type": "application/json"},
        )
