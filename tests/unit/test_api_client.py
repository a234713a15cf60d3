from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from icp_compare.api.client import ApiError, ICPApiClient
from icp_compare.models.comparison import ComparisonRequest
from icp_compare.models.records import NormalizedRecord
from icp_compare.models.uploaded_file import XLSX_MIME, UploadedFile


def _response(status_code: int = 200, body: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


def _client(resp: MagicMock, **kwargs) -> ICPApiClient:
    session = requests.Session()
    session.request = MagicMock(return_value=resp)
    return ICPApiClient(
        "https://events.example.com/",
        "https://mapping.example.com",
        kwargs.pop("token", "tok"),
        session=session,
        **kwargs,
    )


def test_bearer_token_header():
    client = _client(_response(200, {"status": 200, "data": []}))
    assert client.session.headers["Authorization"] == "Bearer tok"


def test_list_sheets_parses_rows():
    body = {
        "status": 200,
        "data": [{"uuid": "u-1", "sheet_name": "Q1-Targets_1700", "sheetRows": [{"companyname": "Acme"}]}],
    }
    client = _client(_response(200, body))
    sheets = client.list_sheets(42)
    client.session.request.assert_called_once()
    method, url = client.session.request.call_args.args
    assert method == "GET"
    assert url == "https://events.example.com/api/get-icp-data/42"
    assert sheets[0].uuid == "u-1"
    assert sheets[0].display_name == "Q1-Targets"
    assert sheets[0].rows == [{"companyname": "Acme"}]


def test_list_sheets_non_200_status_in_body():
    client = _client(_response(200, {"status": 404, "message": "No sheets"}))
    with pytest.raises(ApiError) as e:
        client.list_sheets(42)
    assert e.value.server_message == "No sheets"


def test_compare_posts_json_payload_once():
    scorer_body = {"status": True, "score": 1, "totalScore": 2, "percent": "50%", "data": []}
    client = _client(_response(200, scorer_body))
    request = ComparisonRequest(
        saved_records=[NormalizedRecord("Acme", ["CEO"], "P1")],
        uploaded_records=[NormalizedRecord("Acme", ["CEO"])],
    )
    assert client.compare(request) == scorer_body
    call = client.session.request.call_args
    assert call.args == ("POST", "https://mapping.example.com/api/mapping/v1/icp/compare-icp")
    assert call.kwargs["json"] == request.to_payload()
    assert call.kwargs["headers"]["Content-Type"] == "application/json"
    assert call.kwargs["timeout"] is None
    assert client.session.request.call_count == 1


def test_http_error_carries_server_message():
    client = _client(_response(422, {"message": "Invalid payload"}))
    with pytest.raises(ApiError) as e:
        client.compare(ComparisonRequest(saved_records=[], uploaded_records=[]))
    assert e.value.status_code == 422
    assert e.value.server_message == "Invalid payload"


def test_transport_error_is_wrapped():
    session = requests.Session()
    session.request = MagicMock(side_effect=requests.ConnectionError("refused"))
    client = ICPApiClient("https://a", "https://b", session=session, timeout=5)
    with pytest.raises(ApiError) as e:
        client.delete_sheet("u-1")
    assert "refused" in str(e.value)
    assert e.value.status_code is None
    assert session.request.call_args.kwargs["timeout"] == 5


def test_upload_sheet_is_multipart():
    client = _client(_response(200, {"status": 201, "message": "stored"}))
    upload = UploadedFile(name="q3.xlsx", content=b"bytes", content_type=XLSX_MIME)
    assert client.upload_sheet(42, upload, "Q3") == {"status": 201, "message": "stored"}
    call = client.session.request.call_args
    assert call.args[1] == "https://events.example.com/api/store-icp-data"
    assert call.kwargs["data"] == {"user_id": "42", "sheet_name": "Q3"}
    assert call.kwargs["files"]["file"] == ("q3.xlsx", b"bytes", XLSX_MIME)
