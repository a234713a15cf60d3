from __future__ import annotations

import json
from pathlib import Path

from icp_compare.logging.error_log import ErrorLogBuffer
from icp_compare.models.error_record import ErrorRecord


def test_error_record_json_line_has_fixed_keys():
    rec = ErrorRecord.create(
        sheet="Q1-Targets",
        file="leads.xlsx",
        stage="resolve",
        error_type="MISSING_COLUMN",
        message="Could not find company_name column in the uploaded file.",
    )
    data = json.loads(rec.to_json_line())
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == {"timestamp", "sheet", "file", "stage", "error_type", "message"}
    assert data["stage"] == "resolve"


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("見込み客", "リード.xlsx", "fetch", "SAVED_SHEET_NOT_FOUND", "not found")
    assert "見込み客" in rec.to_json_line()


def test_buffer_flush_appends_lines(tmp_path: Path):
    buffer = ErrorLogBuffer(tmp_path / "logs")
    assert buffer.flush() is None
    assert not (tmp_path / "logs").exists()
    buffer.append(ErrorRecord.create("a", "b.xlsx", "score", "SCORING_ERROR", "down"))
    buffer.append(ErrorRecord.create("a", "b.xlsx", "score", "SCORING_ERROR", "down again"))
    path = buffer.flush()
    assert path is not None and path.name.startswith("errors-")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert len(buffer) == 0
