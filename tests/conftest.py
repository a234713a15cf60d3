# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pandas as pd
import pytest

from icp_compare.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """api:
  base_url: https://events.example.com
  mapping_base_url: https://mapping.example.com
  user_id: 42
  token: secret-token
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "icp.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(directory: Path, name: str, sheets: dict[str, list[list[object]]], startrow: int = 0) -> Path:
    """Write raw rows (no pandas header/index) into an .xlsx workbook.

    ``startrow`` leaves that many empty rows above the data.
    """
    p = directory / name
    with pd.ExcelWriter(p) as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False, startrow=startrow)
    return p


@pytest.fixture()
def excel_factory(tmp_path: Path):
    def _factory(
        sheets: dict[str, list[list[object]]], name: str = "upload.xlsx", startrow: int = 0
    ) -> Path:
        return make_excel(tmp_path, name, sheets, startrow=startrow)
    return _factory


@pytest.fixture()
def q1_saved_rows() -> list[dict[str, Any]]:
    return [{"companyname": "Acme Corp", "designation": "CEO, CTO", "priority": "High"}]


@pytest.fixture()
def fake_sheets(q1_saved_rows):
    sheets = MagicMock()
    sheets.get_saved_sheet_rows.side_effect = (
        lambda name: list(q1_saved_rows) if name == "Q1-Targets" else []
    )
    return sheets


@pytest.fixture()
def fake_scorer():
    scorer = MagicMock()
    scorer.compare.return_value = {
        "status": True,
        "score": 10,
        "totalScore": 10,
        "percent": "100%",
        "data": [{"company": "Acme Corp", "designation": "CTO"}],
    }
    return scorer
