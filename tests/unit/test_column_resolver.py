from __future__ import annotations

import pytest

from icp_compare.excel.columns import (
    NOT_FOUND,
    ColumnIndex,
    MissingColumnError,
    require_columns,
    resolve_columns,
)


def test_resolve_mixed_case_headers():
    index = resolve_columns(["Company Name", "Job Title"])
    assert index == ColumnIndex(company=0, designation=1)


def test_resolve_upper_case_headers():
    index = resolve_columns(["COMPANY", "DESIGNATION"])
    assert index == ColumnIndex(company=0, designation=1)


def test_resolve_missing_company():
    index = resolve_columns(["Name", "Email"])
    assert index.company == NOT_FOUND
    assert index.designation == NOT_FOUND


def test_designation_matches_job_or_title():
    assert resolve_columns(["Email", "company", "Job"]).designation == 2
    assert resolve_columns(["Title", "Company"]).designation == 0


def test_first_matching_header_wins():
    index = resolve_columns(["Name", "Company", "Parent Company", "Title", "Designation"])
    assert index.company == 1
    assert index.designation == 3


def test_blank_header_cells_are_skipped():
    index = resolve_columns([None, float("nan"), "", "company", "designation"])
    assert index == ColumnIndex(company=3, designation=4)


def test_non_string_headers_are_compared_as_text():
    index = resolve_columns([2024, "Company", "Title"])
    assert index == ColumnIndex(company=1, designation=2)


def test_known_overlap_is_not_second_guessed():
    # "Job Company History" contains both keywords; the heuristic takes it for both fields
    index = resolve_columns(["Job Company History", "Designation"])
    assert index == ColumnIndex(company=0, designation=0)


def test_require_columns_reports_company_first():
    with pytest.raises(MissingColumnError) as e:
        require_columns(resolve_columns(["Name", "Email"]))
    assert e.value.field == "company_name"
    assert str(e.value).startswith("Could not find company_name column")


def test_require_columns_reports_designation():
    with pytest.raises(MissingColumnError) as e:
        require_columns(resolve_columns(["Company", "Email"]))
    assert e.value.field == "designation"
    assert "designation column" in e.value.user_message


def test_require_columns_passes_through_resolved_index():
    index = ColumnIndex(company=0, designation=1)
    assert require_columns(index) is index


def test_empty_header_row():
    index = resolve_columns([])
    assert index.missing == ["company_name", "designation"]
