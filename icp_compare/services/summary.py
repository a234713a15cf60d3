from __future__ import annotations

from typing import Any

from ..logging.init import format_fields
from ..models.comparison import ComparisonResult

"""Summary line and result table rendering for comparison output."""

__all__ = [
    "format_number",
    "summary_fields",
    "render_summary_line",
    "render_result_table",
]


def format_number(value: float) -> str:
    """Render whole numbers without a decimal part (10.0 -> "10")."""
    if value == int(value):
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def summary_fields(result: ComparisonResult, sheet_name: str, file_name: str) -> dict[str, Any]:
    return {
        "sheet": sheet_name,
        "file": file_name,
        "score": f"{format_number(result.score)}/{format_number(result.total_score)}",
        "percent": result.percent,
        "matched": result.matched_companies,
    }


def render_summary_line(result: ComparisonResult, sheet_name: str, file_name: str) -> str:
    """Render the SUMMARY line for a successful comparison.

    Format:
    SUMMARY sheet={sheet} file={file} score={score}/{total} percent={percent} matched={companies}

    Examples:
        >>> from icp_compare.models.comparison import ComparisonResult, MatchedEntry
        >>> r = ComparisonResult(score=10, total_score=10, percent="100%",
        ...                      data=[MatchedEntry("Acme Corp", "CTO")])
        >>> render_summary_line(r, "Q1-Targets", "leads.xlsx")
        'SUMMARY sheet=Q1-Targets file=leads.xlsx score=10/10 percent=100% matched=1'
    """
    return f"SUMMARY {format_fields(summary_fields(result, sheet_name, file_name))}"


def render_result_table(result: ComparisonResult) -> list[str]:
    """Render matched company/designation pairs as aligned text lines."""
    if not result.data:
        return ["(no matches)"]
    width = max(len("Company"), *(len(e.company) for e in result.data))
    lines = [f"{'Company'.ljust(width)}  Designation", f"{'-' * width}  -----------"]
    for entry in result.data:
        lines.append(f"{entry.company.ljust(width)}  {entry.designation}")
    return lines
