from __future__ import annotations

import logging
import sys
from io import StringIO

import icp_compare.logging.init as log_init
from icp_compare.logging.init import (
    LabeledFormatter,
    enable_debug,
    format_fields,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "icp_compare"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    captured_output = StringIO()
    logger = logging.getLogger("test_icp_compare")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(25, "SUMMARY")
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert get_logger() is logger1
    assert len(logger1.handlers) == 1


def test_module_loggers_share_labeled_output(capsys):
    setup_logging()
    logging.getLogger("icp_compare.services.session").error("Saved ICP sheet not found")
    assert "ERROR Saved ICP sheet not found" in capsys.readouterr().out


def test_log_summary_convenience_function(capsys):
    log_init.reset_logging()
    setup_logging()
    log_summary("sheet=Q1 file=a.xlsx score=1/2 percent=50% matched=1")
    out = capsys.readouterr().out
    assert out.strip() == "SUMMARY sheet=Q1 file=a.xlsx score=1/2 percent=50% matched=1"


def test_log_summary_renders_fields_in_order(capsys):
    setup_logging()
    log_summary({"sheet": "Q1-Targets", "file": "leads.xlsx", "score": "10/10", "matched": 1})
    assert capsys.readouterr().out.strip() == "SUMMARY sheet=Q1-Targets file=leads.xlsx score=10/10 matched=1"


def test_format_fields_empty():
    assert format_fields({}) == ""


def _record(level: int) -> logging.LogRecord:
    try:
        raise ValueError("bad zip")
    except ValueError:
        exc_info = sys.exc_info()
    return logging.LogRecord("icp_compare.excel.reader", level, __file__, 1, "failed to read", None, exc_info)


def test_traceback_only_on_debug_records():
    fmt = LabeledFormatter()
    debug_line = fmt.format(_record(logging.DEBUG))
    error_line = fmt.format(_record(logging.ERROR))
    assert debug_line.startswith("DEBUG failed to read\nTraceback")
    assert "ValueError: bad zip" in debug_line
    assert error_line == "ERROR failed to read"


def test_enable_debug_lowers_logger_and_handlers(capsys):
    logger = setup_logging()
    enable_debug()
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
