from __future__ import annotations

import logging
from io import StringIO

from booking_metrics.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    enable_debug,
    get_logger,
    log_parse_diagnostics,
    log_stage_error,
    log_summary,
    setup_logging,
)
from booking_metrics.models.diagnostics import ParseDiagnostics


def _capture(logger: logging.Logger) -> StringIO:
    buf = StringIO()
    logger.handlers[0].setStream(buf)
    return buf


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_labeled_prefixes():
    """Each level is rendered with its short label."""
    logger = setup_logging()
    buf = _capture(logger)
    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    log_summary("rows=1")
    assert buf.getvalue().splitlines() == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY rows=1",
    ]


def test_module_loggers_share_the_handler():
    logger = setup_logging()
    buf = _capture(logger)
    logging.getLogger(f"{LOGGER_NAME}.ingest.reader").warning("2 rows missing")
    assert buf.getvalue() == "WARN 2 rows missing\n"


def test_debug_hidden_until_enabled():
    logger = setup_logging()
    buf = _capture(logger)
    logger.debug("hidden")
    enable_debug()
    logger.debug("shown")
    assert buf.getvalue() == "DEBUG shown\n"


def test_get_logger_configures_on_first_use():
    logger = get_logger()
    assert logger is setup_logging()
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_log_parse_diagnostics_reports_rows_then_warnings():
    logger = setup_logging()
    buf = _capture(logger)
    diag = ParseDiagnostics(
        row_count=3,
        delimiter="\t",
        warnings=("2 rows had a field-count mismatch; rebuilt 3 rows using dominant row length 5",),
        recovered=True,
    )
    log_parse_diagnostics(diag)
    assert buf.getvalue().splitlines() == [
        "INFO parsed rows=3 delimiter=\\t recovered=true",
        "WARN 2 rows had a field-count mismatch; rebuilt 3 rows using dominant row length 5",
    ]


def test_log_stage_error_prefixes_stage():
    logger = setup_logging()
    buf = _capture(logger)
    log_stage_error("fetch", RuntimeError("HTTP 503 from https://example.com/x.csv"))
    assert buf.getvalue() == "ERROR fetch: HTTP 503 from https://example.com/x.csv\n"
