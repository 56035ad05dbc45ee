from __future__ import annotations

import logging
import sys

from ..models.diagnostics import ParseDiagnostics

"""Logging initialization with labeled prefixes.

Every line written by the tool starts with one of the labels
INFO | WARN | ERROR | SUMMARY so the output can be grepped or parsed by the
dashboard wrapper. The SUMMARY label uses a custom level between INFO and
WARNING.

Module loggers (``logging.getLogger(__name__)``) live under the
``booking_metrics`` namespace and therefore share the handler installed here.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "log_parse_diagnostics",
    "log_stage_error",
    "log_summary",
    "reset_logging",
    "LabeledFormatter",
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
]

LOGGER_NAME = "booking_metrics"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter that prefixes each message with a short level label."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the application logger (idempotent).

    Args:
        level: Initial level for the logger and its stdout handler

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def enable_debug() -> None:
    """Lower the application logger and its handlers to DEBUG."""
    logger = get_logger()
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level.

    Args:
        message: The summary message to log (without the SUMMARY label)
    """
    get_logger().log(SUMMARY_LEVEL, message)


def log_parse_diagnostics(
    diagnostics: ParseDiagnostics, logger: logging.Logger | None = None
) -> None:
    """Report a parsed export: one INFO line, then each parse warning at WARN.

    Args:
        diagnostics: Diagnostics produced by the export reader
        logger: Logger to write to (defaults to the application logger)
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    delimiter = "\\t" if diagnostics.delimiter == "\t" else diagnostics.delimiter
    logger.info(
        f"parsed rows={diagnostics.row_count} delimiter={delimiter} "
        f"recovered={str(diagnostics.recovered).lower()}"
    )
    for w in diagnostics.warnings:
        logger.warning(w)


def log_stage_error(stage: str, error: BaseException) -> None:
    """Log a fatal pipeline error as ``ERROR <stage>: <message>``."""
    get_logger().error(f"{stage}: {error}")


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
