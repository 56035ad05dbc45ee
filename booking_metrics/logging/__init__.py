"""Logging helpers for booking_metrics."""

from .init import (
    get_logger,
    log_parse_diagnostics,
    log_stage_error,
    log_summary,
    reset_logging,
    setup_logging,
)

__all__ = [
    "get_logger",
    "log_parse_diagnostics",
    "log_stage_error",
    "log_summary",
    "reset_logging",
    "setup_logging",
]
