"""Command line entry point (``python -m booking_metrics.cli``)."""

from .__main__ import main

__all__ = ["main"]
