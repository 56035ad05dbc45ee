from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..ingest.fetch import read_source
from ..ingest.reader import parse_export
from ..models.config_models import DashboardConfig
from ..models.diagnostics import ParseDiagnostics
from ..models.job import ProcessedJob
from ..models.metrics import MetricsSet
from .aggregation import compute_metrics
from .processor import process_rows
from .progress import RowProgress

"""Pipeline orchestration.

raw text -> canonical rows -> processed jobs -> metrics. Each stage builds new
immutable output from the previous one. Failures surface as FetchError or
ParseError from the stage that hit them; there are no partial results.
"""

__all__ = [
    "PipelineResult",
    "load_and_run",
    "run_pipeline",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    jobs: tuple[ProcessedJob, ...]
    metrics: MetricsSet
    diagnostics: ParseDiagnostics
    dropped_rows: int  # rows without a usable date

    @property
    def last_updated(self) -> date | None:
        return self.metrics.summary.last_updated


def run_pipeline(text: str, config: DashboardConfig) -> PipelineResult:
    """Run parse, process and aggregate over already-read export text.

    Raises:
        ParseError: When the text yields no rows (EmptyExportError) or cannot
            be tokenized
    """
    parsed = parse_export(text)

    with RowProgress(len(parsed.rows)) as progress:
        batch = process_rows(
            parsed.rows,
            config.payouts,
            allow_thousands=config.thousands_separators,
            on_row=progress.tick,
        )
        progress.set_postfix(jobs=len(batch.jobs), dropped=batch.dropped_rows)
    logger.info(f"processed jobs={len(batch.jobs)} dropped={batch.dropped_rows}")

    metrics = compute_metrics(batch.jobs, config.payouts, config.thresholds)
    return PipelineResult(
        jobs=batch.jobs,
        metrics=metrics,
        diagnostics=parsed.diagnostics,
        dropped_rows=batch.dropped_rows,
    )


def load_and_run(config: DashboardConfig) -> PipelineResult:
    """Read the configured source, then run the pipeline over it.

    Raises:
        FetchError: When the source cannot be read
        ParseError: See run_pipeline
    """
    text = read_source(config.source, timeout=config.fetch_timeout_seconds)
    return run_pipeline(text, config)
