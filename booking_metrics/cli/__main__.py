from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..ingest.fetch import FetchError, read_source
from ..ingest.reader import ParseError, parse_export
from ..logging.init import enable_debug, log_stage_error, log_summary, setup_logging
from ..services.pipeline import PipelineResult, run_pipeline
from ..services.summary import format_delimiter, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (override mode) and the YAML config
- Read the export from its URL or path
- Parse, process and aggregate
- Emit one SUMMARY line (and the full metrics as JSON with --json)

Exit codes: 0 success, 1 any fatal error (config, read, or zero parsed rows).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

CONFIG_ENV_VAR = "BOOKING_METRICS_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so BOOKING_METRICS_* values beat the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Job bookings export -> dashboard metrics")
    p.add_argument("--config", type=Path, default=None, help="Path to dashboard.yml")
    p.add_argument("--source", default=None, help="Export URL or path (overrides config)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print parsed columns & first rows then exit")
    p.add_argument("--json", action="store_true", help="Print metrics and diagnostics as JSON")
    return p.parse_args(argv)


def _inspect_data(text: str) -> int:
    parsed = parse_export(text)
    diag = parsed.diagnostics
    print(f"rows={diag.row_count} delimiter={format_delimiter(diag.delimiter)} recovered={diag.recovered}")
    print(f"columns={list(diag.columns)}")
    for w in diag.warnings:
        print(f"warning: {w}")
    print("sample_rows=", list(parsed.rows[:3]))
    return EXIT_SUCCESS


def _result_payload(result: PipelineResult) -> dict:
    diag = result.diagnostics
    payload = result.metrics.to_dict()
    payload["diagnostics"] = {
        "row_count": diag.row_count,
        "delimiter": diag.delimiter,
        "warnings": list(diag.warnings),
        "recovered": diag.recovered,
        "dropped_rows": result.dropped_rows,
    }
    return payload


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no list was given; [] means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    config_path = args.config or Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        log_stage_error("config", e)
        return EXIT_FATAL
    if args.source:
        cfg = replace(cfg, source=args.source)

    logger.info(f"Loading export from: {cfg.source}")
    try:
        text = read_source(cfg.source, timeout=cfg.fetch_timeout_seconds)
    except FetchError as e:
        log_stage_error("fetch", e)
        return EXIT_FATAL

    try:
        if args.inspect_data:
            return _inspect_data(text)
        result = run_pipeline(text, cfg)
    except ParseError as e:
        log_stage_error("parse", e)
        return EXIT_FATAL

    summary_line = render_summary_line(result, cfg.timezone)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if args.json:
        print(json.dumps(_result_payload(result), ensure_ascii=False, indent=2))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
