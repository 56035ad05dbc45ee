#!/usr/bin/env python3
"""Sample export generator.

Writes a synthetic job bookings export with the kinds of mess the real exports
have: mixed date formats, "+ GST" and "N/A" costs, free-text hours, cancelled
and touch-up bookings, undated rows and a "Notes" header that only some rows
fill. Useful for trying the CLI and for timing large loads.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

import numpy as np

STAFF = ["Alice", "Ben", "Chloe", "Dev", "Ella", "Jasmine", "Mitchell", "Priya", "Uppal/Dhruv"]
BOOKINGS = ["Kitchen clean", "Office fit-out", "Bond clean", "Window wash", "Carpet steam"]
HEADER = ["Date", "Booking Name", "Staff", "Amount", "Paid Hours", "Notes"]


def _format_date(d: date, rng: np.random.Generator) -> str:
    style = rng.integers(0, 4)
    if style == 0:
        return f"{d.day}/{d.month}/{d.year}"
    if style == 1:
        return f"{d.day:02d}-{d.month:02d}-{d.year % 100:02d}"
    if style == 2:
        return d.isoformat()
    return d.strftime("%d %B %Y")


def _format_cost(rng: np.random.Generator) -> str:
    amount = float(rng.integers(8, 80)) * 12.5
    style = rng.integers(0, 10)
    if style == 0:
        return "N/A"
    if style < 4:
        return f"${amount:.2f} + GST"
    return f"{amount:.2f}"


def _format_hours(staff: list[str], rng: np.random.Generator) -> str:
    style = rng.integers(0, 5)
    if style == 0:
        return ""
    if style == 1 and len(staff) > 1:
        return " ".join(f"{float(rng.integers(2, 9)) / 2:g} ({s})" for s in staff)
    hours = float(rng.integers(2, 17)) / 2
    return f"{hours:g}H" if style < 4 else f"{hours:g} hours"


def generate_rows(rows: int, seed: int = 42, start: date | None = None) -> list[list[str]]:
    """Generate export rows (header included) with deliberate inconsistencies."""
    rng = np.random.default_rng(seed)
    start = start or date(2024, 1, 1)
    out: list[list[str]] = [HEADER]
    for _ in range(rows):
        d = start + timedelta(days=int(rng.integers(0, 180)))
        staff = list(rng.choice(STAFF, size=int(rng.integers(1, 4)), replace=False))
        booking = str(rng.choice(BOOKINGS))
        roll = rng.random()
        if roll < 0.05:
            booking += " - CANCELLED"
        elif roll < 0.1:
            booking = "Touch up " + booking.lower()
        date_cell = "TBC" if rng.random() < 0.02 else _format_date(d, rng)
        row = [date_cell, booking, ", ".join(staff), _format_cost(rng), _format_hours(staff, rng)]
        # only some rows carry the trailing Notes cell
        if rng.random() < 0.15:
            row.append("call ahead")
        out.append(row)
    return out


def _quote(cell: str, delimiter: str) -> str:
    if delimiter in cell or '"' in cell:
        return '"' + cell.replace('"', '""') + '"'
    return cell


def write_export(output_path: Path, rows: list[list[str]], delimiter: str = ",") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    lines = [delimiter.join(_quote(c, delimiter) for c in r) for r in rows]
    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Created export: {output_path}")
    print(f"  Data rows: {len(rows) - 1:,}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a messy sample job bookings export")
    parser.add_argument("output", type=Path, help="Output CSV path")
    parser.add_argument("--rows", type=int, default=500, help="Number of data rows (default: 500)")
    parser.add_argument(
        "--delimiter",
        choices=["comma", "tab", "semicolon", "pipe"],
        default="comma",
        help="Field delimiter (default: comma)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    delimiter = {"comma": ",", "tab": "\t", "semicolon": ";", "pipe": "|"}[args.delimiter]
    write_export(args.output, generate_rows(args.rows, args.seed), delimiter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
