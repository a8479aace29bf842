"""
Summarize lap-time statistics for one or more telemetry CSV exports.

This script runs the ingestion pipeline over each file and prints a side-by-side
comparison of best lap, average lap, spread and consistency.

Usage:
    python3 summarize_laps.py session.csv
    python3 summarize_laps.py morning.csv afternoon.csv --output comparison.csv
    python3 summarize_laps.py scca_export.csv --laps
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from lapsheet.errors import LapsheetError
from lapsheet.lap_times import format_lap_time
from lapsheet.models import ParseResult
from lapsheet.session import build_session_payload


def load_result(data_file: Path) -> Optional[ParseResult]:
    """
    Parse a single telemetry file.

    Args:
        data_file: Path to the CSV export.

    Returns:
        ParseResult, or None if the file could not be parsed (the reason and
        a preview of its first lines are printed).
    """
    text = data_file.read_text(encoding="utf-8-sig", errors="replace")
    try:
        result = build_session_payload(text)
    except LapsheetError as exc:
        print(f"Error in {data_file.name}: {exc.message}")
        for line in exc.preview:
            print(f"    | {line}")
        return None

    if result.metadata.is_empty():
        print(f"Note: no driver, car, track or session found in {data_file.name}")
    return result


def build_comparison(results: Dict[str, ParseResult]) -> pd.DataFrame:
    """
    Build a comparison table with one row per parsed file.

    Args:
        results: Mapping of file name to ParseResult.

    Returns:
        DataFrame sorted by best lap.
    """
    rows = []
    for name, result in results.items():
        stats = result.statistics
        rows.append({
            "file": name,
            "format": result.format.value,
            "driver": result.metadata.driver_name or "",
            "track": result.metadata.track or "",
            "laps": stats.sample_size,
            "best_s": stats.best,
            "average_s": stats.average,
            "std_dev_s": stats.std_dev,
            "consistency": stats.consistency.value,
        })

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values("best_s").reset_index(drop=True)


def print_laps(name: str, result: ParseResult) -> None:
    """Print every lap of a file with its delta to the best lap."""
    best = result.statistics.best
    print(f"\n{name}")
    print("-" * 40)
    for lap_number, seconds in enumerate(result.durations, start=1):
        marker = "  <- best" if seconds == best else ""
        print(f"  Lap {lap_number:>3}  {format_lap_time(seconds)}  +{seconds - best:.3f}s{marker}")


def print_comparison(df: pd.DataFrame) -> None:
    """Print the comparison table with lap times formatted as M:SS.mmm."""
    display = df.copy()
    display["best"] = display["best_s"].map(format_lap_time)
    display["average"] = display["average_s"].map(format_lap_time)
    display["std_dev"] = display["std_dev_s"].map(lambda v: f"{v:.3f}s")
    columns = ["file", "format", "driver", "track", "laps", "best", "average", "std_dev", "consistency"]

    print(f"\n{'='*90}")
    print("LAP TIME SUMMARY")
    print(f"{'='*90}")
    print(display[columns].to_string(index=False))
    print(f"{'='*90}\n")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Summarize lap-time statistics for telemetry CSV exports"
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Telemetry CSV exports (tabular or SCCA)"
    )
    parser.add_argument(
        "--laps",
        action="store_true",
        help="Also print every lap with its delta to the best lap"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Save the comparison table to this CSV file"
    )
    args = parser.parse_args(argv)

    results = {}
    for data_file in args.files:
        if not data_file.exists():
            print(f"Error: Data file not found: {data_file}")
            continue
        result = load_result(data_file)
        if result is not None:
            results[data_file.name] = result

    if not results:
        print("\nError: No files could be parsed.")
        return 1

    if args.laps:
        for name, result in results.items():
            print_laps(name, result)

    df = build_comparison(results)
    print_comparison(df)

    if args.output:
        df.to_csv(args.output, index=False)
        print(f"Saved comparison CSV to: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
