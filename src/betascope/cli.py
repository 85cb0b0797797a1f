"""Command-line interface for betascope runs."""

from __future__ import annotations

import argparse
import sys

from betascope.config import DATA_SOURCES, Settings
from betascope.domain.errors import ConfigError
from betascope.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Estimate low/high/close betas of an asset against an index"
    )
    parser.add_argument("--asset", type=str, help="Asset symbol")
    parser.add_argument("--index", type=str, help="Index (benchmark) symbol")
    parser.add_argument("--start", type=str, help="First date, YYYY-MM-DD")
    parser.add_argument("--end", type=str, help="Last date (inclusive), YYYY-MM-DD")
    parser.add_argument("--confidence", type=float, help="Confidence level, e.g. 0.95")
    parser.add_argument("--min-rows", type=int, help="Minimum aligned rows required")
    parser.add_argument("--workers", type=int, help="Run channel regressions on N threads")
    parser.add_argument("--data-source", choices=sorted(DATA_SOURCES), help="Price source")
    parser.add_argument("--historical-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--events-dir", type=str, help="Run outputs directory")
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip the Plotly HTML report",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.asset:
        overrides["asset_symbol"] = args.asset
    if args.index:
        overrides["index_symbol"] = args.index
    if args.start:
        overrides["start_date"] = args.start
    if args.end:
        overrides["end_date"] = args.end
    if args.confidence is not None:
        overrides["confidence_level"] = args.confidence
    if args.min_rows is not None:
        overrides["min_aligned_rows"] = args.min_rows
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.data_source:
        overrides["data_source"] = args.data_source
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.no_report:
        overrides["write_report"] = False
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
