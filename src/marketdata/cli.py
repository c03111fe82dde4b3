"""Command-line interface for market-data."""

from __future__ import annotations

import argparse
import sys

from marketdata.config import DATA_SOURCES, Settings, parse_symbols
from marketdata.errors import ConfigError, MarketDataError
from marketdata.runtime import OUTPUT_FORMATS, run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Enhance historical OHLCV series with technical indicators"
    )
    parser.add_argument("--source", choices=DATA_SOURCES, help="Data source")
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols")
    parser.add_argument("--data-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--interval", type=str, help="Bar interval, e.g. 1day, 1week, 5min")
    parser.add_argument(
        "--indicators",
        type=str,
        help="Comma-separated indicator specs, e.g. sma:10,rsi:14,macd:12:26:9",
    )
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="text", help="Output format")
    parser.add_argument("--report", type=str, help="Write a plotly HTML report to this path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument(
        "--max-workers",
        type=int,
        help="Evaluate indicators on a thread pool of this size",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.source:
        overrides["data_source"] = args.source
    if args.symbols:
        overrides["symbols"] = parse_symbols(args.symbols, settings.symbols)
    if args.data_dir:
        overrides["historical_data_dir"] = args.data_dir
    if args.interval:
        overrides["interval"] = args.interval
    if args.indicators is not None:
        overrides["indicators"] = args.indicators
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    if args.max_workers is not None:
        overrides["max_workers"] = args.max_workers
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
        return run(settings, output_format=args.format, report_path=args.report)
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2
    except MarketDataError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
