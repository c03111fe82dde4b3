"""Runtime wiring: fetch, enhance and render configured symbols."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from marketdata.config import Settings
from marketdata.data.alpha_vantage import AlphaVantageDataProvider
from marketdata.data.base import MarketDataProvider
from marketdata.data.csv_data import CsvDataProvider
from marketdata.data.yfinance_data import YFinanceDataProvider
from marketdata.domain.models import Interval, MarketSeries
from marketdata.enhance.builder import EnhancementBuilder
from marketdata.enhance.requests import IndicatorRequest
from marketdata.enhance.series import EnhancedSeries
from marketdata.errors import ConfigError, MarketDataError
from marketdata.logging.logger import setup_logger
from marketdata.reporting.plot import generate_plotly_report

OUTPUT_FORMATS = ("text", "csv")

logger = logging.getLogger("marketdata.runtime")


def build_data_provider(settings: Settings) -> MarketDataProvider:
    """Select data provider from the configured source."""
    if settings.data_source == "csv":
        return CsvDataProvider(data_dir=settings.historical_data_dir)
    if settings.data_source == "yfinance":
        return YFinanceDataProvider(interval=settings.interval)
    if settings.data_source == "alphavantage":
        return AlphaVantageDataProvider(
            api_key=settings.alphavantage_api_key,
            interval=settings.interval,
            output_size=settings.alphavantage_output_size,
        )
    raise ConfigError(f"Unsupported data source '{settings.data_source}'")


def load_series(
    provider: MarketDataProvider,
    symbol: str,
    interval: Interval = Interval.DAY,
) -> MarketSeries:
    """Fetch bars from a provider and validate them into a series."""
    frame = provider.get_bars(symbol)
    series = MarketSeries.from_frame(symbol, frame, interval=interval)
    logger.debug("loaded | %s | %d bars", symbol, len(series))
    return series


def enhance_series(
    series: MarketSeries,
    requests: Sequence[IndicatorRequest],
    max_workers: int | None = None,
) -> EnhancedSeries:
    return EnhancementBuilder(series).with_requests(requests).compute(max_workers=max_workers)


def render(enhanced: EnhancedSeries, output_format: str, include_header: bool = True) -> str:
    if output_format == "text":
        return str(enhanced)
    if output_format == "csv":
        frame = enhanced.to_frame()
        frame.insert(0, "symbol", enhanced.symbol)
        return frame.to_csv(header=include_header).rstrip("\n")
    raise ConfigError(f"output format must be one of {', '.join(OUTPUT_FORMATS)}")


def run(
    settings: Settings,
    output_format: str = "text",
    report_path: str | None = None,
    stream: TextIO | None = None,
) -> int:
    """Enhance every configured symbol; return a process exit code."""
    setup_logger(settings.log_level)
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"output format must be one of {', '.join(OUTPUT_FORMATS)}")
    out = stream if stream is not None else sys.stdout
    requests = settings.indicator_requests()
    provider = build_data_provider(settings)

    results: list[EnhancedSeries] = []
    failures = 0
    for symbol in settings.symbols:
        try:
            series = load_series(provider, symbol, settings.interval)
            enhanced = enhance_series(series, requests, settings.max_workers)
        except MarketDataError as exc:
            failures += 1
            logger.error("failed | %s | %s", symbol, exc)
            continue
        out.write(render(enhanced, output_format, include_header=not results))
        out.write("\n")
        results.append(enhanced)
        logger.info(
            "enhanced | %s | %d bars | %s",
            symbol,
            len(enhanced),
            ", ".join(enhanced.labels) or "no indicators",
        )

    if report_path and results:
        path = generate_plotly_report(results, report_path)
        logger.info("report | %s", path)
    return 1 if failures else 0
