"""Fetch-agnostic OHLCV series enhancement with technical indicators."""

from .domain import Bar, Interval, MarketSeries, parse_interval
from .enhance import (
    EnhancedSeries,
    EnhancementBuilder,
    IndicatorColumn,
    IndicatorKind,
    IndicatorRequest,
    parse_indicator_spec,
    parse_indicator_specs,
)
from .errors import (
    ConfigError,
    DataProviderError,
    InputError,
    MarketDataError,
    ParameterError,
)

__all__ = [
    "Bar",
    "ConfigError",
    "DataProviderError",
    "EnhancedSeries",
    "EnhancementBuilder",
    "IndicatorColumn",
    "IndicatorKind",
    "IndicatorRequest",
    "InputError",
    "Interval",
    "MarketDataError",
    "MarketSeries",
    "ParameterError",
    "parse_indicator_spec",
    "parse_indicator_specs",
    "parse_interval",
]
