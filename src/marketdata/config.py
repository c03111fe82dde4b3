"""Environment and CLI runtime configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from marketdata.domain.models import Interval, parse_interval
from marketdata.enhance.requests import IndicatorRequest, parse_indicator_specs
from marketdata.errors import ConfigError, ParameterError

DEFAULT_SYMBOLS = ["SPY"]
DEFAULT_INDICATORS = "sma:10,ema:20,rsi:14,stochastic:14:3,macd:12:26:9"
DATA_SOURCES = ("csv", "yfinance", "alphavantage")
_DATA_SOURCE_ALIASES = {
    "csv": "csv",
    "file": "csv",
    "yfinance": "yfinance",
    "yahoo": "yfinance",
    "alphavantage": "alphavantage",
    "alpha_vantage": "alphavantage",
    "alpha-vantage": "alphavantage",
}


def parse_optional_positive_int(value: str | None, *, field_name: str) -> int | None:
    """Parse optional positive integer values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        parsed = int(text)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer, got '{text}'") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols, dropping duplicates while preserving order."""
    fallback = default or DEFAULT_SYMBOLS
    if not value:
        return list(fallback)
    symbols = [item.strip().upper() for item in value.split(",") if item.strip()]
    return list(dict.fromkeys(symbols)) or list(fallback)


def normalize_data_source(value: str | None, default: str = "csv") -> str:
    candidate = (value or default).strip().lower()
    resolved = _DATA_SOURCE_ALIASES.get(candidate)
    if resolved is None:
        raise ConfigError(f"data_source must be one of {', '.join(DATA_SOURCES)}")
    return resolved


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    data_source: str = "csv"
    historical_data_dir: str = "historical_data"
    symbols: list[str] = field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    interval: Interval = Interval.DAY
    indicators: str = DEFAULT_INDICATORS
    log_level: str = "INFO"
    alphavantage_api_key: str = ""
    alphavantage_output_size: str = "compact"
    max_workers: int | None = None

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables (and a ``.env`` file if present)."""
        load_dotenv()
        try:
            interval = parse_interval(os.getenv("INTERVAL", Interval.DAY.value))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        raw = cls(
            data_source=normalize_data_source(os.getenv("DATA_SOURCE")),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            symbols=parse_symbols(os.getenv("SYMBOLS")),
            interval=interval,
            indicators=str(os.getenv("INDICATORS", DEFAULT_INDICATORS)).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            alphavantage_api_key=str(os.getenv("ALPHAVANTAGE_API_KEY", "")).strip(),
            alphavantage_output_size=str(
                os.getenv("ALPHAVANTAGE_OUTPUT_SIZE", "compact")
            ).strip().lower(),
            max_workers=parse_optional_positive_int(
                os.getenv("MAX_WORKERS"),
                field_name="max_workers",
            ),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        source_override = overrides.get("data_source")
        if isinstance(source_override, str):
            overrides["data_source"] = normalize_data_source(source_override)
        interval_override = overrides.get("interval")
        if isinstance(interval_override, str):
            try:
                overrides["interval"] = parse_interval(interval_override)
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        updated = replace(self, **overrides)
        return updated.validate()

    def indicator_requests(self) -> list[IndicatorRequest]:
        """Parse the configured indicator specs."""
        try:
            return parse_indicator_specs(self.indicators)
        except ParameterError as exc:
            raise ConfigError(f"Invalid indicators '{self.indicators}': {exc}") from exc

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.data_source not in DATA_SOURCES:
            raise ConfigError(f"data_source must be one of {', '.join(DATA_SOURCES)}")
        if not self.symbols:
            raise ConfigError("at least one symbol is required")
        if not self.historical_data_dir:
            raise ConfigError("historical_data_dir must not be empty")
        if self.log_level not in logging.getLevelNamesMapping():
            raise ConfigError(f"Unknown log level '{self.log_level}'")
        if self.alphavantage_output_size not in {"compact", "full"}:
            raise ConfigError("alphavantage_output_size must be one of compact, full")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigError("max_workers must be positive")
        if self.data_source == "alphavantage" and not self.alphavantage_api_key:
            raise ConfigError("ALPHAVANTAGE_API_KEY is required for the alphavantage source")
        self.indicator_requests()
        return self
