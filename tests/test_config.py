from __future__ import annotations

import pytest

from marketdata.config import DEFAULT_INDICATORS, Settings, parse_symbols
from marketdata.domain.models import Interval
from marketdata.errors import ConfigError

ENV_KEYS = [
    "DATA_SOURCE",
    "HISTORICAL_DATA_DIR",
    "SYMBOLS",
    "INTERVAL",
    "INDICATORS",
    "LOG_LEVEL",
    "ALPHAVANTAGE_API_KEY",
    "ALPHAVANTAGE_OUTPUT_SIZE",
    "MAX_WORKERS",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("marketdata.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_settings_defaults_from_empty_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.data_source == "csv"
    assert settings.symbols == ["SPY"]
    assert settings.interval is Interval.DAY
    assert settings.indicators == DEFAULT_INDICATORS
    assert settings.max_workers is None
    assert [request.label for request in settings.indicator_requests()] == [
        "SMA 10",
        "EMA 20",
        "RSI 14",
        "Stochastic (14,3)",
        "MACD (12,26,9)",
    ]


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATA_SOURCE", "yahoo")
    monkeypatch.setenv("SYMBOLS", "aapl, msft,AAPL")
    monkeypatch.setenv("INTERVAL", "weekly")
    monkeypatch.setenv("INDICATORS", "sma:5,bb:10:1.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MAX_WORKERS", "4")

    settings = Settings.from_env()

    assert settings.data_source == "yfinance"
    assert settings.symbols == ["AAPL", "MSFT"]
    assert settings.interval is Interval.WEEK
    assert settings.log_level == "DEBUG"
    assert settings.max_workers == 4
    assert [request.label for request in settings.indicator_requests()] == [
        "SMA 5",
        "Bollinger (10,1.5)",
    ]


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("DATA_SOURCE", "bloomberg"),
        ("INTERVAL", "fortnight"),
        ("INDICATORS", "sma:0"),
        ("LOG_LEVEL", "chatty"),
        ("MAX_WORKERS", "0"),
        ("MAX_WORKERS", "many"),
        ("ALPHAVANTAGE_OUTPUT_SIZE", "huge"),
    ],
)
def test_invalid_environment_values_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError):
        Settings.from_env()


def test_alphavantage_source_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATA_SOURCE", "alpha_vantage")

    with pytest.raises(ConfigError, match="ALPHAVANTAGE_API_KEY"):
        Settings.from_env()

    monkeypatch.setenv("ALPHAVANTAGE_API_KEY", "demo")
    assert Settings.from_env().data_source == "alphavantage"


def test_overrides_normalize_and_validate() -> None:
    settings = Settings().with_overrides(data_source="file", interval="5m", max_workers=2)

    assert settings.data_source == "csv"
    assert settings.interval is Interval.MINUTE_5
    assert settings.max_workers == 2
    with pytest.raises(ConfigError):
        Settings().with_overrides(indicators="rsi:-2")


def test_parse_symbols_falls_back_to_default() -> None:
    assert parse_symbols(None) == ["SPY"]
    assert parse_symbols(" , ") == ["SPY"]
    assert parse_symbols("btcusd,eth") == ["BTCUSD", "ETH"]
