from __future__ import annotations

import sys
from datetime import date
from types import SimpleNamespace

import pandas as pd
import pytest

from marketdata.data.yfinance_data import YFinanceDataProvider
from marketdata.domain.models import Interval, MarketSeries
from marketdata.errors import DataProviderError


def test_yfinance_symbol_mapping_supports_stocks_and_crypto() -> None:
    assert YFinanceDataProvider._resolve_yfinance_symbol("SPY") == "SPY"
    assert YFinanceDataProvider._resolve_yfinance_symbol("BTCUSD") == "BTC-USD"
    assert YFinanceDataProvider._resolve_yfinance_symbol("CRYPTO:ETHUSDT") == "ETH-USD"


def test_yfinance_interval_mapping() -> None:
    assert YFinanceDataProvider("1day").yf_interval == "1d"
    assert YFinanceDataProvider("1hour").yf_interval == "60m"
    assert YFinanceDataProvider(Interval.MINUTE_15).yf_interval == "15m"
    assert YFinanceDataProvider("weekly").yf_interval == "1wk"
    assert YFinanceDataProvider._period_for_interval("1m") == "7d"
    assert YFinanceDataProvider._period_for_interval("60m") == "60d"
    assert YFinanceDataProvider._period_for_interval("1d") == "max"


def test_yfinance_provider_normalizes_history(monkeypatch) -> None:
    captured = {"ticker": None}
    history = pd.DataFrame(
        {
            "Open": [10.0, 11.0],
            "High": [11.0, 12.0],
            "Low": [9.0, 10.0],
            "Close": [10.5, 11.5],
        },
        index=pd.to_datetime(["2025-01-01", "2025-01-02"]).tz_localize("America/New_York"),
    )

    class FakeTicker:
        def __init__(self, ticker: str) -> None:
            captured["ticker"] = ticker

        def history(self, **_kwargs: str) -> pd.DataFrame:
            return history

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))
    provider = YFinanceDataProvider(interval="1day")

    bars = provider.get_bars("BTCUSD")
    series = MarketSeries.from_frame("BTCUSD", bars)

    assert captured["ticker"] == "BTC-USD"
    assert list(bars.columns) == ["open", "high", "low", "close", "volume"]
    assert float(bars["volume"].iloc[-1]) == 0.0
    assert float(bars["close"].iloc[-1]) == 11.5
    assert series.dates == (date(2025, 1, 1), date(2025, 1, 2))


def test_yfinance_provider_normalizes_intraday_offsets_to_utc(monkeypatch) -> None:
    history = pd.DataFrame(
        {
            "Open": [10.0, 11.0],
            "High": [11.0, 12.0],
            "Low": [9.0, 10.0],
            "Close": [10.5, 11.5],
            "Volume": [100, None],
        },
        index=[
            "2025-01-02T09:30:00-05:00",
            "2025-07-02T09:30:00-04:00",
        ],
    )

    class FakeTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: str) -> pd.DataFrame:
            return history

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))
    provider = YFinanceDataProvider(interval="5min")

    bars = provider.get_bars("SPY")

    assert bars.index.tz is not None
    assert str(bars.index.tz) == "UTC"
    assert list(bars["volume"]) == [100.0, 0.0]


def test_yfinance_provider_wraps_request_failures(monkeypatch) -> None:
    class FailingTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: str) -> pd.DataFrame:
            raise RuntimeError("no route to host")

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FailingTicker))

    with pytest.raises(DataProviderError, match="no route to host"):
        YFinanceDataProvider().get_bars("SPY")


def test_yfinance_provider_rejects_empty_history(monkeypatch) -> None:
    class EmptyTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: str) -> pd.DataFrame:
            return pd.DataFrame()

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=EmptyTicker))

    with pytest.raises(DataProviderError, match="no rows"):
        YFinanceDataProvider().get_bars("SPY")
