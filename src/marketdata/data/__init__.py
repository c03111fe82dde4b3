"""Market data provider implementations."""

from .alpha_vantage import AlphaVantageDataProvider
from .base import MarketDataProvider
from .csv_data import CsvDataProvider
from .yfinance_data import YFinanceDataProvider

__all__ = [
    "MarketDataProvider",
    "AlphaVantageDataProvider",
    "CsvDataProvider",
    "YFinanceDataProvider",
]
