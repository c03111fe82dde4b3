"""Alpha Vantage HTTP provider for historical OHLCV data."""

from __future__ import annotations

import logging
import time

import pandas as pd
import requests

from marketdata.domain.models import Interval, parse_interval
from marketdata.errors import DataProviderError

_INTRADAY_INTERVALS = {
    Interval.MINUTE_1: "1min",
    Interval.MINUTE_5: "5min",
    Interval.MINUTE_15: "15min",
    Interval.MINUTE_30: "30min",
    Interval.HOUR_1: "60min",
}


class AlphaVantageDataProvider:
    """Alpha Vantage provider with basic retry/rate-limit handling."""

    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        api_key: str,
        interval: Interval | str = Interval.DAY,
        output_size: str = "compact",
        timeout: int = 15,
        max_retries: int = 3,
    ) -> None:
        if not api_key:
            raise DataProviderError("ALPHAVANTAGE_API_KEY is required for Alpha Vantage data")
        if output_size not in {"compact", "full"}:
            raise DataProviderError("output_size must be one of compact, full")
        self.api_key = api_key
        self.interval = parse_interval(interval)
        self.output_size = output_size
        self.timeout = timeout
        self.max_retries = max_retries
        self.logger = logging.getLogger("marketdata.data.alpha_vantage")

    def get_bars(self, symbol: str) -> pd.DataFrame:
        """Fetch bars and return a normalized OHLCV DataFrame.

        Returns:
            DataFrame with datetime index and columns:
            open, high, low, close, volume
        """
        params = self._query_params(symbol)
        payload = self._request_with_retry(params=params)
        time_series_key = next((key for key in payload if "Time Series" in key), None)
        if time_series_key is None:
            raise DataProviderError(f"Alpha Vantage response missing time series for {symbol}.")

        series = payload[time_series_key]
        frame = pd.DataFrame.from_dict(series, orient="index")
        if frame.empty:
            raise DataProviderError(f"Alpha Vantage returned no rows for {symbol}.")
        frame.index = pd.to_datetime(frame.index, utc=False)
        frame.index.name = "date"
        frame = frame.sort_index()

        rename_map = {
            column: column.split(". ", 1)[1]
            for column in frame.columns
            if ". " in column
        }
        frame = frame.rename(columns=rename_map)
        required_cols = ["open", "high", "low", "close", "volume"]
        missing_cols = [col for col in required_cols if col not in frame.columns]
        if missing_cols:
            raise DataProviderError(f"Data for {symbol} missing required columns: {missing_cols}")

        frame = frame[required_cols].apply(pd.to_numeric, errors="coerce").dropna()
        if frame.empty:
            raise DataProviderError(f"Alpha Vantage returned no valid rows for {symbol}.")
        return frame

    def _query_params(self, symbol: str) -> dict[str, str]:
        params = {
            "symbol": symbol.strip().upper(),
            "apikey": self.api_key,
        }
        if self.interval in _INTRADAY_INTERVALS:
            params["function"] = "TIME_SERIES_INTRADAY"
            params["interval"] = _INTRADAY_INTERVALS[self.interval]
            params["outputsize"] = self.output_size
        elif self.interval is Interval.WEEK:
            params["function"] = "TIME_SERIES_WEEKLY"
        elif self.interval is Interval.MONTH:
            params["function"] = "TIME_SERIES_MONTHLY"
        else:
            params["function"] = "TIME_SERIES_DAILY"
            params["outputsize"] = self.output_size
        return params

    def _request_with_retry(self, params: dict[str, str]) -> dict:
        """Perform GET request with simple backoff on rate-limit/transient failures."""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
                response.raise_for_status()
                payload: dict = response.json()
            except (requests.RequestException, ValueError) as exc:
                if attempt == self.max_retries:
                    raise DataProviderError(
                        f"Failed to fetch data from Alpha Vantage: {exc}"
                    ) from exc
                sleep_seconds = attempt * 2
                self.logger.warning(
                    "Alpha Vantage request failed (attempt %s/%s). Retrying in %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            if "Note" in payload or "Information" in payload:
                # Free tier rate-limit reached. Back off and retry.
                if attempt == self.max_retries:
                    raise DataProviderError(
                        "Alpha Vantage rate limit reached. Try again in a minute."
                    )
                sleep_seconds = attempt * 15
                self.logger.warning(
                    "Alpha Vantage rate limit hit (attempt %s/%s). Waiting %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            if "Error Message" in payload:
                raise DataProviderError(
                    f"Alpha Vantage returned an error: {payload['Error Message']}"
                )

            return payload

        raise DataProviderError("Exhausted retries for Alpha Vantage request.")
