"""CSV-backed market data provider."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from marketdata.errors import DataProviderError

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


class CsvDataProvider:
    """Load OHLCV bars from local CSV files."""

    date_column_candidates = ("date", "datetime", "timestamp")

    def __init__(self, data_dir: str) -> None:
        self.data_dir = Path(data_dir)
        self._bars_cache: dict[str, pd.DataFrame] = {}

    def get_bars(self, symbol: str) -> pd.DataFrame:
        cached = self._bars_cache.get(symbol)
        if cached is None:
            cached = self._load_bars(symbol)
            self._bars_cache[symbol] = cached
        return cached.copy()

    def _load_bars(self, symbol: str) -> pd.DataFrame:
        path = self._resolve_path(symbol)
        if path is None:
            raise DataProviderError(f"No CSV found for {symbol} under {self.data_dir}")
        try:
            frame = pd.read_csv(path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise DataProviderError(f"{symbol}: unable to read {path}: {exc}") from exc
        return self._normalize_csv(frame, symbol)

    def _resolve_path(self, symbol: str) -> Path | None:
        market, bare_symbol = self._split_market_symbol(symbol)
        symbol_upper = bare_symbol.upper()
        symbol_lower = bare_symbol.lower()
        candidates: list[Path] = []
        if market is not None:
            for market_dir in (market.upper(), market.lower()):
                candidates.extend(
                    [
                        self.data_dir / market_dir / f"{symbol_upper}.csv",
                        self.data_dir / market_dir / f"{symbol_lower}.csv",
                    ]
                )
        candidates.extend(
            [
                self.data_dir / f"{symbol_upper}.csv",
                self.data_dir / f"{symbol_lower}.csv",
            ]
        )
        for candidate in dict.fromkeys(candidates):
            if candidate.exists():
                return candidate
        return None

    @staticmethod
    def _split_market_symbol(symbol: str) -> tuple[str | None, str]:
        value = symbol.strip()
        if ":" not in value:
            return None, value
        market, bare_symbol = value.split(":", 1)
        market = market.strip()
        bare_symbol = bare_symbol.strip()
        if not market or not bare_symbol:
            return None, value
        return market, bare_symbol

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick_date_column(lower_to_original)
        rename_map = self._build_ohlcv_rename_map(lower_to_original, symbol)
        normalized = frame.rename(columns=rename_map)
        try:
            normalized.index = pd.to_datetime(normalized[date_column], utc=False)
        except (ValueError, TypeError) as exc:
            raise DataProviderError(f"{symbol}: unparseable dates in CSV: {exc}") from exc
        normalized.index.name = "date"
        normalized = normalized.sort_index()
        normalized = normalized[OHLCV_COLUMNS].copy()
        normalized = normalized.apply(pd.to_numeric, errors="coerce")
        normalized = normalized.dropna(subset=["open", "high", "low", "close"])
        normalized["volume"] = normalized["volume"].fillna(0.0)
        normalized = normalized[~normalized.index.duplicated(keep="last")]
        if normalized.empty:
            raise DataProviderError(f"{symbol}: data has no valid OHLCV rows")
        return normalized

    def _pick_date_column(self, lower_to_original: dict[str, str]) -> str:
        for candidate in self.date_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.date_column_candidates)
        raise DataProviderError(f"CSV missing date column. Expected one of: {candidates}")

    @staticmethod
    def _build_ohlcv_rename_map(
        lower_to_original: dict[str, str],
        symbol: str,
    ) -> dict[str, str]:
        rename_map: dict[str, str] = {}
        for name in OHLCV_COLUMNS:
            source = lower_to_original.get(name)
            if source is None:
                raise DataProviderError(f"{symbol}: CSV missing required column '{name}'")
            rename_map[source] = name
        return rename_map
