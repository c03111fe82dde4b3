"""Market data provider contract."""

from __future__ import annotations

from typing import Protocol

import pandas as pd


class MarketDataProvider(Protocol):
    """Anything that can hand back historical bars for a symbol.

    Implementations return a frame indexed by timestamp, sorted ascending with
    no duplicate index entries, holding float ``open, high, low, close,
    volume`` columns. Retrieval failures raise ``DataProviderError``.
    """

    def get_bars(self, symbol: str) -> pd.DataFrame:
        """Return normalized OHLCV bars for ``symbol``."""
