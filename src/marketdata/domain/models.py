"""Core market series domain models."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from functools import cached_property
from typing import TYPE_CHECKING

import pandas as pd

from marketdata.errors import InputError

if TYPE_CHECKING:
    from marketdata.enhance.builder import EnhancementBuilder

OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")


class Interval(StrEnum):
    """Bar spacing of a series."""

    MINUTE_1 = "1min"
    MINUTE_5 = "5min"
    MINUTE_15 = "15min"
    MINUTE_30 = "30min"
    HOUR_1 = "1hour"
    DAY = "1day"
    WEEK = "1week"
    MONTH = "1month"

    @property
    def is_intraday(self) -> bool:
        return self in {
            Interval.MINUTE_1,
            Interval.MINUTE_5,
            Interval.MINUTE_15,
            Interval.MINUTE_30,
            Interval.HOUR_1,
        }


_INTERVAL_ALIASES = {
    "1m": Interval.MINUTE_1,
    "1min": Interval.MINUTE_1,
    "5m": Interval.MINUTE_5,
    "5min": Interval.MINUTE_5,
    "15m": Interval.MINUTE_15,
    "15min": Interval.MINUTE_15,
    "30m": Interval.MINUTE_30,
    "30min": Interval.MINUTE_30,
    "1h": Interval.HOUR_1,
    "60m": Interval.HOUR_1,
    "60min": Interval.HOUR_1,
    "1hour": Interval.HOUR_1,
    "hour": Interval.HOUR_1,
    "1d": Interval.DAY,
    "day": Interval.DAY,
    "1day": Interval.DAY,
    "daily": Interval.DAY,
    "1w": Interval.WEEK,
    "1wk": Interval.WEEK,
    "week": Interval.WEEK,
    "1week": Interval.WEEK,
    "weekly": Interval.WEEK,
    "1mo": Interval.MONTH,
    "month": Interval.MONTH,
    "1month": Interval.MONTH,
    "monthly": Interval.MONTH,
}


def parse_interval(value: str | Interval) -> Interval:
    """Resolve an interval from its canonical value or a common alias."""
    if isinstance(value, Interval):
        return value
    normalized = value.strip().lower()
    resolved = _INTERVAL_ALIASES.get(normalized)
    if resolved is None:
        supported = ", ".join(item.value for item in Interval)
        raise ValueError(f"Unsupported interval '{value}'. Supported: {supported}")
    return resolved


@dataclass(frozen=True)
class Bar:
    """One OHLCV record for a fixed time period."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self) -> None:
        for name in ("open", "high", "low", "close", "volume"):
            value = getattr(self, name)
            message = f"Bar {self.date}: {name} must be numeric, got {value!r}"
            if isinstance(value, str | bytes | bool):
                raise InputError(message)
            try:
                object.__setattr__(self, name, float(value))
            except (TypeError, ValueError) as exc:
                raise InputError(message) from exc

    def __str__(self) -> str:
        return (
            f"Date: {self.date.isoformat()}, Open: {self.open:.2f}, Close: {self.close:.2f}, "
            f"High: {self.high:.2f}, Low: {self.low:.2f}, Volume: {self.volume:.2f}"
        )


@dataclass(frozen=True)
class MarketSeries:
    """Immutable, strictly date-ascending OHLCV series for one symbol."""

    symbol: str
    bars: tuple[Bar, ...]
    interval: Interval = Interval.DAY

    def __post_init__(self) -> None:
        object.__setattr__(self, "bars", tuple(self.bars))
        try:
            object.__setattr__(self, "interval", parse_interval(self.interval))
        except ValueError as exc:
            raise InputError(f"{self.symbol}: {exc}") from exc
        self._validate()

    def _validate(self) -> None:
        if not self.bars:
            raise InputError(f"{self.symbol}: series has no bars")
        previous: date | None = None
        for index, bar in enumerate(self.bars):
            prices = (bar.open, bar.high, bar.low, bar.close)
            if not all(math.isfinite(price) for price in prices):
                raise InputError(f"{self.symbol}: bar {index} ({bar.date}) has a non-finite price")
            if not math.isfinite(bar.volume) or bar.volume < 0:
                raise InputError(
                    f"{self.symbol}: bar {index} ({bar.date}) has invalid volume {bar.volume}"
                )
            try:
                ascending = previous is None or bar.date > previous
            except TypeError as exc:
                raise InputError(
                    f"{self.symbol}: bar {index} date {bar.date!r} cannot be ordered "
                    f"after {previous!r}: {exc}"
                ) from exc
            if not ascending:
                raise InputError(
                    f"{self.symbol}: dates must be strictly ascending; "
                    f"{bar.date} follows {previous} at bar {index}"
                )
            previous = bar.date

    @classmethod
    def from_frame(
        cls,
        symbol: str,
        frame: pd.DataFrame,
        interval: Interval | str = Interval.DAY,
    ) -> MarketSeries:
        """Build a series from a normalized OHLCV frame with a datetime index."""
        missing = [name for name in OHLCV_COLUMNS if name not in frame.columns]
        if missing:
            raise InputError(f"{symbol}: frame missing required columns: {missing}")
        index = pd.DatetimeIndex(pd.to_datetime(frame.index))
        # Midnight-only naive timestamps are calendar dates.
        calendar_dates = index.tz is None and bool((index == index.normalize()).all())
        values = frame[list(OHLCV_COLUMNS)].apply(pd.to_numeric, errors="coerce")
        bars: list[Bar] = []
        for stamp, row in zip(index, values.itertuples(index=False, name=None)):
            open_price, high, low, close, volume = (float(value) for value in row)
            bars.append(
                Bar(
                    date=stamp.date() if calendar_dates else stamp.to_pydatetime(),
                    open=open_price,
                    high=high,
                    low=low,
                    close=close,
                    volume=volume,
                )
            )
        return cls(symbol=symbol, bars=tuple(bars), interval=interval)

    def to_frame(self) -> pd.DataFrame:
        """Return the bars as an OHLCV frame indexed by date."""
        frame = pd.DataFrame(
            {
                "open": self.opens,
                "high": self.highs,
                "low": self.lows,
                "close": self.closes,
                "volume": self.volumes,
            },
            index=pd.to_datetime(list(self.dates)),
        )
        frame.index.name = "date"
        return frame

    def enhance(self) -> EnhancementBuilder:
        """Start an indicator enhancement over this series."""
        from marketdata.enhance.builder import EnhancementBuilder

        return EnhancementBuilder(self)

    @cached_property
    def dates(self) -> tuple[date, ...]:
        return tuple(bar.date for bar in self.bars)

    @cached_property
    def opens(self) -> tuple[float, ...]:
        return tuple(bar.open for bar in self.bars)

    @cached_property
    def highs(self) -> tuple[float, ...]:
        return tuple(bar.high for bar in self.bars)

    @cached_property
    def lows(self) -> tuple[float, ...]:
        return tuple(bar.low for bar in self.bars)

    @cached_property
    def closes(self) -> tuple[float, ...]:
        return tuple(bar.close for bar in self.bars)

    @cached_property
    def volumes(self) -> tuple[float, ...]:
        return tuple(bar.volume for bar in self.bars)

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    def __str__(self) -> str:
        lines = [
            f"MarketSeries: Symbol = {self.symbol}, Interval = {self.interval.value}, Series ="
        ]
        lines.extend(f"  {bar}" for bar in self.bars)
        return "\n".join(lines)
