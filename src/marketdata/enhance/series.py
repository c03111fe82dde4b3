"""Enhanced series: input bars widened with indicator columns."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

import pandas as pd

from marketdata.domain.models import Bar, Interval, MarketSeries
from marketdata.errors import InputError

if TYPE_CHECKING:
    from .requests import IndicatorRequest

Value = float | None


def format_value(value: Value) -> str:
    """Two-decimal rendering; undefined renders as an empty field."""
    if value is None:
        return ""
    return f"{value:.2f}"


@dataclass(frozen=True)
class IndicatorColumn:
    """One indicator's output: named lines aligned with the input bars."""

    label: str
    lines: Mapping[str, tuple[Value, ...]] = field(hash=False)
    request: IndicatorRequest | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.lines:
            raise InputError(f"{self.label}: indicator column needs at least one line")
        lengths = {len(values) for values in self.lines.values()}
        if len(lengths) != 1:
            raise InputError(f"{self.label}: indicator lines differ in length")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.lines)

    @property
    def values(self) -> tuple[Value, ...]:
        """Primary line (the only line for single-valued indicators)."""
        return next(iter(self.lines.values()))

    @property
    def is_multi_line(self) -> bool:
        return len(self.lines) > 1

    def line(self, name: str) -> tuple[Value, ...]:
        try:
            return self.lines[name]
        except KeyError:
            available = ", ".join(self.lines)
            raise KeyError(f"{self.label} has no line '{name}'. Available: {available}") from None

    def at(self, index: int) -> tuple[Value, ...]:
        """Values of every line at one bar, in line order."""
        return tuple(values[index] for values in self.lines.values())

    def render_at(self, index: int) -> str:
        return "/".join(format_value(value) for value in self.at(index))

    def frame_keys(self) -> list[str]:
        if not self.is_multi_line:
            return [self.label]
        return [f"{self.label} {name}" for name in self.lines]

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class EnhancedSeries:
    """Original bars plus every requested indicator column, in request order."""

    series: MarketSeries
    columns: tuple[IndicatorColumn, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        expected = len(self.series)
        for column in self.columns:
            if len(column) != expected:
                raise InputError(
                    f"{column.label}: column has {len(column)} values for {expected} bars"
                )

    @property
    def symbol(self) -> str:
        return self.series.symbol

    @property
    def interval(self) -> Interval:
        return self.series.interval

    @property
    def bars(self) -> tuple[Bar, ...]:
        return self.series.bars

    @property
    def dates(self) -> tuple[date, ...]:
        return self.series.dates

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(column.label for column in self.columns)

    def column(self, label: str) -> IndicatorColumn:
        """First column carrying ``label``."""
        for column in self.columns:
            if column.label == label:
                return column
        raise KeyError(f"No indicator column labeled '{label}'")

    def columns_for(self, label: str) -> list[IndicatorColumn]:
        return [column for column in self.columns if column.label == label]

    def render_line(self, index: int) -> str:
        parts = [str(self.series.bars[index])]
        parts.extend(f"{column.label}: {column.render_at(index)}" for column in self.columns)
        return ", ".join(parts)

    def iter_lines(self) -> Iterator[str]:
        for index in range(len(self.series)):
            yield self.render_line(index)

    def to_text(self) -> str:
        """Canonical rendering, one line per bar."""
        return "\n".join(self.iter_lines())

    def to_frame(self) -> pd.DataFrame:
        """OHLCV frame plus nullable ``Float64`` indicator columns."""
        base = self.series.to_frame()
        pieces: list[pd.Series] = []
        for column in self.columns:
            for key, values in zip(column.frame_keys(), column.lines.values()):
                pieces.append(
                    pd.Series(pd.array(list(values), dtype="Float64"), index=base.index, name=key)
                )
        if not pieces:
            return base
        return pd.concat([base, *pieces], axis=1)

    def to_records(self) -> list[dict[str, Any]]:
        """Per-bar dicts with ``None`` for undefined indicator values."""
        records: list[dict[str, Any]] = []
        for index, bar in enumerate(self.series.bars):
            record: dict[str, Any] = {
                "date": bar.date.isoformat(),
                "open": bar.open,
                "high": bar.high,
                "low": bar.low,
                "close": bar.close,
                "volume": bar.volume,
            }
            for column in self.columns:
                for key, value in zip(column.frame_keys(), column.at(index)):
                    record[key] = value
            records.append(record)
        return records

    def __len__(self) -> int:
        return len(self.series)

    def __str__(self) -> str:
        header = (
            f"EnhancedSeries: Symbol = {self.symbol}, Interval = {self.interval.value}, "
            f"Indicators = [{', '.join(self.labels)}]"
        )
        return "\n".join([header, *(f"  {line}" for line in self.iter_lines())])
