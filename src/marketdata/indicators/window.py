"""Trailing-window statistics shared by the indicator algorithms.

Every function takes a sequence of optional floats and returns a list of the
same length. ``None`` marks an undefined entry. Windows are computed with
pandas rolling windows at ``min_periods=period``, so a window is defined only
when it spans ``period`` entries and none of them is undefined.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pandas as pd

from marketdata.errors import ParameterError

if TYPE_CHECKING:
    from pandas.api.typing import Rolling

Value = float | None
Column = list[Value]


def check_period(period: int, name: str = "period") -> int:
    """Return ``period`` when it is a positive integer, else raise ``ParameterError``."""
    if isinstance(period, bool) or not isinstance(period, int):
        raise ParameterError(f"{name} must be an integer, got {period!r}")
    if period <= 0:
        raise ParameterError(f"{name} must be positive, got {period}")
    return period


def _window(values: Sequence[Value], period: int) -> Rolling:
    check_period(period)
    return pd.Series(pd.array(list(values), dtype="Float64")).rolling(window=period)


def to_column(values: pd.Series) -> Column:
    """Convert a pandas result to a column, mapping ``<NA>``/NaN to ``None``."""
    return [None if pd.isna(value) else float(value) for value in values]


def rolling_sum(values: Sequence[Value], period: int) -> Column:
    """Sum of the trailing ``period`` entries ending at each index."""
    return to_column(_window(values, period).sum())


def rolling_mean(values: Sequence[Value], period: int) -> Column:
    """Mean of the trailing ``period`` entries ending at each index."""
    return to_column(_window(values, period).mean())


def rolling_min(values: Sequence[Value], period: int) -> Column:
    return to_column(_window(values, period).min())


def rolling_max(values: Sequence[Value], period: int) -> Column:
    return to_column(_window(values, period).max())


def rolling_std(values: Sequence[Value], period: int) -> Column:
    """Population standard deviation (``ddof=0``) of the trailing ``period`` entries."""
    return to_column(_window(values, period).std(ddof=0))
