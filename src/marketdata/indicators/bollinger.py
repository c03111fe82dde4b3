"""Bollinger Bands around a simple moving average."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from marketdata.errors import ParameterError

from .moving_averages import sma
from .window import Column, check_period, rolling_std


@dataclass(frozen=True)
class BollingerLines:
    upper: Column
    middle: Column
    lower: Column


def check_band_width(width: float) -> float:
    if isinstance(width, bool) or not isinstance(width, int | float):
        raise ParameterError(f"band width must be a number, got {width!r}")
    if not math.isfinite(width) or width <= 0:
        raise ParameterError(f"band width must be positive, got {width}")
    return float(width)


def bollinger(closes: Sequence[float], period: int = 20, width: float = 2.0) -> BollingerLines:
    """Middle = SMA(period); upper/lower = middle +/- width * population std."""
    check_period(period)
    width = check_band_width(width)
    middle = sma(closes, period)
    deviation = rolling_std(closes, period)
    upper: Column = [None] * len(closes)
    lower: Column = [None] * len(closes)
    for index, (mid, std) in enumerate(zip(middle, deviation)):
        if mid is None or std is None:
            continue
        upper[index] = mid + width * std
        lower[index] = mid - width * std
    return BollingerLines(upper=upper, middle=middle, lower=lower)
