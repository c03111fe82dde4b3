"""Stochastic oscillator (%K and %D)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .window import Column, check_period, rolling_max, rolling_mean, rolling_min

# %K on a window whose highest high equals its lowest low.
FLAT_RANGE_K = 50.0


@dataclass(frozen=True)
class StochasticLines:
    """%K and its %D moving average."""

    k: Column
    d: Column


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticLines:
    """%K = 100 * (close - LL) / (HH - LL) over ``k_period``; %D = SMA(%K, ``d_period``)."""
    check_period(k_period, "k period")
    check_period(d_period, "d period")
    lowest = rolling_min(lows, k_period)
    highest = rolling_max(highs, k_period)
    k_line: Column = [None] * len(closes)
    for index, close in enumerate(closes):
        low = lowest[index]
        high = highest[index]
        if low is None or high is None:
            continue
        price_range = high - low
        if price_range == 0.0:
            k_line[index] = FLAT_RANGE_K
            continue
        value = 100.0 * (close - low) / price_range
        k_line[index] = min(max(value, 0.0), 100.0)
    return StochasticLines(k=k_line, d=rolling_mean(k_line, d_period))
