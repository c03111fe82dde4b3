"""Simple and exponential moving averages."""

from __future__ import annotations

from collections.abc import Sequence

from .window import Column, Value, check_period, rolling_mean


def sma(values: Sequence[Value], period: int) -> Column:
    """Simple Moving Average; the first ``period - 1`` entries are undefined."""
    return rolling_mean(values, period)


def ema(values: Sequence[Value], period: int) -> Column:
    """Exponential Moving Average with ``alpha = 2 / (period + 1)``.

    The average is seeded with the simple mean of the first ``period``
    consecutive defined values, placed at the index that completes that run.
    From there ``EMA[i] = alpha * x[i] + (1 - alpha) * EMA[i - 1]``. An undefined
    input after seeding leaves that entry undefined and restarts the seeding.
    """
    check_period(period)
    alpha = 2.0 / (period + 1)
    result: Column = [None] * len(values)
    previous: float | None = None
    run_total = 0.0
    run_length = 0
    for index, value in enumerate(values):
        if value is None:
            previous = None
            run_total = 0.0
            run_length = 0
            continue
        if previous is None:
            run_total += value
            run_length += 1
            if run_length < period:
                continue
            previous = run_total / period
        else:
            previous = alpha * value + (1.0 - alpha) * previous
        result[index] = previous
    return result
