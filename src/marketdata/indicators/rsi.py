"""Relative Strength Index using Wilder's smoothing."""

from __future__ import annotations

from collections.abc import Sequence

from .window import Column, check_period

RSI_AT_ZERO_LOSS = 100.0


def rsi(closes: Sequence[float], period: int) -> Column:
    """Wilder RSI; undefined before index ``period``.

    Average gain and loss are seeded with the simple mean of the first
    ``period`` close-to-close changes, then smoothed as
    ``avg = (avg * (period - 1) + x) / period``. A zero average loss yields 100.
    """
    check_period(period)
    result: Column = [None] * len(closes)
    if len(closes) <= period:
        return result

    gains: list[float] = []
    losses: list[float] = []
    for previous, current in zip(closes, closes[1:]):
        delta = current - previous
        gains.append(max(delta, 0.0))
        losses.append(max(-delta, 0.0))

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result[period] = _rsi_value(avg_gain, avg_loss)
    # gains[i - 1] is the change into bar i.
    for index in range(period + 1, len(closes)):
        avg_gain = (avg_gain * (period - 1) + gains[index - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[index - 1]) / period
        result[index] = _rsi_value(avg_gain, avg_loss)
    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0.0:
        return RSI_AT_ZERO_LOSS
    relative_strength = avg_gain / avg_loss
    value = 100.0 - 100.0 / (1.0 + relative_strength)
    return min(max(value, 0.0), 100.0)
