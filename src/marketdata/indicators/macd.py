"""Moving Average Convergence Divergence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from marketdata.errors import ParameterError

from .moving_averages import ema
from .window import Column, check_period


@dataclass(frozen=True)
class MacdLines:
    """MACD line, its signal EMA and the histogram between them."""

    macd: Column
    signal: Column
    histogram: Column


def check_macd_params(fast: int, slow: int, signal: int) -> None:
    check_period(fast, "fast period")
    check_period(slow, "slow period")
    check_period(signal, "signal period")
    if slow <= fast:
        raise ParameterError(f"slow period ({slow}) must be greater than fast period ({fast})")


def macd(closes: Sequence[float], fast: int = 12, slow: int = 26, signal: int = 9) -> MacdLines:
    """MACD = EMA(fast) - EMA(slow); signal = EMA(signal) of the MACD line."""
    check_macd_params(fast, slow, signal)
    fast_ema = ema(closes, fast)
    slow_ema = ema(closes, slow)
    macd_line: Column = [
        None if fast_value is None or slow_value is None else fast_value - slow_value
        for fast_value, slow_value in zip(fast_ema, slow_ema)
    ]
    signal_line = ema(macd_line, signal)
    histogram: Column = [
        None if macd_value is None or signal_value is None else macd_value - signal_value
        for macd_value, signal_value in zip(macd_line, signal_line)
    ]
    return MacdLines(macd=macd_line, signal=signal_line, histogram=histogram)
