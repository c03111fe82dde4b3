from __future__ import annotations

import pytest

from marketdata.errors import ParameterError
from marketdata.indicators.macd import macd
from marketdata.indicators.moving_averages import ema

CLOSES = [
    22.27, 22.19, 22.08, 22.17, 22.18, 22.13, 22.23, 22.43, 22.24, 22.29,
    22.15, 22.39, 22.38, 22.61, 23.36, 24.05, 23.75, 23.83, 23.95, 23.63,
]


def test_macd_line_is_fast_minus_slow_ema() -> None:
    lines = macd(CLOSES, 3, 6, 4)
    fast = ema(CLOSES, 3)
    slow = ema(CLOSES, 6)

    for index, value in enumerate(lines.macd):
        if index < 5:
            assert value is None
        else:
            assert value == fast[index] - slow[index]


def test_signal_waits_for_enough_macd_values() -> None:
    lines = macd(CLOSES, 3, 6, 4)

    assert lines.signal[:8] == [None] * 8
    assert all(value is not None for value in lines.signal[8:])
    assert lines.histogram[:8] == [None] * 8


def test_histogram_is_macd_minus_signal() -> None:
    lines = macd(CLOSES, 3, 6, 4)

    for macd_value, signal_value, histogram in zip(lines.macd, lines.signal, lines.histogram):
        if signal_value is None:
            assert histogram is None
        else:
            assert histogram == macd_value - signal_value


def test_macd_on_flat_closes_is_zero() -> None:
    lines = macd([10.0] * 30, 3, 7, 4)

    for value in lines.macd[6:] + lines.signal[9:] + lines.histogram[9:]:
        assert value == pytest.approx(0.0, abs=1e-12)


def test_macd_shorter_than_slow_period_is_undefined() -> None:
    lines = macd(CLOSES[:10], 12, 26, 9)

    assert lines.macd == [None] * 10
    assert lines.signal == [None] * 10
    assert lines.histogram == [None] * 10


@pytest.mark.parametrize(
    ("fast", "slow", "signal"),
    [(26, 12, 9), (12, 12, 9), (0, 26, 9), (12, 26, 0)],
)
def test_invalid_macd_parameters_are_rejected(fast: int, slow: int, signal: int) -> None:
    with pytest.raises(ParameterError):
        macd(CLOSES, fast, slow, signal)
