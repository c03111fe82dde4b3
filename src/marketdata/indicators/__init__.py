"""Technical indicator algorithms over plain value sequences."""

from .bollinger import BollingerLines, bollinger
from .macd import MacdLines, macd
from .moving_averages import ema, sma
from .rsi import rsi
from .stochastic import FLAT_RANGE_K, StochasticLines, stochastic
from .window import rolling_max, rolling_mean, rolling_min, rolling_std, rolling_sum

__all__ = [
    "FLAT_RANGE_K",
    "BollingerLines",
    "MacdLines",
    "StochasticLines",
    "bollinger",
    "ema",
    "macd",
    "rolling_max",
    "rolling_mean",
    "rolling_min",
    "rolling_std",
    "rolling_sum",
    "rsi",
    "sma",
    "stochastic",
]
