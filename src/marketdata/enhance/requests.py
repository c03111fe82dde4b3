"""Indicator requests and their evaluation against a market series."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from marketdata.domain.models import MarketSeries
from marketdata.errors import ParameterError
from marketdata.indicators.bollinger import bollinger, check_band_width
from marketdata.indicators.macd import check_macd_params, macd
from marketdata.indicators.moving_averages import ema, sma
from marketdata.indicators.rsi import rsi
from marketdata.indicators.stochastic import stochastic
from marketdata.indicators.window import Column, check_period

from .series import IndicatorColumn


class IndicatorKind(StrEnum):
    """Supported indicator families."""

    SMA = "sma"
    EMA = "ema"
    RSI = "rsi"
    MACD = "macd"
    STOCHASTIC = "stochastic"
    BOLLINGER = "bollinger"


Param = int | float

_PARAM_COUNTS: dict[IndicatorKind, int] = {
    IndicatorKind.SMA: 1,
    IndicatorKind.EMA: 1,
    IndicatorKind.RSI: 1,
    IndicatorKind.MACD: 3,
    IndicatorKind.STOCHASTIC: 2,
    IndicatorKind.BOLLINGER: 2,
}

DEFAULT_PARAMS: dict[IndicatorKind, tuple[Param, ...]] = {
    IndicatorKind.SMA: (20,),
    IndicatorKind.EMA: (20,),
    IndicatorKind.RSI: (14,),
    IndicatorKind.MACD: (12, 26, 9),
    IndicatorKind.STOCHASTIC: (14, 3),
    IndicatorKind.BOLLINGER: (20, 2.0),
}

_KIND_ALIASES = {
    "sma": IndicatorKind.SMA,
    "ema": IndicatorKind.EMA,
    "rsi": IndicatorKind.RSI,
    "macd": IndicatorKind.MACD,
    "stochastic": IndicatorKind.STOCHASTIC,
    "stoch": IndicatorKind.STOCHASTIC,
    "bollinger": IndicatorKind.BOLLINGER,
    "bb": IndicatorKind.BOLLINGER,
    "bbands": IndicatorKind.BOLLINGER,
}


@dataclass(frozen=True)
class IndicatorRequest:
    """One requested indicator with validated parameters."""

    kind: IndicatorKind
    params: tuple[Param, ...]

    def __post_init__(self) -> None:
        try:
            kind = IndicatorKind(self.kind)
        except ValueError as exc:
            raise ParameterError(f"Unknown indicator kind '{self.kind}'") from exc
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "params", tuple(self.params))
        expected = _PARAM_COUNTS[kind]
        if len(self.params) != expected:
            raise ParameterError(
                f"{kind.value} takes {expected} parameter(s), got {len(self.params)}"
            )
        if kind is IndicatorKind.MACD:
            check_macd_params(*self.params)
        elif kind is IndicatorKind.STOCHASTIC:
            check_period(self.params[0], "k period")
            check_period(self.params[1], "d period")
        elif kind is IndicatorKind.BOLLINGER:
            check_period(self.params[0])
            object.__setattr__(self, "params", (self.params[0], check_band_width(self.params[1])))
        else:
            check_period(self.params[0])

    @property
    def label(self) -> str:
        if self.kind is IndicatorKind.MACD:
            fast, slow, signal = self.params
            return f"MACD ({fast},{slow},{signal})"
        if self.kind is IndicatorKind.STOCHASTIC:
            k_period, d_period = self.params
            return f"Stochastic ({k_period},{d_period})"
        if self.kind is IndicatorKind.BOLLINGER:
            period, width = self.params
            return f"Bollinger ({period},{width:g})"
        return f"{self.kind.value.upper()} {self.params[0]}"


def parse_indicator_spec(text: str) -> IndicatorRequest:
    """Parse ``kind[:param[:param...]]`` such as ``sma:10`` or ``macd:12:26:9``."""
    parts = [part.strip() for part in text.strip().split(":")]
    if not parts or not parts[0]:
        raise ParameterError(f"Empty indicator spec '{text}'")
    kind = _KIND_ALIASES.get(parts[0].lower())
    if kind is None:
        supported = ", ".join(item.value for item in IndicatorKind)
        raise ParameterError(f"Unknown indicator '{parts[0]}'. Supported: {supported}")
    raw_params = [part for part in parts[1:] if part]
    if not raw_params:
        return IndicatorRequest(kind, DEFAULT_PARAMS[kind])
    params: list[Param] = []
    for position, raw in enumerate(raw_params):
        is_width = kind is IndicatorKind.BOLLINGER and position == 1
        try:
            params.append(float(raw) if is_width else int(raw))
        except ValueError as exc:
            raise ParameterError(f"Invalid parameter '{raw}' in indicator spec '{text}'") from exc
    return IndicatorRequest(kind, tuple(params))


def parse_indicator_specs(text: str) -> list[IndicatorRequest]:
    """Parse a comma-separated list of indicator specs."""
    return [parse_indicator_spec(item) for item in text.split(",") if item.strip()]


def _single(values: Column) -> dict[str, Column]:
    return {"value": values}


def _evaluate_sma(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    return _single(sma(series.closes, int(params[0])))


def _evaluate_ema(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    return _single(ema(series.closes, int(params[0])))


def _evaluate_rsi(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    return _single(rsi(series.closes, int(params[0])))


def _evaluate_macd(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    fast, slow, signal = (int(value) for value in params)
    lines = macd(series.closes, fast, slow, signal)
    return {"macd": lines.macd, "signal": lines.signal, "histogram": lines.histogram}


def _evaluate_stochastic(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    lines = stochastic(series.highs, series.lows, series.closes, int(params[0]), int(params[1]))
    return {"k": lines.k, "d": lines.d}


def _evaluate_bollinger(series: MarketSeries, params: tuple[Param, ...]) -> dict[str, Column]:
    lines = bollinger(series.closes, int(params[0]), float(params[1]))
    return {"upper": lines.upper, "middle": lines.middle, "lower": lines.lower}


_EVALUATORS: Mapping[
    IndicatorKind, Callable[[MarketSeries, tuple[Param, ...]], dict[str, Column]]
] = {
    IndicatorKind.SMA: _evaluate_sma,
    IndicatorKind.EMA: _evaluate_ema,
    IndicatorKind.RSI: _evaluate_rsi,
    IndicatorKind.MACD: _evaluate_macd,
    IndicatorKind.STOCHASTIC: _evaluate_stochastic,
    IndicatorKind.BOLLINGER: _evaluate_bollinger,
}


def evaluate_request(series: MarketSeries, request: IndicatorRequest) -> IndicatorColumn:
    """Compute one requested indicator against the unmodified series."""
    lines = _EVALUATORS[request.kind](series, request.params)
    return IndicatorColumn(
        label=request.label,
        lines={name: tuple(values) for name, values in lines.items()},
        request=request,
    )
