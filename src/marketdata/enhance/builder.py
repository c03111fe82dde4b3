"""Fluent builder that accumulates indicator requests and computes them."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Self

from marketdata.domain.models import Bar, Interval, MarketSeries
from marketdata.errors import InputError
from marketdata.indicators.window import check_period

from .requests import IndicatorKind, IndicatorRequest, evaluate_request
from .series import EnhancedSeries, IndicatorColumn

logger = logging.getLogger("marketdata.enhance")


class EnhancementBuilder:
    """Collect indicator requests over one series; ``compute()`` evaluates them.

    ``with_*`` methods validate their parameters immediately and return the
    same builder. Nothing is computed until ``compute()``, which can be called
    any number of times and always evaluates against the unmodified series.
    """

    def __init__(self, series: MarketSeries) -> None:
        if not isinstance(series, MarketSeries):
            raise InputError(f"Expected a MarketSeries, got {type(series).__name__}")
        self._series = series
        self._requests: list[IndicatorRequest] = []

    @classmethod
    def from_bars(
        cls,
        symbol: str,
        bars: Iterable[Bar],
        interval: Interval | str = Interval.DAY,
    ) -> Self:
        return cls(MarketSeries(symbol=symbol, bars=tuple(bars), interval=interval))

    @property
    def series(self) -> MarketSeries:
        return self._series

    @property
    def requests(self) -> tuple[IndicatorRequest, ...]:
        return tuple(self._requests)

    def with_request(self, request: IndicatorRequest) -> Self:
        self._requests.append(request)
        return self

    def with_requests(self, requests: Iterable[IndicatorRequest]) -> Self:
        for request in requests:
            self.with_request(request)
        return self

    def with_sma(self, period: int) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.SMA, (period,)))

    def with_ema(self, period: int) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.EMA, (period,)))

    def with_rsi(self, period: int = 14) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.RSI, (period,)))

    def with_macd(self, fast: int = 12, slow: int = 26, signal: int = 9) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.MACD, (fast, slow, signal)))

    def with_stochastic(self, k_period: int = 14, d_period: int = 3) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.STOCHASTIC, (k_period, d_period)))

    def with_bollinger(self, period: int = 20, width: float = 2.0) -> Self:
        return self.with_request(IndicatorRequest(IndicatorKind.BOLLINGER, (period, width)))

    def compute(self, max_workers: int | None = None) -> EnhancedSeries:
        """Evaluate every request in order and assemble one enhanced series.

        With ``max_workers`` above 1 the requests are evaluated on a thread
        pool; results are still gathered in request order.
        """
        if max_workers is not None:
            check_period(max_workers, "max_workers")
        requests = list(self._requests)
        logger.debug(
            "enhance | %s | %d bars | %d indicator(s)",
            self._series.symbol,
            len(self._series),
            len(requests),
        )
        evaluate = partial(evaluate_request, self._series)
        columns: list[IndicatorColumn]
        if max_workers is None or max_workers == 1 or len(requests) < 2:
            columns = [evaluate(request) for request in requests]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                columns = list(executor.map(evaluate, requests))
        for column in columns:
            logger.debug("indicator | %s | %s", self._series.symbol, column.label)
        return EnhancedSeries(series=self._series, columns=tuple(columns))
