from __future__ import annotations

import pytest

from marketdata.enhance.requests import (
    DEFAULT_PARAMS,
    IndicatorKind,
    IndicatorRequest,
    parse_indicator_spec,
    parse_indicator_specs,
)
from marketdata.errors import ParameterError


@pytest.mark.parametrize(
    ("text", "label"),
    [
        ("sma:10", "SMA 10"),
        ("EMA:20", "EMA 20"),
        ("rsi", "RSI 14"),
        ("macd", "MACD (12,26,9)"),
        ("macd:5:35:5", "MACD (5,35,5)"),
        ("stoch:14:3", "Stochastic (14,3)"),
        ("bb", "Bollinger (20,2)"),
        ("bollinger:20:2.5", "Bollinger (20,2.5)"),
    ],
)
def test_specs_parse_to_labeled_requests(text: str, label: str) -> None:
    assert parse_indicator_spec(text).label == label


def test_missing_params_use_defaults() -> None:
    request = parse_indicator_spec("stochastic")

    assert request.kind is IndicatorKind.STOCHASTIC
    assert request.params == DEFAULT_PARAMS[IndicatorKind.STOCHASTIC]


def test_spec_list_skips_blank_entries() -> None:
    requests = parse_indicator_specs("sma:10, rsi:14,")

    assert [request.label for request in requests] == ["SMA 10", "RSI 14"]
    assert parse_indicator_specs("") == []


@pytest.mark.parametrize(
    "text",
    ["vwap:10", "sma:x", "sma:0", "sma:10:20", "macd:26:12:9", "bb:20:0", ":10"],
)
def test_invalid_specs_are_rejected(text: str) -> None:
    with pytest.raises(ParameterError):
        parse_indicator_spec(text)


def test_request_coerces_kind_and_width() -> None:
    request = IndicatorRequest("bollinger", [20, 2])

    assert request.kind is IndicatorKind.BOLLINGER
    assert request.params == (20, 2.0)
    assert isinstance(request.params[1], float)
    assert request == IndicatorRequest(IndicatorKind.BOLLINGER, (20, 2.0))
