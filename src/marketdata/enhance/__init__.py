"""Indicator enhancement pipeline."""

from .builder import EnhancementBuilder
from .requests import (
    IndicatorKind,
    IndicatorRequest,
    evaluate_request,
    parse_indicator_spec,
    parse_indicator_specs,
)
from .series import EnhancedSeries, IndicatorColumn

__all__ = [
    "EnhancedSeries",
    "EnhancementBuilder",
    "IndicatorColumn",
    "IndicatorKind",
    "IndicatorRequest",
    "evaluate_request",
    "parse_indicator_spec",
    "parse_indicator_specs",
]
