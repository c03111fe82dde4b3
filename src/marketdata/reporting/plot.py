"""Plotly HTML report for enhanced series."""

from __future__ import annotations

import html
from collections.abc import Sequence
from pathlib import Path

import plotly.graph_objects as go

from marketdata.enhance.requests import IndicatorKind
from marketdata.enhance.series import EnhancedSeries, IndicatorColumn

# Indicators drawn on the price chart; everything else gets its own panel.
OVERLAY_KINDS = {IndicatorKind.SMA, IndicatorKind.EMA, IndicatorKind.BOLLINGER}


def _is_overlay(column: IndicatorColumn) -> bool:
    if column.request is None:
        return False
    return column.request.kind in OVERLAY_KINDS


def _line_traces(column: IndicatorColumn, dates: Sequence[object]) -> list[go.Scatter]:
    traces: list[go.Scatter] = []
    for key, values in zip(column.frame_keys(), column.lines.values()):
        traces.append(
            go.Scatter(x=list(dates), y=list(values), mode="lines", name=key, connectgaps=False)
        )
    return traces


def price_figure(enhanced: EnhancedSeries) -> go.Figure:
    """Candlesticks with moving-average and band overlays."""
    dates = list(enhanced.dates)
    figure = go.Figure()
    figure.add_trace(
        go.Candlestick(
            x=dates,
            open=list(enhanced.series.opens),
            high=list(enhanced.series.highs),
            low=list(enhanced.series.lows),
            close=list(enhanced.series.closes),
            name=enhanced.symbol,
        )
    )
    for column in enhanced.columns:
        if _is_overlay(column):
            for trace in _line_traces(column, dates):
                figure.add_trace(trace)
    figure.update_layout(
        title=f"{enhanced.symbol} ({enhanced.interval.value})",
        xaxis_rangeslider_visible=False,
    )
    return figure


def oscillator_figures(enhanced: EnhancedSeries) -> list[go.Figure]:
    dates = list(enhanced.dates)
    figures: list[go.Figure] = []
    for column in enhanced.columns:
        if _is_overlay(column):
            continue
        figure = go.Figure(data=_line_traces(column, dates))
        figure.update_layout(title=f"{enhanced.symbol} {column.label}", height=300)
        figures.append(figure)
    return figures


def generate_plotly_report(series_list: Sequence[EnhancedSeries], output_html_path: str) -> Path:
    """Write one HTML page with a price chart and oscillator panels per symbol."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    html_parts = [
        "<html><head><meta charset='utf-8'><title>market-data report</title></head><body>",
    ]
    include_plotlyjs: str | bool = "cdn"
    if not series_list:
        html_parts.append("<p>No series to report.</p>")
    for enhanced in series_list:
        html_parts.append(f"<h2>{html.escape(enhanced.symbol)}</h2>")
        for figure in [price_figure(enhanced), *oscillator_figures(enhanced)]:
            html_parts.append(figure.to_html(full_html=False, include_plotlyjs=include_plotlyjs))
            include_plotlyjs = False
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
    return output
