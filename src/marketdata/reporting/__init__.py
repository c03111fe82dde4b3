"""Report generation."""

from .plot import generate_plotly_report

__all__ = ["generate_plotly_report"]
