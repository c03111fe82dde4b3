"""Domain models."""

from .models import Bar, Interval, MarketSeries, parse_interval

__all__ = ["Bar", "Interval", "MarketSeries", "parse_interval"]
