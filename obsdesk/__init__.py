"""Synoptic observation desk: station data entry and daily summaries."""

__version__ = "1.0.0"
