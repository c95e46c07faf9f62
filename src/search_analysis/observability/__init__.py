"""Logging helpers for search-analysis."""

from search_analysis.observability.logging import JsonFormatter, configure_logging


__all__ = ["JsonFormatter", "configure_logging"]
