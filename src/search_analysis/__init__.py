"""Tokenizers and token filters for full-text search analysis."""

from search_analysis.errors import AnalysisError, ConfigurationError, InputEncodingError


__version__ = "0.1.0"

__all__ = ["AnalysisError", "ConfigurationError", "InputEncodingError", "__version__"]
