"""Error taxonomy shared by every analysis component."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for errors raised by the analysis library."""


class ConfigurationError(AnalysisError, ValueError):
    """Raised when a component cannot be built from its configuration.

    Configuration errors are always raised at construction time, before any
    token stream exists.
    """


class InputEncodingError(AnalysisError, ValueError):
    """Raised when the input text cannot be segmented safely.

    Offsets are expressed in the unit the caller supplied (characters for
    ``str`` input, bytes for ``bytes`` input) so the failure can be traced
    back to the offending span.
    """

    def __init__(self, message: str, *, start_offset: int, end_offset: int) -> None:
        super().__init__(f"{message} (offsets {start_offset}..{end_offset})")
        self.start_offset = start_offset
        self.end_offset = end_offset
