"""Grapheme-wise token reversal."""

from __future__ import annotations

from search_analysis.analysis.simple import TextMapTokenStream
from search_analysis.analysis.tokens import TokenStream
from search_analysis.analysis.unicode import reverse_graphemes


class ReverseFilter:
    """Reverses token text one grapheme cluster at a time.

    Offsets and positions are left untouched. Applying the filter twice
    returns the original text.
    """

    def transform(self, stream: TokenStream) -> TokenStream:
        return TextMapTokenStream(stream, reverse_graphemes)
