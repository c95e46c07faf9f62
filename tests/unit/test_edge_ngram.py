"""Unit tests for the edge n-gram filter."""

import pytest

from search_analysis.analysis.edge_ngram import EdgeNgramFilter, Side
from search_analysis.analysis.simple import WhitespaceTokenizer
from search_analysis.errors import ConfigurationError


def _grams(token_filter, text):
    stream = token_filter.transform(WhitespaceTokenizer().token_stream(text))
    return [(t.text, t.position, t.start_offset, t.end_offset) for t in stream]


@pytest.mark.unit
class TestEdgeNgramFilter:
    def test_front_grams_share_start_offset_and_position(self):
        assert _grams(EdgeNgramFilter(1, 3), "cat") == [("c", 0, 0, 1), ("ca", 0, 0, 2), ("cat", 0, 0, 3)]

    def test_back_grams_share_end_offset(self):
        assert _grams(EdgeNgramFilter(1, 3, side=Side.BACK), "cat") == [
            ("t", 0, 2, 3),
            ("at", 0, 1, 3),
            ("cat", 0, 0, 3),
        ]

    def test_each_input_keeps_its_own_position(self):
        grams = _grams(EdgeNgramFilter(1, 2), "cat dog")

        assert grams == [("c", 0, 0, 1), ("ca", 0, 0, 2), ("d", 1, 4, 5), ("do", 1, 4, 6)]

    def test_unbounded_max_grows_to_token_length(self):
        assert [g[0] for g in _grams(EdgeNgramFilter(2), "house")] == ["ho", "hou", "hous", "house"]

    def test_short_tokens_are_dropped_without_position_gap(self):
        grams = _grams(EdgeNgramFilter(2, 3), "a cat")

        assert grams == [("ca", 0, 2, 4), ("cat", 0, 2, 5)]

    def test_preserve_original_keeps_short_and_long_tokens(self):
        grams = _grams(EdgeNgramFilter(2, 2, preserve_original=True), "a cats")

        assert [(g[0], g[1]) for g in grams] == [("a", 0), ("ca", 1), ("cats", 1)]

    def test_byte_offsets_follow_utf8_width(self):
        stream = EdgeNgramFilter(1, 2).transform(WhitespaceTokenizer().token_stream("été".encode()))

        assert [(t.text, t.start_offset, t.end_offset) for t in stream] == [("é", 0, 2), ("ét", 0, 3)]

    def test_side_accepts_string(self):
        assert EdgeNgramFilter(1, side="back").side is Side.BACK

    @pytest.mark.parametrize("options", [{"min_gram": 3, "max_gram": 2}, {"min_gram": 0}, {"side": "middle"}])
    def test_invalid_bounds(self, options):
        with pytest.raises(ConfigurationError):
            EdgeNgramFilter(**options)
